"""Alembic environment for the directory and quota schema."""
import sys
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

load_dotenv()

# project root on sys.path before importing dashboard
sys.path.append(str(Path(__file__).resolve().parents[1]))

from dashboard.config import Settings  # noqa: E402
from dashboard.models import Base  # noqa: E402

target_metadata = Base.metadata
config = context.config


def _database_url() -> str:
    """``alembic -x db_url=...`` wins over DATABASE_URL."""
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    return override or Settings().database_url


url = _database_url()
# configparser treats % as interpolation
config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))

# SQLite cannot alter constraints in place; later revisions rely on batch mode
render_as_batch = make_url(url).get_backend_name() == "sqlite"


def run_migrations_offline() -> None:
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
