from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from dashboard.config import Settings
from dashboard.errors import StoreUnavailable
from dashboard.metrics import store_unavailable_total
from dashboard.models import Base

logger = logging.getLogger(__name__)


engine: Engine | None = None
_session_factory: sessionmaker | None = None


class _SessionWrapper:
    """Callable proxy returning sessions from the current factory."""

    def __call__(self, *args: Any, **kwargs: Any):
        if _session_factory is None:
            raise RuntimeError("Database not initialized")
        return _session_factory(*args, **kwargs)


SessionLocal = _SessionWrapper()


def _engine_options(database_url: str) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() == "sqlite":
        # writers queue on the file lock instead of failing fast
        return {"connect_args": {"timeout": 30, "check_same_thread": False}}
    return {
        "pool_size": 50,
        "max_overflow": 0,
        "pool_recycle": 30,
        "pool_pre_ping": True,
    }


def init_db(cfg: Settings) -> None:
    """Create engine and session factory using SQLAlchemy's ``create_engine``."""
    global engine, _session_factory

    engine = create_engine(cfg.database_url, future=True, **_engine_options(cfg.database_url))
    _session_factory = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
    )

    if cfg.db_create_all:
        Base.metadata.create_all(engine)


@contextmanager
def store_session(
    session_factory: Callable[[], Session] | None = None,
) -> Iterator[Session]:
    """Session whose database errors surface as ``StoreUnavailable``.

    The session is closed on the way out, so anything not committed is
    rolled back. Pool checkout timeouts count as the store being down.
    """
    factory = session_factory or SessionLocal
    try:
        with factory() as db:
            yield db
    except (DBAPIError, PoolTimeoutError) as exc:
        store_unavailable_total.inc()
        logger.exception("Database unavailable: %s", exc)
        raise StoreUnavailable() from exc


def ping_db() -> None:
    """Run a trivial query; raises if the database cannot be reached."""
    with store_session() as db:
        db.execute(text("SELECT 1"))
