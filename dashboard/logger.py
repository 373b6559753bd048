import json  # JSON serialization
import logging
from datetime import datetime, timezone

from sqlalchemy.engine import make_url

from dashboard.config import Settings

# request context passed through ``extra=`` and copied into each line
CONTEXT_FIELDS = ("user_id", "contact_id", "quota_backend", "charged")


class JsonFormatter(logging.Formatter):
    """Format log records as JSON, with quota context when present."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def setup_logging(level: int | str = logging.INFO) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler])


def log_startup_info(cfg: Settings, logger: logging.Logger) -> None:
    """Log which configuration the process started with. Secrets are never printed."""
    url = make_url(cfg.database_url)
    logger.info(
        "startup: daily_contact_limit=%s db_dialect=%s db_name=%s",
        cfg.daily_contact_limit,
        url.get_backend_name(),
        url.database,
        extra={"quota_backend": cfg.quota_backend},
    )
    if cfg.jwt_secret == "test-jwt-secret":
        logger.warning("startup: JWT_SECRET is not set, using the test secret")
    if url.password is None and url.get_backend_name() != "sqlite":
        logger.warning("startup: DATABASE_URL has no password")
