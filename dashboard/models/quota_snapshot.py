from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String, Text

from .base import Base


class QuotaSnapshot(Base):
    """Per-user document of contacts viewed on ``last_view_date``.

    ``version`` is bumped on every write; writers only succeed when the
    version they read is still current.
    """

    __tablename__ = "quota_snapshots"

    user_id = Column(String(255), primary_key=True)
    viewed_contact_ids = Column(Text, nullable=False, server_default="[]")  # JSON array
    last_view_date = Column(Date, nullable=False)
    version = Column(Integer, nullable=False, server_default="0")
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


__all__ = ["QuotaSnapshot"]
