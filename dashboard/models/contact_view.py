"""Append-only record of contacts charged against a user's daily quota."""
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Index, Integer, String, UniqueConstraint

from .base import Base


class ContactView(Base):
    """One contact charged to one user on one UTC day."""

    __tablename__ = "contact_views"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "contact_id", "view_day", name="uq_contact_views_user_contact_day"
        ),
        Index("ix_contact_views_user_day", "user_id", "view_day"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(String(255), nullable=False)
    contact_id = Column(String(64), nullable=False)
    viewed_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    view_day = Column(Date, nullable=False)  # UTC calendar day of viewed_at


__all__ = ["ContactView"]
