from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String

from .base import Base


class Contact(Base):
    """Person listed under an agency. Only ``id`` matters to quota accounting."""

    __tablename__ = "contacts"
    __table_args__ = (
        Index("ix_contacts_name", "last_name", "first_name"),
    )

    id = Column(String(64), primary_key=True)
    agency_id = Column(String(64), ForeignKey("agencies.id"), nullable=False, index=True)
    first_name = Column(String(128))
    last_name = Column(String(128))
    email = Column(String(255))
    phone = Column(String(64))
    title = Column(String(255))
    email_type = Column(String(64))
    contact_form_url = Column(String(512))
    firm_id = Column(String(64))
    department = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


__all__ = ["Contact"]
