from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from .base import Base


class Agency(Base):
    """Directory agency (school district, supervisory union, ...)."""

    __tablename__ = "agencies"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    state = Column(String(64))
    state_code = Column(String(8))
    type = Column(String(128))
    population = Column(String(32))
    website = Column(String(512))
    total_schools = Column(String(32))
    total_students = Column(String(32))
    mailing_address = Column(String(512))
    grade_span = Column(String(64))
    locale = Column(String(128))
    csa_cbsa = Column(String(255))
    domain_name = Column(String(255))
    physical_address = Column(String(512))
    phone = Column(String(64))
    status = Column(String(64))
    student_teacher_ratio = Column(String(32))
    supervisory_union = Column(String(255))
    county = Column(String(128))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


__all__ = ["Agency"]
