from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONTACT_ID_MAX_LENGTH = 64


class AgencyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    name: str
    state: str | None = None
    state_code: str | None = None
    type: str | None = None
    population: str | None = None
    website: str | None = None
    total_schools: str | None = None
    total_students: str | None = None
    mailing_address: str | None = None
    grade_span: str | None = None
    locale: str | None = None
    csa_cbsa: str | None = None
    domain_name: str | None = None
    physical_address: str | None = None
    phone: str | None = None
    status: str | None = None
    student_teacher_ratio: str | None = None
    supervisory_union: str | None = None
    county: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    agency_id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    title: str | None = None
    email_type: str | None = None
    contact_form_url: str | None = None
    firm_id: str | None = None
    department: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AgencyPage(_CamelModel):
    success: bool = True
    data: list[AgencyOut]
    total: int


class ContactPage(_CamelModel):
    success: bool
    data: list[ContactOut]
    total: int
    remaining: int
    viewed_count: int = Field(alias="viewedCount")
    limit_reached: bool = Field(alias="limitReached")


class ViewContactRequest(BaseModel):
    contact_id: str = Field(
        alias="contactId", min_length=1, max_length=CONTACT_ID_MAX_LENGTH
    )

    @field_validator("contact_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value


class ViewContactResponse(_CamelModel):
    success: bool = True
    already_viewed: bool = Field(alias="alreadyViewed")
    viewed_count: int = Field(alias="viewedCount")


class UserStats(_CamelModel):
    remaining: int
    viewed_count: int = Field(alias="viewedCount")
    limit: int


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "CONTACT_ID_MAX_LENGTH",
    "AgencyOut",
    "ContactOut",
    "AgencyPage",
    "ContactPage",
    "ViewContactRequest",
    "ViewContactResponse",
    "UserStats",
    "ErrorResponse",
]
