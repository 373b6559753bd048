from __future__ import annotations

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from dashboard.models import Agency, Contact


def _pattern(search: str | None) -> str | None:
    term = (search or "").strip()
    if not term:
        return None
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


def _agency_query(db: Session, search: str | None) -> Query:
    query = db.query(Agency)
    pattern = _pattern(search)
    if pattern:
        query = query.filter(
            or_(
                func.lower(Agency.name).like(pattern, escape="\\"),
                func.lower(Agency.state).like(pattern, escape="\\"),
                func.lower(Agency.type).like(pattern, escape="\\"),
                func.lower(Agency.county).like(pattern, escape="\\"),
            )
        )
    return query


def _contact_query(db: Session, search: str | None) -> Query:
    query = db.query(Contact)
    pattern = _pattern(search)
    if pattern:
        full_name = func.coalesce(Contact.first_name, "") + " " + func.coalesce(
            Contact.last_name, ""
        )
        query = query.filter(
            or_(
                func.lower(full_name).like(pattern, escape="\\"),
                func.lower(Contact.email).like(pattern, escape="\\"),
                func.lower(Contact.title).like(pattern, escape="\\"),
                func.lower(Contact.department).like(pattern, escape="\\"),
            )
        )
    return query


def list_agencies(
    db: Session, *, limit: int, offset: int = 0, search: str | None = None
) -> list[Agency]:
    return (
        _agency_query(db, search)
        .order_by(Agency.name, Agency.id)
        .offset(offset)
        .limit(limit)
        .all()
    )


def count_agencies(db: Session, *, search: str | None = None) -> int:
    return _agency_query(db, search).count()


def get_agency(db: Session, agency_id: str) -> Agency | None:
    return db.get(Agency, agency_id)


def list_contacts(
    db: Session, *, limit: int, offset: int = 0, search: str | None = None
) -> list[Contact]:
    return (
        _contact_query(db, search)
        .order_by(Contact.last_name, Contact.first_name, Contact.id)
        .offset(offset)
        .limit(limit)
        .all()
    )


def count_contacts(db: Session, *, search: str | None = None) -> int:
    return _contact_query(db, search).count()


def get_contact(db: Session, contact_id: str) -> Contact | None:
    return db.get(Contact, contact_id)


__all__ = [
    "list_agencies",
    "count_agencies",
    "get_agency",
    "list_contacts",
    "count_contacts",
    "get_contact",
]
