"""Daily contact-view quota accounting.

A user may be shown at most ``daily_contact_limit`` distinct contacts per UTC
calendar day. Showing the same contact again on the same day is free.

Two stores are supported, selected by ``QUOTA_BACKEND``:

- ``ledger``: one ``contact_views`` row per (user, contact, day). The unique
  constraint on that triple is what makes concurrent charges count once.
- ``snapshot``: one ``quota_snapshots`` row per user holding the set of
  contacts seen on ``last_view_date``. Writes are guarded by a version
  column and retried on conflict.

The two are not interchangeable on the same dataset.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Callable, ContextManager, Iterable, NamedTuple

from sqlalchemy import Date, DateTime, Integer, Text, bindparam, text
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from dashboard import db as db_module
from dashboard.config import Settings
from dashboard.errors import StoreUnavailable
from dashboard.metrics import (
    contact_views_charged_total,
    quota_snapshot_conflict_total,
)

settings = Settings()
logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def calendar_day_of(instant: datetime) -> date:
    """UTC calendar date of ``instant``; naive values are taken as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc).date()


class QuotaState(NamedTuple):
    """Quota usage for one user at one instant."""

    viewed_count: int
    remaining: int
    limit: int

    @property
    def limit_reached(self) -> bool:
        return self.remaining == 0


def _unique_ids(contact_ids: Iterable[Any]) -> list[str]:
    seen: dict[str, None] = {}
    for raw in contact_ids:
        if raw is None:
            continue
        cid = str(raw).strip()
        if cid:
            seen.setdefault(cid, None)
    return list(seen)


class QuotaLedger(ABC):
    """Common contract of both quota stores.

    Every public call reads the clock once, so a call that runs across
    midnight still works against a single day. Callers that chain several
    calls pass ``day`` explicitly to pin them all to the same day.
    """

    def __init__(
        self,
        daily_limit: int | None = None,
        clock: Clock = utc_now,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self.daily_limit = (
            settings.daily_contact_limit if daily_limit is None else daily_limit
        )
        self._clock = clock
        self._session_factory = session_factory or db_module.SessionLocal

    def today(self) -> date:
        return calendar_day_of(self._clock())

    def _session(self) -> ContextManager[Session]:
        return db_module.store_session(self._session_factory)

    @abstractmethod
    def charge_if_absent(
        self, user_id: str, contact_ids: Iterable[Any], *, day: date | None = None
    ) -> int:
        """Charge each contact not yet charged today. Returns how many were new."""

    @abstractmethod
    def _count_on(self, db: Session, user_id: str, day: date) -> int:
        ...

    @abstractmethod
    def _has_on(self, db: Session, user_id: str, contact_id: str, day: date) -> bool:
        ...

    def count_today(self, user_id: str, *, day: date | None = None) -> int:
        day = day or self.today()
        with self._session() as db:
            return self._count_on(db, user_id, day)

    def has_viewed(self, user_id: str, contact_id: Any, *, day: date | None = None) -> bool:
        ids = _unique_ids([contact_id])
        if not ids:
            return False
        day = day or self.today()
        with self._session() as db:
            return self._has_on(db, user_id, ids[0], day)

    def state(self, user_id: str, *, day: date | None = None) -> QuotaState:
        count = self.count_today(user_id, day=day)
        return QuotaState(
            viewed_count=count,
            remaining=max(0, self.daily_limit - count),
            limit=self.daily_limit,
        )

    def remaining(self, user_id: str) -> int:
        return self.state(user_id).remaining

    def can_admit(self, user_id: str, n: int = 1, *, day: date | None = None) -> bool:
        """Advisory pre-check; the charge itself is authoritative."""
        return self.count_today(user_id, day=day) + n <= self.daily_limit


# --- append-only ledger -----------------------------------------------------

_INSERT_VIEW = text(
    "INSERT INTO contact_views (user_id, contact_id, viewed_at, view_day) "
    "VALUES (:uid, :cid, :viewed_at, :day) "
    "ON CONFLICT (user_id, contact_id, view_day) DO NOTHING"
).bindparams(
    bindparam("viewed_at", type_=DateTime(timezone=True)),
    bindparam("day", type_=Date),
)

_COUNT_VIEWS = text(
    "SELECT COUNT(*) FROM contact_views WHERE user_id = :uid AND view_day = :day"
).bindparams(bindparam("day", type_=Date))

_HAS_VIEW = text(
    "SELECT 1 FROM contact_views "
    "WHERE user_id = :uid AND contact_id = :cid AND view_day = :day LIMIT 1"
).bindparams(bindparam("day", type_=Date))


class ContactViewLedger(QuotaLedger):
    """Quota kept as ``contact_views`` rows, unique per (user, contact, day).

    Yesterday's rows fall outside the ``view_day`` filter, so there is no
    reset job and history stays available for audit.
    """

    def charge_if_absent(
        self, user_id: str, contact_ids: Iterable[Any], *, day: date | None = None
    ) -> int:
        ids = _unique_ids(contact_ids)
        if not ids:
            return 0
        now = self._clock()
        day = day or calendar_day_of(now)
        inserted = 0
        with self._session() as db:
            for cid in ids:
                result = db.execute(
                    _INSERT_VIEW,
                    {"uid": user_id, "cid": cid, "viewed_at": now, "day": day},
                )
                inserted += max(result.rowcount, 0)
            db.commit()
        if inserted:
            contact_views_charged_total.inc(inserted)
        logger.debug(
            "charged %s of %s contacts on %s",
            inserted,
            len(ids),
            day,
            extra={"user_id": user_id, "charged": inserted},
        )
        return inserted

    def _count_on(self, db: Session, user_id: str, day: date) -> int:
        return db.execute(_COUNT_VIEWS, {"uid": user_id, "day": day}).scalar_one()

    def _has_on(self, db: Session, user_id: str, contact_id: str, day: date) -> bool:
        row = db.execute(
            _HAS_VIEW, {"uid": user_id, "cid": contact_id, "day": day}
        ).first()
        return row is not None


# --- per-user snapshot ------------------------------------------------------

_SELECT_SNAPSHOT = text(
    "SELECT viewed_contact_ids, last_view_date, version "
    "FROM quota_snapshots WHERE user_id = :uid"
).columns(viewed_contact_ids=Text, last_view_date=Date, version=Integer)

_INSERT_SNAPSHOT = text(
    "INSERT INTO quota_snapshots (user_id, viewed_contact_ids, last_view_date, version, updated_at) "
    "VALUES (:uid, '[]', :day, 0, CURRENT_TIMESTAMP) "
    "ON CONFLICT (user_id) DO NOTHING"
).bindparams(bindparam("day", type_=Date))

_UPDATE_SNAPSHOT = text(
    "UPDATE quota_snapshots "
    "SET viewed_contact_ids = :ids, last_view_date = :day, "
    "version = version + 1, updated_at = CURRENT_TIMESTAMP "
    "WHERE user_id = :uid AND version = :version"
).bindparams(bindparam("day", type_=Date))


def _viewed_on(row: Row | None, day: date) -> set[str]:
    """Contacts charged on ``day``; a snapshot from an earlier day counts as empty."""
    if row is None or row.last_view_date != day:
        return set()
    return set(json.loads(row.viewed_contact_ids or "[]"))


class SnapshotLedger(QuotaLedger):
    """Quota kept as one mutable document per user.

    Read set, add ids, write back only if ``version`` is unchanged. A lost
    race re-reads and tries again.
    """

    def __init__(self, *args: Any, max_retries: int | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.max_retries = (
            settings.snapshot_max_retries if max_retries is None else max_retries
        )

    def _read(self, db: Session, user_id: str) -> Row | None:
        return db.execute(_SELECT_SNAPSHOT, {"uid": user_id}).first()

    def _read_or_create(self, db: Session, user_id: str, day: date) -> Row:
        row = self._read(db, user_id)
        if row is None:
            # a concurrent creator is fine; the row exists either way
            db.execute(_INSERT_SNAPSHOT, {"uid": user_id, "day": day})
            db.commit()
            row = self._read(db, user_id)
        return row

    def charge_if_absent(
        self, user_id: str, contact_ids: Iterable[Any], *, day: date | None = None
    ) -> int:
        """Add ``contact_ids`` to today's set with a versioned write.

        The first write is always tried; ``max_retries`` bounds how many
        more are made after losing a race to another writer.
        """
        ids = _unique_ids(contact_ids)
        if not ids:
            return 0
        day = day or self.today()
        with self._session() as db:
            row = self._read_or_create(db, user_id, day)
            for attempt in range(self.max_retries + 1):
                viewed = _viewed_on(row, day)
                new_ids = [cid for cid in ids if cid not in viewed]
                if not new_ids:
                    return 0
                viewed.update(new_ids)
                result = db.execute(
                    _UPDATE_SNAPSHOT,
                    {
                        "uid": user_id,
                        "ids": json.dumps(sorted(viewed)),
                        "day": day,
                        "version": row.version,
                    },
                )
                if result.rowcount == 1:
                    db.commit()
                    contact_views_charged_total.inc(len(new_ids))
                    return len(new_ids)
                db.rollback()
                quota_snapshot_conflict_total.inc()
                logger.debug(
                    "snapshot conflict for user %s (version %s, attempt %s)",
                    user_id,
                    row.version,
                    attempt + 1,
                    extra={"user_id": user_id},
                )
                row = self._read(db, user_id)
        logger.error(
            "snapshot for user %s still conflicting after %s retries",
            user_id,
            self.max_retries,
            extra={"user_id": user_id},
        )
        raise StoreUnavailable("Quota store is busy, try again")

    def _count_on(self, db: Session, user_id: str, day: date) -> int:
        return len(_viewed_on(self._read(db, user_id), day))

    def _has_on(self, db: Session, user_id: str, contact_id: str, day: date) -> bool:
        return contact_id in _viewed_on(self._read(db, user_id), day)


def build_ledger(cfg: Settings | None = None, **kwargs: Any) -> QuotaLedger:
    """Ledger for the configured backend."""
    cfg = cfg or settings
    if cfg.quota_backend == "snapshot":
        return SnapshotLedger(
            daily_limit=cfg.daily_contact_limit,
            max_retries=cfg.snapshot_max_retries,
            **kwargs,
        )
    return ContactViewLedger(daily_limit=cfg.daily_contact_limit, **kwargs)


__all__ = [
    "Clock",
    "QuotaState",
    "QuotaLedger",
    "ContactViewLedger",
    "SnapshotLedger",
    "build_ledger",
    "calendar_day_of",
    "utc_now",
]
