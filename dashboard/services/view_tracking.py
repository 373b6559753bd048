"""Admission of contact views against the daily quota.

Two entry points:

- ``admit_single``: one contact opened from the UI.
- ``admit_page``: a page of contacts listed at once. The page is cut down
  to the remaining allowance instead of failing, and the kept rows are
  charged in one batch. Re-sending the same page does not charge twice.
"""
from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from sqlalchemy.orm import Session

from dashboard.db import store_session
from dashboard.errors import LimitExceeded
from dashboard.metrics import quota_page_trimmed_total, quota_reject_total
from dashboard.schemas import ContactOut
from dashboard.services import directory
from dashboard.services.quota import QuotaLedger, QuotaState

logger = logging.getLogger(__name__)


class ViewAdmission(NamedTuple):
    already_viewed: bool
    viewed_count: int


class PageAdmission(NamedTuple):
    success: bool
    contacts: list[ContactOut]
    total: int
    state: QuotaState
    limit_reached: bool
    charged: int


def admit_single(ledger: QuotaLedger, user_id: str, contact_id: str) -> ViewAdmission:
    """Charge one contact unless it was already charged today.

    Raises ``LimitExceeded`` when the contact is new and the allowance is
    used up; nothing is recorded in that case.
    """
    day = ledger.today()
    if ledger.has_viewed(user_id, contact_id, day=day):
        return ViewAdmission(
            already_viewed=True, viewed_count=ledger.count_today(user_id, day=day)
        )

    if not ledger.can_admit(user_id, 1, day=day):
        quota_reject_total.inc()
        logger.info(
            "daily contact limit reached",
            extra={"user_id": user_id, "contact_id": contact_id},
        )
        raise LimitExceeded()

    ledger.charge_if_absent(user_id, [contact_id], day=day)
    return ViewAdmission(
        already_viewed=False, viewed_count=ledger.count_today(user_id, day=day)
    )


def admit_page(
    ledger: QuotaLedger,
    user_id: str,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> PageAdmission:
    day = ledger.today()
    before = ledger.state(user_id, day=day)
    if before.limit_reached:
        quota_page_trimmed_total.inc()
        return PageAdmission(
            success=False,
            contacts=[],
            total=0,
            state=before,
            limit_reached=True,
            charged=0,
        )

    offset = (page - 1) * limit
    with store_session(session_factory) as db:
        rows = directory.list_contacts(db, limit=limit, offset=offset, search=search)
        total = directory.count_contacts(db, search=search)
        contacts = [ContactOut.model_validate(row) for row in rows]

    # trim policy: never charge more than what is left today
    trimmed = len(contacts) > before.remaining
    if trimmed:
        quota_page_trimmed_total.inc()
        contacts = contacts[: before.remaining]

    charged = ledger.charge_if_absent(user_id, [c.id for c in contacts], day=day)
    after = ledger.state(user_id, day=day)
    return PageAdmission(
        success=True,
        contacts=contacts,
        total=total,
        state=after,
        limit_reached=trimmed or after.limit_reached,
        charged=charged,
    )


__all__ = ["ViewAdmission", "PageAdmission", "admit_single", "admit_page"]
