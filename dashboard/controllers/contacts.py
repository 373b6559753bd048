import asyncio
import json

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from dashboard.dependencies import get_quota_ledger, pagination, rate_limit
from dashboard.errors import InvalidInput
from dashboard.schemas import (
    CONTACT_ID_MAX_LENGTH,
    ContactPage,
    ErrorResponse,
    UserStats,
    ViewContactRequest,
    ViewContactResponse,
)
from dashboard.services.quota import QuotaLedger
from dashboard.services.view_tracking import admit_page, admit_single

router = APIRouter()


@router.get(
    "/contacts",
    response_model=ContactPage,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_contacts(
    search: str | None = None,
    paging: tuple[int, int] = Depends(pagination),
    user_id: str = Depends(rate_limit),
    ledger: QuotaLedger = Depends(get_quota_ledger),
):
    """List a page of contacts, charging the shown rows to today's quota."""
    page, limit = paging
    result = await asyncio.to_thread(
        admit_page, ledger, user_id, page=page, limit=limit, search=search
    )
    return ContactPage(
        success=result.success,
        data=result.contacts,
        total=result.total,
        remaining=result.state.remaining,
        viewed_count=result.state.viewed_count,
        limit_reached=result.limit_reached,
    )


@router.post(
    "/contacts/view",
    response_model=ViewContactResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def view_contact(
    request: Request,
    user_id: str = Depends(rate_limit),
    ledger: QuotaLedger = Depends(get_quota_ledger),
):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidInput("Invalid JSON payload") from exc

    try:
        body = ViewContactRequest.model_validate(payload)
    except ValidationError as exc:
        if any(err["type"] == "string_too_long" for err in exc.errors()):
            raise InvalidInput(
                f"Contact ID must be at most {CONTACT_ID_MAX_LENGTH} characters"
            ) from exc
        raise InvalidInput("Contact ID is required") from exc

    admission = await asyncio.to_thread(admit_single, ledger, user_id, body.contact_id)
    return ViewContactResponse(
        already_viewed=admission.already_viewed,
        viewed_count=admission.viewed_count,
    )


@router.get(
    "/user-stats",
    response_model=UserStats,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def user_stats(
    user_id: str = Depends(rate_limit),
    ledger: QuotaLedger = Depends(get_quota_ledger),
):
    state = await asyncio.to_thread(ledger.state, user_id)
    return UserStats(
        remaining=state.remaining,
        viewed_count=state.viewed_count,
        limit=state.limit,
    )
