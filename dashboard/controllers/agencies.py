import asyncio

from fastapi import APIRouter, Depends

from dashboard.db import store_session
from dashboard.dependencies import pagination, rate_limit
from dashboard.errors import NotFound
from dashboard.schemas import AgencyOut, AgencyPage, ErrorResponse
from dashboard.services import directory

router = APIRouter()


@router.get(
    "/agencies",
    response_model=AgencyPage,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_agencies(
    search: str | None = None,
    paging: tuple[int, int] = Depends(pagination),
    user_id: str = Depends(rate_limit),
):
    page, limit = paging

    def _db_call() -> tuple[list[AgencyOut], int]:
        with store_session() as db:
            rows = directory.list_agencies(
                db, limit=limit, offset=(page - 1) * limit, search=search
            )
            total = directory.count_agencies(db, search=search)
            return [AgencyOut.model_validate(row) for row in rows], total

    items, total = await asyncio.to_thread(_db_call)
    return AgencyPage(data=items, total=total)


@router.get(
    "/agencies/{agency_id}",
    response_model=AgencyOut,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_agency(agency_id: str, user_id: str = Depends(rate_limit)):
    def _db_call() -> AgencyOut | None:
        with store_session() as db:
            row = directory.get_agency(db, agency_id)
            return AgencyOut.model_validate(row) if row else None

    agency = await asyncio.to_thread(_db_call)
    if agency is None:
        raise NotFound("Agency not found")
    return agency
