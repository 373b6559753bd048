import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from dashboard import __version__
from dashboard.db import ping_db
from dashboard.errors import StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness plus a ``SELECT 1`` round trip. No authentication."""
    try:
        await asyncio.to_thread(ping_db)
    except StoreUnavailable:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "version": __version__, "database": "unavailable"},
        )
    return {"status": "healthy", "version": __version__, "database": "ok"}
