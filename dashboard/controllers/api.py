from fastapi import APIRouter

from . import agencies, contacts, health

router = APIRouter(prefix="/api")
router.include_router(health.router)
router.include_router(agencies.router)
# contacts router also serves /user-stats
router.include_router(contacts.router)
