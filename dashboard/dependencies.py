from __future__ import annotations

import logging

import jwt
import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dashboard.config import Settings
from dashboard.errors import RateLimited, ThrottleUnavailable, Unauthorized
from dashboard.services.quota import QuotaLedger, build_ledger

settings = Settings()
redis_client = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)

bearer_scheme = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


async def current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the caller from the identity provider's bearer token (``sub`` claim)."""
    if credentials is None:
        raise Unauthorized()
    try:
        claims = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as exc:
        logger.info("expired bearer token")
        raise Unauthorized() from exc
    except jwt.PyJWTError as exc:
        logger.warning("audit: invalid bearer token: %s", exc)
        raise Unauthorized() from exc

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id.strip():
        raise Unauthorized()
    return user_id


async def rate_limit(user_id: str = Depends(current_user)) -> str:
    """Throttle requests per user via Redis."""
    user_key = f"rate:user:{user_id}"

    try:
        pipe = redis_client.pipeline()
        pipe.incr(user_key)
        pipe.expire(user_key, 60)
        user_count, _ = await pipe.execute()
    except RedisError as exc:
        logger.exception("Redis unavailable for rate limiting: %s", exc)
        raise ThrottleUnavailable() from exc
    if user_count > settings.rate_limit_per_minute:
        raise RateLimited()

    return user_id


def get_quota_ledger() -> QuotaLedger:
    return build_ledger(settings)


def pagination(page: int = 1, limit: int | None = None) -> tuple[int, int]:
    """Normalize ``page``/``limit`` query params: page >= 1, limit in [1, max]."""
    page = max(1, page)
    if limit is None:
        limit = settings.default_page_size
    limit = max(1, min(limit, settings.max_page_size))
    return page, limit
