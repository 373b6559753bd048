"""Error kinds surfaced by the API.

Each error carries the HTTP status it maps to; the handlers in
``dashboard.main`` render them as ``{"error": message, ...}``.
"""
from __future__ import annotations

from typing import Any


class DashboardError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message}


class Unauthorized(DashboardError):
    status_code = 401
    message = "Unauthorized"


class InvalidInput(DashboardError):
    status_code = 400
    message = "Invalid request"


class NotFound(DashboardError):
    status_code = 404
    message = "Not found"


class LimitExceeded(DashboardError):
    status_code = 403
    message = "Daily contact view limit exceeded"

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message, "limitExceeded": True}


class StoreUnavailable(DashboardError):
    status_code = 500
    message = "Backing store unavailable"


class RateLimited(DashboardError):
    status_code = 429
    message = "Rate limit exceeded"


class ThrottleUnavailable(DashboardError):
    status_code = 503
    message = "Rate limiter unavailable"


__all__ = [
    "DashboardError",
    "Unauthorized",
    "InvalidInput",
    "NotFound",
    "LimitExceeded",
    "StoreUnavailable",
    "RateLimited",
    "ThrottleUnavailable",
]
