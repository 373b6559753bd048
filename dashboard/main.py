from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from dashboard import __version__, dependencies
from dashboard.config import Settings
from dashboard.controllers import api
from dashboard.db import init_db
from dashboard.errors import DashboardError, InvalidInput
from dashboard.logger import log_startup_info, setup_logging

settings = Settings()
setup_logging(settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_startup_info(settings, logger)
    await asyncio.to_thread(init_db, settings)
    yield
    await dependencies.redis_client.aclose()


app = FastAPI(
    title="Agency Contact Dashboard API",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    logger.info("%s %s rejected: invalid %s", request.method, request.url.path, fields)
    error = InvalidInput(f"Invalid value for {', '.join(fields)}" if fields else None)
    return JSONResponse(status_code=error.status_code, content=error.to_content())


app.include_router(api.router)

# 👇 Prometheus metrics on /metrics
Instrumentator().instrument(app).expose(app)
