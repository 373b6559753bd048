from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    jwt_secret: str = Field("test-jwt-secret", alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    database_url: str = Field(
        "sqlite:////tmp/dashboard_test.db", alias="DATABASE_URL"
    )
    db_create_all: bool = Field(False, alias="DB_CREATE_ALL")

    redis_url: str = Field("redis://localhost:6379", alias="REDIS_URL")
    rate_limit_per_minute: int = Field(300, alias="RATE_LIMIT_PER_MINUTE")

    daily_contact_limit: int = Field(50, alias="DAILY_CONTACT_LIMIT")
    quota_backend: Literal["ledger", "snapshot"] = Field(
        "ledger",
        alias="QUOTA_BACKEND",
        description="ledger: append-only contact_views; snapshot: per-user document",
    )
    snapshot_max_retries: int = Field(50, alias="SNAPSHOT_MAX_RETRIES")

    default_page_size: int = 20
    max_page_size: int = 100

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = ConfigDict(
        extra="ignore",
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
    )
