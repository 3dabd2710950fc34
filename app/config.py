"""Application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration (prefix ``ROOM_BOOKER_``)."""

    model_config = SettingsConfigDict(
        env_prefix="ROOM_BOOKER_", env_file=".env", env_file_encoding="utf-8"
    )

    database_url: str = Field(
        default="sqlite:///./data/rooms_booking.db",
        description="SQLAlchemy database URL. Defaults to local SQLite.",
    )
    api_prefix: str = Field(default="/api", description="Prefix for all API routes")
    host: str = Field(default="127.0.0.1", description="Interface the server binds to")
    port: int = Field(default=8000, description="Port the server listens on")
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    seed_demo_data: bool = Field(
        default=False, description="Seed demo rooms and bookings on startup when empty"
    )

    # Stricter booking policies, all off by default.
    enforce_time_order: bool = Field(default=False, description="Reject bookings where start >= end")
    reject_overlaps: bool = Field(
        default=False, description="Reject bookings overlapping another booking of the same room"
    )
    enforce_transitions: bool = Field(
        default=False, description="Only allow status changes listed in the transition table"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""
    get_settings.cache_clear()
