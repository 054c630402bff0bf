"""Bridge settings using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Bridge configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VOIP_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Push Delivery Configuration
    # -------------------------------------------------------------------------
    completion_delay_seconds: float = Field(default=1.0, ge=0.0)  # UI render head start
    accepted_push_types: list[str] = ["voip"]

    # -------------------------------------------------------------------------
    # Call Presentation Configuration
    # -------------------------------------------------------------------------
    unknown_caller_name: str = "Unknown"

    # -------------------------------------------------------------------------
    # Token Registration Configuration
    # -------------------------------------------------------------------------
    registration_url: str | None = None
    registration_timeout: float = 10.0

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
