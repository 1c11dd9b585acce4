"""Kernel settings, read from APL_* environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the APL Kernel API."""

    model_config = SettingsConfigDict(
        env_prefix="APL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "info"
    json_logs: bool = False
    max_events_per_check: int = Field(default=500_000, ge=1)
