"""
scintiflow Configuration Module

Centralized configuration management using Pydantic Settings.
Supports environment variables and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkflowSettings(BaseSettings):
    """Pathway engine and persistence settings."""

    model_config = SettingsConfigDict(
        env_prefix="SCINTIFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    log_json: bool = True

    # Persistence
    snapshot_path: str = "data/patients.json"

    # Engine
    enforce_current_room: bool = True
    tie_break_ms: int = Field(default=1, ge=1)


class Settings:
    """
    Aggregated settings container.

    Usage:
        from scintiflow.config import get_settings
        settings = get_settings()
        print(settings.workflow.snapshot_path)
    """

    def __init__(self):
        self.workflow = WorkflowSettings()

    @property
    def is_development(self) -> bool:
        return self.workflow.env == "development"

    @property
    def is_production(self) -> bool:
        return self.workflow.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: The application settings
    """
    return Settings()
