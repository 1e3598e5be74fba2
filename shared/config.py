"""
Shared configuration management for the Dynamic Logic service.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DYNAMIC_LOGIC_",
        case_sensitive=False,
        extra="allow"
    )

    # Logging
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=True)


class DynamicLogicConfig(BaseConfig):
    """Engine-specific configuration."""

    service_name: str = "dynamic_logic"

    # Zone used for "today" and for displaying stored date-time values
    timezone: str = Field(default="UTC")

    # Origin tag passed along with panel mutations
    panel_source: str = Field(default="dynamicLogic")

    # Definitions file used by the validation script when no path is given
    definitions_file: Optional[str] = Field(default=None)


def get_config(**overrides) -> DynamicLogicConfig:
    """Get configuration for the engine."""
    return DynamicLogicConfig(**overrides)
