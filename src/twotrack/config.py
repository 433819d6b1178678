"""
Configuration — typed settings loaded from the environment or a .env file.

The containers need no configuration. These settings only drive the
ambient pieces around them: how twotrack.logs renders log lines and the level
LoggingExecutionContext logs at.

    TWOTRACK_LOG_LEVEL=DEBUG
    TWOTRACK_JSON_LOGS=true
    TWOTRACK_EXECUTION_LOG_LEVEL=DEBUG

Invalid values fail when the settings are first loaded, not mid-pipeline.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class TwotrackSettings(BaseSettings):
    """
    Library settings.

    Load order (highest priority first):
      1. Environment variables (TWOTRACK_ prefix)
      2. .env file in the working directory
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="TWOTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum level rendered by configure_structlog")
    json_logs: bool = Field(default=False, description="Render JSON lines instead of console output")
    execution_log_level: str = Field(
        default="INFO",
        description="Level LoggingExecutionContext uses for started/completed events",
    )

    @field_validator("log_level", "execution_log_level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in _LEVEL_NAMES:
            raise ValueError(f"Unknown log level {value!r}, expected one of {', '.join(_LEVEL_NAMES)}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> TwotrackSettings:
    """Load settings once; call get_settings.cache_clear() to reload."""
    return TwotrackSettings()
