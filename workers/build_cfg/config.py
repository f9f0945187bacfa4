"""
build_cfg configuration
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CLI defaults, overridable with BUILD_CFG_* variables or flags."""

    # Directives
    LEGACY_PREFIX: bool = False  # cargo: instead of cargo::

    # Logging (stderr; stdout carries directives)
    LOG_LEVEL: str = "WARNING"

    # Report
    REPORT_DIR: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="BUILD_CFG_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
