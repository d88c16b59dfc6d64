"""
Runtime Settings.

Settings for the Pulumi program itself, loaded from environment variables
with Pydantic Settings. These only shape diagnostics output; everything that
affects the resource graph comes from Pulumi stack configuration
(see n8n_gcp.config.deployment).

Environment variables:
    N8N_GCP_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
    N8N_GCP_LOG_FORMAT: "console" or "json" (default console)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """Program settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="N8N_GCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Render log events for a terminal or as JSON lines",
    )

    @property
    def json_logs(self) -> bool:
        """Check if log events should be rendered as JSON."""
        return self.log_format == "json"


@lru_cache
def get_settings() -> RuntimeSettings:
    """
    Get cached settings instance.

    Call get_settings.cache_clear() to reload settings if needed.
    """
    return RuntimeSettings()
