"""
Configuration Settings.

This module defines the library configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Observability Configuration Models
# =====================================================================


class LogfireConfig(BaseModel):
    """Logfire tracing and metrics configuration."""

    enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED", description="Enable Logfire export")
    token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN", description="Logfire write token")
    project_name: str = Field(default="actionkit-ai", alias="LOGFIRE_PROJECT_NAME", description="Logfire project name")
    environment: str = Field(
        default="development", alias="LOGFIRE_ENVIRONMENT", description="Deployment environment reported to Logfire"
    )
    service_name: str = Field(
        default="actionkit-ai", alias="LOGFIRE_SERVICE_NAME", description="Service name attached to spans"
    )
    service_version: str = Field(
        default="0.0.0", alias="LOGFIRE_SERVICE_VERSION", description="Service version attached to spans"
    )
    sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, alias="LOGFIRE_SAMPLE_RATE", description="Head sampling rate"
    )
    trace_sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, alias="LOGFIRE_TRACE_SAMPLE_RATE", description="Tail sampling rate"
    )
    trace_pydantic_ai: bool = Field(
        default=True, alias="LOGFIRE_TRACE_PYDANTIC_AI", description="Instrument pydantic-ai model calls"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Library settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="ACTIONKIT_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="ACTIONKIT_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="ACTIONKIT_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Write DEBUG-level logs to a file in addition to the console",
        alias="ACTIONKIT_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Logfire Configuration
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN")
    logfire_project_name: str = Field(default="actionkit-ai", alias="LOGFIRE_PROJECT_NAME")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")
    logfire_service_name: str = Field(default="actionkit-ai", alias="LOGFIRE_SERVICE_NAME")
    logfire_service_version: str = Field(default="0.0.0", alias="LOGFIRE_SERVICE_VERSION")
    logfire_sample_rate: float = Field(default=1.0, alias="LOGFIRE_SAMPLE_RATE")
    logfire_trace_sample_rate: float = Field(default=1.0, alias="LOGFIRE_TRACE_SAMPLE_RATE")
    logfire_trace_pydantic_ai: bool = Field(default=True, alias="LOGFIRE_TRACE_PYDANTIC_AI")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def logfire(self) -> LogfireConfig:
        """Get Logfire configuration from environment variables."""
        return LogfireConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
