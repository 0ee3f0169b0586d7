"""
Core configuration module for the Darwin search engine.

This module manages application settings using Pydantic Settings,
providing type-safe configuration with environment variable support.
"""

from typing import Any, Dict, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = "Darwin Evolutionary Search"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Logfire settings
    logfire_token: str = Field(default="")
    logfire_service_name: str = Field(default="darwin-search")
    logfire_environment: str = Field(default="development")
    logfire_console: bool = Field(default=False)

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
        }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


# Create global settings instance
settings = Settings()
