"""Main application settings and configuration management.

This module composes the application settings from the different modules
(app, confirmation) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, maintenance endpoints enabled
- Test: Uses .env.test, maintenance endpoints enabled
- Staging: Uses .env.staging
- Production: Uses .env.production, maintenance endpoints always disabled
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .confirmation import ConfirmationSettings

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Settings(AppSettings, ConfirmationSettings):
    """The main settings class that aggregates all application configurations.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Environment Support:
        - Automatically loads the correct .env file based on APP_ENV
        - Development/Test: maintenance endpoints enabled
        - Production: maintenance endpoints disabled regardless of the flag

    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="allow"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)

        env = os.getenv("APP_ENV", self.APP_ENV)
        self._set_environment_defaults(env)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.EMAIL_CONFIRMATION_DEV_TOOLS_ENABLED = True
            logger.info(f"Confirmation dev tools enabled for {env} environment")

        if env == "production":
            self.EMAIL_CONFIRMATION_DEV_TOOLS_ENABLED = False

        if env == "development":
            self.DEBUG = True
            logger.info("Debug mode enabled for development environment")

        logger.info(f"Application running in {env} environment")
        logger.info(
            "Confirmation limits: "
            f"{self.EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS} requests per "
            f"{self.EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS}s, "
            f"token ttl {self.EMAIL_CONFIRMATION_TOKEN_TTL_HOURS}h"
        )

    @property
    def dev_tools_enabled(self) -> bool:
        return self.EMAIL_CONFIRMATION_DEV_TOOLS_ENABLED and not self.is_production


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production"
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        settings_instance = Settings(_env_file=env_file)
    elif Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
        settings_instance = Settings()
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
        settings_instance = Settings()

    return settings_instance


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
