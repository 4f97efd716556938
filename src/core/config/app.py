"""
Application-specific settings.
"""
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment, logging
    output and language preferences.

    Security Note:
        - Keep APP_ENV set to "production" on deployed instances so that the
          development-only maintenance endpoints stay disabled.
    """
    PROJECT_NAME: str = "confirmation-gate"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[str, List[str]] = ["en", "es"]

    @field_validator("SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def assemble_languages(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of language codes into a list.

        Args:
            v: Input value as a string or list of language codes.

        Returns:
            List of stripped language codes.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"
