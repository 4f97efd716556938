"""Process-level setup that must run before the application is created."""

from dotenv import load_dotenv

from src.core.config.settings import settings
from src.core.logging import configure_logging, logger
from src.utils.i18n import setup_i18n


def initialize_application() -> None:
    """Load ``.env`` values, configure structlog and load message catalogues."""
    load_dotenv(override=True)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    setup_i18n()

    logger.info(
        "confirmation_gate_initialized",
        env=settings.APP_ENV,
        token_ttl_hours=settings.EMAIL_CONFIRMATION_TOKEN_TTL_HOURS,
        rate_limit=settings.EMAIL_CONFIRMATION_RATE_LIMIT_MAX_ATTEMPTS,
        rate_limit_window_seconds=settings.EMAIL_CONFIRMATION_RATE_LIMIT_WINDOW_SECONDS,
    )
