"""
Structured logging for the confirmation gate.

Log events are structlog key/value records routed through the standard
library, rendered as JSON when ``LOG_JSON`` is set and as console lines
otherwise. Modules log identities masked and secrets by prefix only; nothing
in this module redacts them.
"""

import logging

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False):
    """
    Configure structlog and the root logger.

    Args:
        log_level: Minimum level name, e.g. ``"INFO"``; unknown names mean INFO.
        json_logs: Render JSON lines instead of console output.
    """
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.INFO))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
