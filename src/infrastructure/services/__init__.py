"""Infrastructure Services.

Concrete implementations of domain interfaces that deal with external
collaborators.
"""

from .confirmation_notifier import LoggingConfirmationNotifier

__all__ = [
    "LoggingConfirmationNotifier",
]
