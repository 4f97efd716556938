"""Domain Interfaces for dependency inversion.

These interfaces define contracts that infrastructure and application
layers implement.
"""

from .email_confirmation import IEmailConfirmationService, INotifier

__all__ = [
    "IEmailConfirmationService",
    "INotifier",
]
