"""User services."""

from investclub.services.user.registration import (
    RegistrationResult,
    UserRegistrationService,
)

__all__ = ["RegistrationResult", "UserRegistrationService"]
