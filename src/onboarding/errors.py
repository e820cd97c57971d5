"""
Onboarding errors.

Validation problems are values (ValidationIssue) shown next to the
offending field. Backend failures are exceptions that the session
controller turns into a dismissible banner.
"""

from enum import Enum

MIN_SEED_WORDS = 12


class ValidationIssue(Enum):
    """Local, pre-submit problems with the onboarding form."""
    MISSING_NAME = "missing_name"
    DUPLICATE_NAME = "duplicate_name"
    PASSWORD_MISMATCH = "password_mismatch"
    MISSING_PASSWORD = "missing_password"
    SHORT_SEED_PHRASE = "short_seed_phrase"

    def message(self, name: str = "") -> str:
        """Human readable text for the issue."""
        if self is ValidationIssue.MISSING_NAME:
            return "Please enter a wallet name"
        if self is ValidationIssue.DUPLICATE_NAME:
            return f'A wallet with name "{name}" already exists'
        if self is ValidationIssue.PASSWORD_MISMATCH:
            return "Passwords do not match"
        if self is ValidationIssue.MISSING_PASSWORD:
            return "Please enter a password"
        return f"Please enter a valid seed phrase (at least {MIN_SEED_WORDS} words)"


class OnboardingError(Exception):
    """Base class for onboarding failures."""


class BackendUnavailable(OnboardingError):
    """The wallet list could not be fetched."""


class BackendOperationFailed(OnboardingError):
    """open/create/recover/close/delete/secure failed; message is the backend's."""


class PhraseGenerationFailed(OnboardingError):
    """The backend returned no seed phrase."""
