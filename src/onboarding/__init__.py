"""
Onboarding package - Wallet onboarding and session state machine.

Contains:
- WalletCatalog: Wallets known to the backend
- SeedPhraseCeremony: Seed phrase display and shuffle-and-rebuild check
- OnboardingFormController: Open / Create / Recover form validation
- SessionController: The state machine tying them together
"""

from .errors import (
    ValidationIssue,
    OnboardingError,
    BackendUnavailable,
    BackendOperationFailed,
    PhraseGenerationFailed,
    MIN_SEED_WORDS,
)
from .catalog import WalletCatalog
from .ceremony import SeedPhraseCeremony
from .forms import OnboardingFormController, is_duplicate_name, check_new_password
from .session import SessionController, SessionPhase, CEREMONY_PHASES

__all__ = [
    "ValidationIssue",
    "OnboardingError",
    "BackendUnavailable",
    "BackendOperationFailed",
    "PhraseGenerationFailed",
    "MIN_SEED_WORDS",
    "WalletCatalog",
    "SeedPhraseCeremony",
    "OnboardingFormController",
    "is_duplicate_name",
    "check_new_password",
    "SessionController",
    "SessionPhase",
    "CEREMONY_PHASES",
]
