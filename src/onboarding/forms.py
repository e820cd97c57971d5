"""
Onboarding Form - Field state and validation for the Open / Create /
Recover dialog.

Nothing here talks to the backend. Validators return a ValidationIssue
(or None) and leave it to the session controller to block the commit.
"""

import logging
from typing import Iterable, Optional

from models import OnboardingDraft, PendingWalletData, Tab, WalletSummary
from .errors import ValidationIssue, MIN_SEED_WORDS

logger = logging.getLogger(__name__)


def is_duplicate_name(name: str, wallets: Iterable[WalletSummary]) -> bool:
    """Case-insensitive match of the trimmed name against the catalog."""
    candidate = name.strip().lower()
    if not candidate:
        return False
    return any(w.name.lower() == candidate for w in wallets)


def seed_word_count(phrase: str) -> int:
    return len(phrase.split())


def check_new_password(use_password: bool, password: str, confirm: str) -> Optional[ValidationIssue]:
    """Both fields required and equal when protection is on."""
    if not use_password:
        return None
    if not password or not confirm:
        return ValidationIssue.MISSING_PASSWORD
    if password != confirm:
        return ValidationIssue.PASSWORD_MISMATCH
    return None


class OnboardingFormController:
    """Owns the OnboardingDraft and its validation rules."""

    def __init__(self):
        self.draft = OnboardingDraft()
        self._wallets: tuple[WalletSummary, ...] = ()

    # Catalog sync

    @property
    def wallets(self) -> list[WalletSummary]:
        return list(self._wallets)

    def apply_catalog(self, wallets: list[WalletSummary]) -> None:
        """
        Follow a refreshed catalog.

        Keeps the selection (and typed password) when the selected wallet
        still exists, otherwise selects the first wallet. Moves to the
        Create tab when there are no wallets and back to Open when the
        first wallet appears.
        """
        was_empty = not self._wallets
        self._wallets = tuple(wallets)

        if not wallets:
            if self.draft.selected_wallet is not None:
                logger.info("No wallets available, clearing selection")
            self.draft.selected_wallet = None
            self.draft.open_password = ""
            if self.draft.mode is not Tab.CREATE:
                self.set_mode(Tab.CREATE)
            return

        names = {w.name for w in wallets}
        if self.draft.selected_wallet not in names:
            logger.info(f"Selecting first wallet: {wallets[0].name}")
            self.draft.selected_wallet = wallets[0].name
            self.draft.open_password = ""

        if was_empty and self.draft.mode is not Tab.OPEN:
            self.set_mode(Tab.OPEN)

    # Field edits

    def select_wallet(self, name: str) -> None:
        """Pick a wallet on the Open tab; a different wallet clears the password."""
        if name == self.draft.selected_wallet:
            return
        if not any(w.name == name for w in self._wallets):
            raise ValueError(f"Unknown wallet: {name}")
        self.draft.selected_wallet = name
        self.draft.open_password = ""

    def set_open_password(self, password: str) -> None:
        self.draft.open_password = password

    def set_new_name(self, name: str) -> None:
        self.draft.new_name = name

    def set_new_password(self, password: str) -> None:
        self.draft.new_password = password

    def set_confirm_password(self, password: str) -> None:
        self.draft.confirm_password = password

    def set_use_password_protection(self, enabled: bool) -> None:
        self.draft.use_password_protection = enabled
        if not enabled:
            self.draft.new_password = ""
            self.draft.confirm_password = ""

    def set_recovery_phrase(self, phrase: str) -> None:
        self.draft.recovery_phrase = phrase

    # Mode switches

    def clear_passwords(self) -> None:
        self.draft.open_password = ""
        self.draft.new_password = ""
        self.draft.confirm_password = ""

    def set_mode(self, mode: Tab) -> None:
        """Switch tabs. Leaves recovery mode and clears every password."""
        self.draft.mode = mode
        self.draft.is_recovery = False
        self.draft.recovery_phrase = ""
        self.clear_passwords()

    def set_recovery_mode(self, enabled: bool) -> None:
        self.draft.is_recovery = enabled
        if not enabled:
            self.draft.recovery_phrase = ""
        self.clear_passwords()

    def reset_create_form(self) -> None:
        """Clear everything typed on the Create tab."""
        self.draft.new_name = ""
        self.draft.new_password = ""
        self.draft.confirm_password = ""
        self.draft.use_password_protection = False
        self.draft.is_recovery = False
        self.draft.recovery_phrase = ""

    def reset_after_commit(self) -> None:
        """Discard the draft after a successful open/create/recover."""
        self.reset_create_form()
        self.draft.open_password = ""

    # Validation

    @property
    def selected_summary(self) -> Optional[WalletSummary]:
        for wallet in self._wallets:
            if wallet.name == self.draft.selected_wallet:
                return wallet
        return None

    @property
    def selected_is_secured(self) -> bool:
        summary = self.selected_summary
        return summary is not None and summary.secured

    @property
    def is_name_duplicate(self) -> bool:
        return is_duplicate_name(self.draft.new_name, self._wallets)

    def name_issue(self) -> Optional[ValidationIssue]:
        if not self.draft.new_name.strip():
            return ValidationIssue.MISSING_NAME
        if self.is_name_duplicate:
            return ValidationIssue.DUPLICATE_NAME
        return None

    def password_issue(self) -> Optional[ValidationIssue]:
        return check_new_password(
            self.draft.use_password_protection,
            self.draft.new_password,
            self.draft.confirm_password,
        )

    def recovery_issue(self) -> Optional[ValidationIssue]:
        if seed_word_count(self.draft.recovery_phrase) < MIN_SEED_WORDS:
            return ValidationIssue.SHORT_SEED_PHRASE
        return None

    def validate_open(self) -> Optional[ValidationIssue]:
        if self.selected_summary is None:
            return ValidationIssue.MISSING_NAME
        if self.selected_is_secured and not self.draft.open_password:
            return ValidationIssue.MISSING_PASSWORD
        return None

    def validate_create(self) -> Optional[ValidationIssue]:
        return self.name_issue() or self.password_issue()

    def validate_recover(self) -> Optional[ValidationIssue]:
        return self.name_issue() or self.recovery_issue() or self.password_issue()

    def validate(self) -> Optional[ValidationIssue]:
        """Validate whatever the current tab would submit."""
        if self.draft.mode is Tab.OPEN:
            return self.validate_open()
        if self.draft.is_recovery:
            return self.validate_recover()
        return self.validate_create()

    def can_submit(self) -> bool:
        return self.validate() is None

    def issue_message(self, issue: ValidationIssue) -> str:
        if self.draft.mode is Tab.OPEN:
            if issue is ValidationIssue.MISSING_PASSWORD:
                return "Please enter your password for this secured wallet"
            if issue is ValidationIssue.MISSING_NAME:
                return "Please select a wallet"
        return issue.message(self.draft.new_name.strip())

    def pending_wallet(self) -> PendingWalletData:
        """Snapshot of the Create tab for the seed phrase ceremony."""
        return PendingWalletData(
            name=self.draft.new_name.strip(),
            password=self.draft.new_password if self.draft.use_password_protection else "",
            use_password=self.draft.use_password_protection,
        )
