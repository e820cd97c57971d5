"""
Session Controller - Top-level wallet onboarding state machine.

Sequences the wallet catalog, the onboarding form and the seed phrase
ceremony, commits open/create/recover through the wallet backend and
keeps the UI-visible session (open wallet, secured flag) in line with
what the backend reports.

Phases:
    CLOSED_SELECTING            onboarding dialog showing, nothing in flight
    SUBMITTING                  one backend operation in flight
    AWAITING_SEED_DISPLAY       create: phrase generated, waiting for "I've saved it"
    AWAITING_SEED_VERIFICATION  create: user rebuilding the phrase
    AWAITING_CREATE_RETRY       create: commit failed after verification
    OPEN                        wallet session active
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models import AppSettings, PendingWalletData, SessionState, Tab
from services import BackendError, WalletBackend
from .catalog import WalletCatalog
from .ceremony import SeedPhraseCeremony
from .errors import (
    BackendOperationFailed,
    BackendUnavailable,
    OnboardingError,
    PhraseGenerationFailed,
)
from .forms import OnboardingFormController, check_new_password

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    CLOSED_SELECTING = "closed_selecting"
    SUBMITTING = "submitting"
    AWAITING_SEED_DISPLAY = "awaiting_seed_display"
    AWAITING_SEED_VERIFICATION = "awaiting_seed_verification"
    AWAITING_CREATE_RETRY = "awaiting_create_retry"
    OPEN = "open"


CEREMONY_PHASES = frozenset({
    SessionPhase.AWAITING_SEED_DISPLAY,
    SessionPhase.AWAITING_SEED_VERIFICATION,
    SessionPhase.AWAITING_CREATE_RETRY,
})


def _failure_message(error: Exception) -> str:
    if isinstance(error, (OnboardingError, BackendError)) and str(error):
        return str(error)
    return f"Error: {error}" if str(error) else "Unknown error occurred"


class SessionController(QObject):
    """
    Drives the Open / Create / Recover flows.

    Only one backend operation runs at a time; a second submit while one
    is pending is ignored.
    """

    phase_changed = pyqtSignal(object)    # SessionPhase
    session_changed = pyqtSignal(object)  # SessionState
    catalog_changed = pyqtSignal(list)    # list[WalletSummary]
    error_changed = pyqtSignal(str)       # Banner text ("" when dismissed)
    busy_changed = pyqtSignal(bool)
    dialog_changed = pyqtSignal(bool, object)  # visible, Tab
    activity = pyqtSignal(str, bool)      # message, is_error

    def __init__(self, backend: WalletBackend, settings_provider: Callable[[], AppSettings],
                 ceremony: Optional[SeedPhraseCeremony] = None, parent=None):
        super().__init__(parent)
        self.backend = backend
        self._settings_provider = settings_provider
        self.catalog = WalletCatalog(backend)
        self.form = OnboardingFormController()
        self.ceremony = ceremony or SeedPhraseCeremony()

        self._session = SessionState.closed()
        self._phase = SessionPhase.CLOSED_SELECTING
        self._pending: Optional[PendingWalletData] = None
        self._in_progress = False
        self._error_message = ""
        self._verification_failed = False
        self._tasks: set[asyncio.Task] = set()

        backend.events.wallets_deleted.connect(self._on_wallets_deleted)
        backend.events.wallet_closed.connect(self._on_wallet_closed)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def pending(self) -> Optional[PendingWalletData]:
        return self._pending

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def is_busy(self) -> bool:
        return self._in_progress

    @property
    def verification_failed(self) -> bool:
        return self._verification_failed

    @property
    def onboarding_visible(self) -> bool:
        return self._phase is not SessionPhase.OPEN

    @property
    def should_bypass_ceremony(self) -> bool:
        settings = self._settings_provider()
        return settings is not None and settings.bypass_seed_ceremony

    def can_submit(self) -> bool:
        """Whether the commit button should be enabled."""
        return (
            self._phase is SessionPhase.CLOSED_SELECTING
            and not self._in_progress
            and self.form.can_submit()
        )

    def dismiss_error(self) -> None:
        self._set_error("")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase is self._phase:
            return
        logger.debug(f"Phase {self._phase.value} -> {phase.value}")
        self._phase = phase
        self.phase_changed.emit(phase)

    def _set_session(self, session: SessionState) -> None:
        if session == self._session:
            return
        self._session = session
        self.session_changed.emit(session)

    def _set_error(self, message: str) -> None:
        if message == self._error_message:
            return
        self._error_message = message
        self.error_changed.emit(message)

    def _begin(self, operation: str) -> bool:
        if self._in_progress:
            logger.warning(f"Ignoring {operation}: another wallet operation is in progress")
            return False
        self._in_progress = True
        self.busy_changed.emit(True)
        return True

    def _end(self) -> None:
        self._in_progress = False
        self.busy_changed.emit(False)

    def _fail(self, phase: SessionPhase, error: Exception) -> None:
        message = _failure_message(error)
        logger.error(f"Wallet operation failed: {message}")
        self._set_phase(phase)
        self._set_error(message)
        self.activity.emit(message, True)

    def _discard_creation(self) -> None:
        self._pending = None
        self._verification_failed = False
        self.ceremony.discard()

    def _spawn(self, coro) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning("No running event loop; backend event ignored")
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _commit_succeeded(self, name: str, secured: bool, message: str) -> None:
        self._set_session(SessionState.opened(name, secured))
        self._discard_creation()
        self.form.reset_after_commit()
        self._set_error("")
        self._set_phase(SessionPhase.OPEN)
        self.dialog_changed.emit(False, self.form.draft.mode)
        logger.info(message)
        self.activity.emit(message, False)
        await self.refresh_catalog()

    # ------------------------------------------------------------------
    # Catalog and startup
    # ------------------------------------------------------------------

    async def refresh_catalog(self) -> bool:
        """Reload wallets; on failure the catalog is empty and a banner is shown."""
        ok = True
        try:
            wallets = await self.catalog.refresh()
        except BackendUnavailable as e:
            wallets = []
            ok = False
            self._set_error(str(e))
            self.activity.emit(str(e), True)

        self.form.apply_catalog(wallets)

        current = self._session.current
        if current is not None:
            summary = self.catalog.find(current.name)
            if summary is not None and summary.secured != current.secured:
                self._set_session(SessionState.opened(current.name, summary.secured))

        self.catalog_changed.emit(wallets)
        return ok

    async def initialize(self) -> SessionState:
        """Probe the backend for an already open wallet, then load the catalog."""
        session = SessionState.closed()
        try:
            if await self.backend.check_open():
                name = await self.backend.current_wallet_name()
                if name:
                    secured = await self.backend.is_current_secured()
                    session = SessionState.opened(name, secured is True)
        except Exception as e:
            logger.error(f"Error checking wallet status: {e}")
            session = SessionState.closed()

        self._set_session(session)
        if session.is_open:
            self._set_phase(SessionPhase.OPEN)
        else:
            self.form.clear_passwords()
            self._set_phase(SessionPhase.CLOSED_SELECTING)
        await self.refresh_catalog()
        self.dialog_changed.emit(not session.is_open, self.form.draft.mode)
        return session

    # ------------------------------------------------------------------
    # Form mode switches
    # ------------------------------------------------------------------

    def switch_tab(self, tab: Tab) -> None:
        self.form.set_mode(tab)
        self._set_error("")

    def set_recovery_mode(self, enabled: bool) -> None:
        self.form.set_recovery_mode(enabled)
        self._set_error("")

    # ------------------------------------------------------------------
    # Commit operations
    # ------------------------------------------------------------------

    async def submit(self) -> bool:
        """Submit whatever the active tab shows."""
        if self.form.draft.mode is Tab.OPEN:
            return await self.submit_open()
        if self.form.draft.is_recovery:
            return await self.submit_recover()
        return await self.submit_create()

    def _check_ready(self, issue) -> bool:
        if self._phase is not SessionPhase.CLOSED_SELECTING:
            logger.warning(f"Submit ignored in phase {self._phase.value}")
            return False
        if issue is not None:
            self._set_error(self.form.issue_message(issue))
            return False
        return True

    async def submit_open(self) -> bool:
        if not self._check_ready(self.form.validate_open()):
            return False
        if not self._begin("open"):
            return False

        draft = self.form.draft
        name = draft.selected_wallet
        secured = self.form.selected_is_secured
        self._set_error("")
        self._set_phase(SessionPhase.SUBMITTING)
        try:
            try:
                ok = await self.backend.open_wallet(name, draft.open_password if secured else None)
                if not ok:
                    raise BackendOperationFailed("Failed to open wallet")
            except Exception as e:
                # Password is kept so the user can correct a typo
                self._fail(SessionPhase.CLOSED_SELECTING, e)
                return False
            await self._commit_succeeded(name, secured, f"Opened wallet {name}")
            return True
        finally:
            self._end()

    async def submit_create(self) -> bool:
        if self.form.draft.is_recovery:
            return await self.submit_recover()
        if not self._check_ready(self.form.validate_create()):
            return False
        if not self._begin("create"):
            return False

        pending = self.form.pending_wallet()
        self._set_error("")
        self._set_phase(SessionPhase.SUBMITTING)
        try:
            if self.should_bypass_ceremony:
                logger.info("Developer mode with skip dialogs enabled, creating wallet directly")
                return await self._commit_create(pending, None, SessionPhase.CLOSED_SELECTING)

            self._pending = pending
            try:
                phrase = await self.ceremony.generate(self.backend)
            except PhraseGenerationFailed as e:
                self._discard_creation()
                self._fail(SessionPhase.CLOSED_SELECTING, e)
                return False

            self.ceremony.begin_display(phrase)
            self._set_phase(SessionPhase.AWAITING_SEED_DISPLAY)
            return True
        finally:
            self._end()

    async def _commit_create(self, pending: PendingWalletData, seed_phrase: Optional[str],
                             failure_phase: SessionPhase) -> bool:
        try:
            ok = await self.backend.create_wallet(
                pending.name,
                pending.password if pending.use_password else None,
                pending.use_password,
                seed_phrase,
            )
            if not ok:
                raise BackendOperationFailed("Failed to create wallet")
        except Exception as e:
            self._fail(failure_phase, e)
            return False
        await self._commit_succeeded(pending.name, pending.use_password,
                                     f"Created wallet {pending.name}")
        return True

    async def submit_recover(self) -> bool:
        if not self._check_ready(self.form.validate_recover()):
            return False
        if not self._begin("recover"):
            return False

        draft = self.form.draft
        name = draft.new_name.strip()
        use_password = draft.use_password_protection
        self._set_error("")
        self._set_phase(SessionPhase.SUBMITTING)
        try:
            try:
                ok = await self.backend.recover_wallet(
                    name,
                    draft.recovery_phrase.strip(),
                    draft.new_password if use_password else None,
                    use_password,
                )
                if not ok:
                    raise BackendOperationFailed("Failed to recover wallet")
            except Exception as e:
                self._fail(SessionPhase.CLOSED_SELECTING, e)
                return False
            await self._commit_succeeded(name, use_password, f"Recovered wallet {name}")
            return True
        finally:
            self._end()

    # ------------------------------------------------------------------
    # Seed phrase ceremony
    # ------------------------------------------------------------------

    def acknowledge_seed(self) -> bool:
        """User has saved the phrase; move on to verification."""
        if self._phase is not SessionPhase.AWAITING_SEED_DISPLAY:
            return False
        self.ceremony.acknowledge()
        self.ceremony.begin_verification()
        self._verification_failed = False
        self._set_phase(SessionPhase.AWAITING_SEED_VERIFICATION)
        return True

    def _require_verification(self) -> None:
        if self._phase is not SessionPhase.AWAITING_SEED_VERIFICATION:
            raise ValueError("Seed phrase verification is not in progress")

    def select_word(self, word: str, pool_index: int) -> None:
        self._require_verification()
        self.ceremony.select_word(word, pool_index)
        self._verification_failed = False

    def deselect_word(self, word: str, selected_index: int) -> None:
        self._require_verification()
        self.ceremony.deselect_word(word, selected_index)
        self._verification_failed = False

    def reshuffle(self) -> list[str]:
        self._require_verification()
        return self.ceremony.reshuffle()

    async def confirm_verification(self) -> bool:
        """Check the rebuilt phrase and, if it matches, create the wallet."""
        if self._phase is not SessionPhase.AWAITING_SEED_VERIFICATION:
            return False
        if not self.ceremony.verify():
            self._verification_failed = True
            self.phase_changed.emit(self._phase)
            return False
        return await self._commit_pending_create()

    async def retry_create(self) -> bool:
        """Commit again with the already verified phrase."""
        if self._phase is not SessionPhase.AWAITING_CREATE_RETRY:
            return False
        return await self._commit_pending_create()

    async def _commit_pending_create(self) -> bool:
        pending = self._pending
        phrase = self.ceremony.phrase
        if pending is None or phrase is None:
            raise ValueError("No verified wallet creation is pending")
        if not self._begin("create"):
            return False

        self._set_error("")
        self._set_phase(SessionPhase.SUBMITTING)
        try:
            # A failure keeps the same phrase; the user has already written it down
            return await self._commit_create(pending, phrase, SessionPhase.AWAITING_CREATE_RETRY)
        finally:
            self._end()

    def cancel_ceremony(self) -> bool:
        """Abandon the creation; nothing of it survives into a later attempt."""
        if self._phase not in CEREMONY_PHASES:
            return False
        logger.info("Wallet creation cancelled")
        self._discard_creation()
        self._set_error("")
        self._set_phase(SessionPhase.CLOSED_SELECTING)
        return True

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------

    async def close_wallet(self) -> bool:
        if not self._session.is_open:
            logger.info("No wallet is currently open")
            return False
        if not self._begin("close"):
            return False
        try:
            name = self._session.current.name
            try:
                ok = await self.backend.close_wallet()
                if not ok:
                    raise BackendOperationFailed("Failed to close wallet")
            except Exception as e:
                message = _failure_message(e)
                logger.error(f"Error closing wallet: {message}")
                self._set_error(message)
                self.activity.emit(message, True)
                return False

            self._set_session(SessionState.closed())
            if self._phase is SessionPhase.OPEN:
                self.form.clear_passwords()
                self._set_phase(SessionPhase.CLOSED_SELECTING)
            self.activity.emit(f"Closed wallet {name}", False)
            await self.refresh_catalog()
            return True
        finally:
            self._end()

    async def delete_wallet(self, name: str) -> bool:
        if not self._begin("delete"):
            return False
        try:
            try:
                ok = await self.backend.delete_wallet(name)
                if not ok:
                    raise BackendOperationFailed("Failed to delete wallet")
            except Exception as e:
                message = _failure_message(e)
                logger.error(f"Error deleting wallet: {message}")
                self._set_error(message)
                self.activity.emit(message, True)
                return False

            current = self._session.current
            if current is not None and current.name == name:
                logger.info("Deleted wallet was current, resetting session")
                self._set_session(SessionState.closed())
                if self._phase is SessionPhase.OPEN:
                    self._set_phase(SessionPhase.CLOSED_SELECTING)
            self.activity.emit(f"Deleted wallet {name}", False)
            await self.refresh_catalog()
            return True
        finally:
            self._end()

    async def secure_wallet(self, name: str, password: str, confirm: str) -> bool:
        """Add password protection to an unsecured wallet."""
        issue = check_new_password(True, password, confirm)
        if issue is not None:
            self._set_error(issue.message())
            return False
        if not self._begin("secure"):
            return False
        try:
            try:
                ok = await self.backend.secure_wallet(name, password)
                if not ok:
                    raise BackendOperationFailed("Failed to secure wallet")
            except Exception as e:
                message = _failure_message(e)
                logger.error(f"Error securing wallet: {message}")
                self._set_error(message)
                self.activity.emit(message, True)
                return False
            self._set_error("")
            self.activity.emit(f"Wallet {name} is now password protected", False)
            await self.refresh_catalog()
            return True
        finally:
            self._end()

    # ------------------------------------------------------------------
    # Backend events
    # ------------------------------------------------------------------

    def _on_wallets_deleted(self) -> None:
        self._spawn(self.handle_wallets_deleted())

    def _on_wallet_closed(self) -> None:
        self._spawn(self.handle_wallet_closed())

    async def handle_wallets_deleted(self) -> None:
        """
        Backend removed wallets behind our back.

        Both the catalog and the session are reset, then the catalog is
        reloaded. A seed phrase ceremony in progress is left alone; its
        wallet does not exist yet.
        """
        logger.info("Received wallets-deleted event, clearing state")
        self.catalog.clear()
        self._set_session(SessionState.closed())
        if self._phase is SessionPhase.OPEN:
            self.form.clear_passwords()
            self._set_phase(SessionPhase.CLOSED_SELECTING)
        await self.refresh_catalog()

    async def handle_wallet_closed(self) -> None:
        """The backend closed the wallet (e.g. from the tray)."""
        if not self._session.is_open:
            return
        logger.info("Wallet closed outside the app, updating session")
        self._set_session(SessionState.closed())
        if self._phase is SessionPhase.OPEN:
            self.form.clear_passwords()
            self._set_phase(SessionPhase.CLOSED_SELECTING)
        await self.refresh_catalog()

    # ------------------------------------------------------------------
    # Dialog entry points (main window, tray)
    # ------------------------------------------------------------------

    async def open_dialog(self, initial_tab: Tab = Tab.OPEN) -> bool:
        """Show the onboarding dialog on the given tab."""
        if self._in_progress:
            logger.warning("Cannot open wallet dialog while an operation is in progress")
            return False
        logger.info(f"Opening wallet dialog on tab {initial_tab.name}")
        if self._phase in CEREMONY_PHASES:
            self.cancel_ceremony()
        self.form.set_mode(initial_tab)
        self._set_error("")
        self._set_phase(SessionPhase.CLOSED_SELECTING)
        await self.refresh_catalog()

        # The refresh may have picked a tab for an empty/new catalog
        if self.form.draft.mode is not initial_tab:
            if not (initial_tab is Tab.OPEN and self.catalog.is_empty()):
                self.form.set_mode(initial_tab)
        self.dialog_changed.emit(True, self.form.draft.mode)
        return True

    async def force_create_tab(self) -> bool:
        return await self.open_dialog(Tab.CREATE)

    def close_dialog(self) -> bool:
        """Hide the dialog. Without an open wallet the dialog must stay."""
        if not self._session.is_open or self._in_progress:
            return False
        if self._phase in CEREMONY_PHASES:
            self.cancel_ceremony()
        self.form.clear_passwords()
        self._set_error("")
        self._set_phase(SessionPhase.OPEN)
        self.dialog_changed.emit(False, self.form.draft.mode)
        return True

    async def handle_tray_create(self) -> bool:
        """Tray "Create Wallet": close the open wallet, then show the Create tab."""
        if self._session.is_open:
            if not await self.close_wallet():
                logger.warning("Failed to close current wallet, showing create dialog anyway")
        return await self.force_create_tab()
