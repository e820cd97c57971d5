"""
UI Dialogs - Wallet onboarding and management dialogs.

Contains dialogs for:
- Opening, creating and recovering wallets
- Seed phrase backup display and verification
- Securing an existing wallet with a password
- Application settings
"""

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QLineEdit, QTextEdit, QCheckBox, QComboBox, QMessageBox,
    QApplication, QWidget, QTabWidget, QGridLayout, QSpinBox,
    QGroupBox, QFormLayout
)
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont
from qasync import asyncSlot

from models import SettingsStore, Tab
from onboarding import SessionController, SessionPhase
from .theme import Theme

# Clipboard auto-clear timeout (seconds)
CLIPBOARD_CLEAR_TIMEOUT = 60

WARNING_STYLE = (
    f"background-color: {Theme.WARNING_BG}; color: {Theme.WARNING_FG}; padding: 8px; "
    f"border: 1px solid {Theme.WARNING_BORDER}; border-radius: 4px;"
)


def copy_sensitive_to_clipboard(text: str, parent: QWidget = None, timeout_sec: int = CLIPBOARD_CLEAR_TIMEOUT):
    """
    Copy sensitive data to clipboard with auto-clear.

    Copies the text to clipboard and schedules automatic clearing after timeout.
    """
    clipboard = QApplication.clipboard()
    clipboard.setText(text)

    def clear_clipboard():
        if clipboard.text() == text:
            clipboard.clear()

    QTimer.singleShot(timeout_sec * 1000, clear_clipboard)

    if parent:
        QMessageBox.information(
            parent,
            "Copied",
            f"Data copied to clipboard.\n\nClipboard will auto-clear in {timeout_sec} seconds."
        )


def format_seed_grid(seed_phrase: str, columns: int = 3) -> str:
    """Numbered words, three per row."""
    formatted = [f"{i:2}. {word}" for i, word in enumerate(seed_phrase.split(), 1)]
    lines = []
    for i in range(0, len(formatted), columns):
        row = formatted[i:i + columns]
        lines.append("   ".join(f"{w:<14}" for w in row))
    return "\n".join(lines)


def _password_input(placeholder: str) -> QLineEdit:
    field = QLineEdit()
    field.setEchoMode(QLineEdit.EchoMode.Password)
    field.setPlaceholderText(placeholder)
    return field


def _error_label() -> QLabel:
    label = QLabel("")
    label.setStyleSheet(f"color: {Theme.ERROR};")
    label.setWordWrap(True)
    return label


# ============================================
# Open / Create / Recover Dialog
# ============================================

class OpenCreateWalletDialog(QDialog):
    """
    The onboarding dialog: Open an existing wallet, or Create / Recover one.

    All state lives in the SessionController; this dialog mirrors it and
    forwards user input.
    """

    BUTTON_WIDTH = 120

    def __init__(self, controller: SessionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("Select Wallet")
        self.setModal(True)
        self.setMinimumWidth(Theme.MIN_DIALOG_WIDTH)

        self._syncing = False
        self._seed_dialog = None
        self._verify_dialog = None

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        self.tabs = QTabWidget()
        self.tabs.addTab(self._create_open_page(), "Open Wallet")
        self.tabs.addTab(self._create_create_page(), "Create Wallet")
        self.tabs.currentChanged.connect(self._on_tab_changed)
        layout.addWidget(self.tabs)

        # Dismissible banner for backend errors
        banner_layout = QHBoxLayout()
        self.banner = QLabel("")
        self.banner.setWordWrap(True)
        self.banner.setStyleSheet(
            f"background-color: #fdecea; color: {Theme.ERROR}; padding: 8px; border-radius: 4px;"
        )
        banner_layout.addWidget(self.banner, 1)
        self.dismiss_btn = QPushButton("Dismiss")
        self.dismiss_btn.clicked.connect(self.controller.dismiss_error)
        banner_layout.addWidget(self.dismiss_btn)
        layout.addLayout(banner_layout)

        self.busy_label = QLabel("Working...")
        self.busy_label.setStyleSheet(f"color: {Theme.CHARCOAL};")
        layout.addWidget(self.busy_label)

        controller.catalog_changed.connect(lambda _: self.sync_from_controller())
        controller.error_changed.connect(lambda _: self.sync_from_controller())
        controller.busy_changed.connect(lambda _: self.sync_from_controller())
        controller.phase_changed.connect(self._on_phase_changed)

        self.sync_from_controller()

    def _create_open_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setSpacing(12)

        layout.addWidget(QLabel("Select a wallet to open:"))

        self.wallet_combo = QComboBox()
        self.wallet_combo.currentIndexChanged.connect(self._on_wallet_selected)
        layout.addWidget(self.wallet_combo)

        self.open_password_input = _password_input("Wallet password")
        self.open_password_input.textChanged.connect(self._on_open_password_changed)
        self.open_password_input.returnPressed.connect(self._on_submit)
        layout.addWidget(self.open_password_input)

        self.no_wallets_label = QLabel("No wallets found. Create a new wallet to get started.")
        self.no_wallets_label.setStyleSheet(f"color: {Theme.CHARCOAL};")
        layout.addWidget(self.no_wallets_label)

        layout.addStretch()

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        self.open_btn = QPushButton("Open Wallet")
        self.open_btn.setFixedWidth(self.BUTTON_WIDTH)
        self.open_btn.setDefault(True)
        self.open_btn.clicked.connect(self._on_submit)
        btn_layout.addWidget(self.open_btn)
        layout.addLayout(btn_layout)
        return page

    def _create_create_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setSpacing(12)

        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("Wallet name")
        self.name_input.textChanged.connect(self._on_name_changed)
        layout.addWidget(self.name_input)

        self.name_error_label = _error_label()
        layout.addWidget(self.name_error_label)

        self.password_check = QCheckBox("Protect this wallet with a password")
        self.password_check.toggled.connect(self._on_password_protection_toggled)
        layout.addWidget(self.password_check)

        self.new_password_input = _password_input("Password")
        self.new_password_input.textChanged.connect(self._on_new_password_changed)
        layout.addWidget(self.new_password_input)

        self.confirm_password_input = _password_input("Confirm password")
        self.confirm_password_input.textChanged.connect(self._on_confirm_password_changed)
        layout.addWidget(self.confirm_password_input)

        self.password_error_label = _error_label()
        layout.addWidget(self.password_error_label)

        self.recovery_check = QCheckBox("Recover an existing wallet from its seed phrase")
        self.recovery_check.toggled.connect(self._on_recovery_toggled)
        layout.addWidget(self.recovery_check)

        self.recovery_input = QTextEdit()
        self.recovery_input.setPlaceholderText("Enter your 12 or 24-word seed phrase separated by spaces")
        self.recovery_input.setFont(QFont(Theme.MONO_FONT, 10))
        self.recovery_input.setMaximumHeight(80)
        self.recovery_input.textChanged.connect(self._on_recovery_phrase_changed)
        layout.addWidget(self.recovery_input)

        self.recovery_error_label = _error_label()
        layout.addWidget(self.recovery_error_label)

        layout.addStretch()

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        self.create_btn = QPushButton("Create Wallet")
        self.create_btn.setFixedWidth(self.BUTTON_WIDTH)
        self.create_btn.clicked.connect(self._on_submit)
        btn_layout.addWidget(self.create_btn)
        layout.addLayout(btn_layout)
        return page

    # ----------------------------------------
    # Controller -> widgets
    # ----------------------------------------

    def sync_from_controller(self):
        """Mirror the controller's draft, catalog and flags into the widgets."""
        self._syncing = True
        try:
            form = self.controller.form
            draft = form.draft
            busy = self.controller.is_busy

            self.tabs.setCurrentIndex(draft.mode.value)

            names = [w.name for w in form.wallets]
            labels = [f"{w.name} (secured)" if w.secured else w.name for w in form.wallets]
            current_labels = [self.wallet_combo.itemText(i) for i in range(self.wallet_combo.count())]
            if labels != current_labels:
                self.wallet_combo.clear()
                for wallet, label in zip(form.wallets, labels):
                    self.wallet_combo.addItem(label, wallet.name)
            index = self.wallet_combo.findData(draft.selected_wallet)
            self.wallet_combo.setCurrentIndex(index)
            self.no_wallets_label.setVisible(not names)
            self.wallet_combo.setVisible(bool(names))

            self.open_password_input.setVisible(form.selected_is_secured)
            if self.open_password_input.text() != draft.open_password:
                self.open_password_input.setText(draft.open_password)

            if self.name_input.text() != draft.new_name:
                self.name_input.setText(draft.new_name)
            self.password_check.setChecked(draft.use_password_protection)
            self.new_password_input.setVisible(draft.use_password_protection)
            self.confirm_password_input.setVisible(draft.use_password_protection)
            if self.new_password_input.text() != draft.new_password:
                self.new_password_input.setText(draft.new_password)
            if self.confirm_password_input.text() != draft.confirm_password:
                self.confirm_password_input.setText(draft.confirm_password)
            self.recovery_check.setChecked(draft.is_recovery)
            self.recovery_input.setVisible(draft.is_recovery)
            if self.recovery_input.toPlainText() != draft.recovery_phrase:
                self.recovery_input.setPlainText(draft.recovery_phrase)

            self._update_inline_errors()

            self.create_btn.setText("Recover Wallet" if draft.is_recovery else "Create Wallet")
            can_submit = self.controller.can_submit()
            self.open_btn.setEnabled(can_submit and draft.mode is Tab.OPEN)
            self.create_btn.setEnabled(can_submit and draft.mode is Tab.CREATE)
            self.tabs.setEnabled(not busy)

            message = self.controller.error_message
            self.banner.setText(message)
            self.banner.setVisible(bool(message))
            self.dismiss_btn.setVisible(bool(message))
            self.busy_label.setVisible(busy)
        finally:
            self._syncing = False

    def _update_inline_errors(self):
        form = self.controller.form
        draft = form.draft
        name_issue = form.name_issue() if draft.new_name.strip() else None
        self.name_error_label.setText(form.issue_message(name_issue) if name_issue else "")
        password_issue = form.password_issue()
        show_password_issue = password_issue is not None and bool(draft.confirm_password)
        self.password_error_label.setText(
            form.issue_message(password_issue) if show_password_issue else ""
        )
        recovery_issue = form.recovery_issue() if draft.is_recovery and draft.recovery_phrase.strip() else None
        self.recovery_error_label.setText(form.issue_message(recovery_issue) if recovery_issue else "")

    # ----------------------------------------
    # Widgets -> controller
    # ----------------------------------------

    def _edit(self, apply):
        if self._syncing:
            return
        apply()
        self.sync_from_controller()

    def _on_tab_changed(self, index: int):
        self._edit(lambda: self.controller.switch_tab(Tab(index)))

    def _on_wallet_selected(self, index: int):
        name = self.wallet_combo.itemData(index)
        if name:
            self._edit(lambda: self.controller.form.select_wallet(name))

    def _on_open_password_changed(self, text: str):
        self._edit(lambda: self.controller.form.set_open_password(text))

    def _on_name_changed(self, text: str):
        self._edit(lambda: self.controller.form.set_new_name(text))

    def _on_password_protection_toggled(self, checked: bool):
        self._edit(lambda: self.controller.form.set_use_password_protection(checked))

    def _on_new_password_changed(self, text: str):
        self._edit(lambda: self.controller.form.set_new_password(text))

    def _on_confirm_password_changed(self, text: str):
        self._edit(lambda: self.controller.form.set_confirm_password(text))

    def _on_recovery_toggled(self, checked: bool):
        self._edit(lambda: self.controller.set_recovery_mode(checked))

    def _on_recovery_phrase_changed(self):
        text = self.recovery_input.toPlainText()
        self._edit(lambda: self.controller.form.set_recovery_phrase(text))

    @asyncSlot()
    async def _on_submit(self):
        if not self.controller.can_submit():
            return
        await self.controller.submit()
        self.sync_from_controller()

    # ----------------------------------------
    # Seed phrase ceremony
    # ----------------------------------------

    def _on_phase_changed(self, phase: SessionPhase):
        self.sync_from_controller()
        if phase is SessionPhase.AWAITING_SEED_DISPLAY and self._seed_dialog is None:
            self._seed_dialog = SeedPhraseDialog(self.controller.ceremony.phrase, self)
            self._seed_dialog.accepted.connect(self._on_seed_acknowledged)
            self._seed_dialog.rejected.connect(self._on_seed_cancelled)
            self._seed_dialog.open()
        elif phase is SessionPhase.AWAITING_SEED_VERIFICATION and self._verify_dialog is None:
            self._verify_dialog = VerifySeedPhraseDialog(self.controller, self)
            self._verify_dialog.finished.connect(self._on_verify_finished)
            self._verify_dialog.open()
        elif phase in (SessionPhase.CLOSED_SELECTING, SessionPhase.OPEN):
            self._close_ceremony_dialogs()

    def _on_seed_acknowledged(self):
        self._seed_dialog = None
        self.controller.acknowledge_seed()

    def _on_seed_cancelled(self):
        self._seed_dialog = None
        self.controller.cancel_ceremony()

    def _on_verify_finished(self, result: int):
        self._verify_dialog = None
        if result != QDialog.DialogCode.Accepted:
            self.controller.cancel_ceremony()

    def _close_ceremony_dialogs(self):
        for dialog in (self._seed_dialog, self._verify_dialog):
            if dialog is not None:
                dialog.blockSignals(True)
                dialog.done(QDialog.DialogCode.Rejected)
        self._seed_dialog = None
        self._verify_dialog = None

    def reject(self):
        # Without an open wallet the dialog cannot be dismissed
        if self.controller.close_dialog():
            super().reject()


# ============================================
# Seed Phrase Display
# ============================================

class SeedPhraseDialog(QDialog):
    """Dialog showing a newly generated seed phrase for backup."""

    BUTTON_WIDTH = 150

    def __init__(self, seed_phrase: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Backup Your Seed Phrase")
        self.setFixedWidth(520)
        self.setModal(True)

        self.seed_phrase = seed_phrase

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        warning = QLabel(
            "WARNING: This is the ONLY way to recover your wallet. "
            "Store it safely offline. Never share it with anyone."
        )
        warning.setWordWrap(True)
        warning.setStyleSheet(WARNING_STYLE)
        layout.addWidget(warning)

        seed_box = QLabel(format_seed_grid(seed_phrase))
        seed_box.setFont(QFont(Theme.MONO_FONT, 11))
        seed_box.setStyleSheet(
            f"background-color: {Theme.SEED_BG}; padding: 12px; border: 1px solid {Theme.SEED_BORDER};"
        )
        layout.addWidget(seed_box)

        copy_btn = QPushButton("Copy to Clipboard")
        copy_btn.setFixedWidth(self.BUTTON_WIDTH)
        copy_btn.clicked.connect(self.copy_seed)
        layout.addWidget(copy_btn, alignment=Qt.AlignmentFlag.AlignHCenter)

        layout.addStretch()

        self.confirm_check = QCheckBox("I have written down my seed phrase")
        self.confirm_check.toggled.connect(lambda checked: self.continue_btn.setEnabled(checked))
        layout.addWidget(self.confirm_check)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(cancel_btn)
        self.continue_btn = QPushButton("Continue")
        self.continue_btn.setEnabled(False)
        self.continue_btn.setDefault(True)
        self.continue_btn.clicked.connect(self.on_continue)
        btn_layout.addWidget(self.continue_btn)
        layout.addLayout(btn_layout)

    def copy_seed(self):
        copy_sensitive_to_clipboard(self.seed_phrase, self)

    def on_continue(self):
        if not self.confirm_check.isChecked():
            return
        self.accept()


# ============================================
# Seed Phrase Verification
# ============================================

class VerifySeedPhraseDialog(QDialog):
    """Rebuild the seed phrase from shuffled words to prove it was saved."""

    COLUMNS = 4

    def __init__(self, controller: SessionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("Verify Your Seed Phrase")
        self.setModal(True)
        self.setMinimumWidth(560)

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        intro = QLabel(
            "To confirm you've saved your seed phrase, please recreate it "
            "by selecting the words in the correct order."
        )
        intro.setWordWrap(True)
        layout.addWidget(intro)

        selected_group = QGroupBox("Your phrase (click a word to remove it)")
        self.selected_grid = QGridLayout(selected_group)
        layout.addWidget(selected_group)

        pool_group = QGroupBox("Available words")
        self.pool_grid = QGridLayout(pool_group)
        layout.addWidget(pool_group)

        self.status_label = _error_label()
        layout.addWidget(self.status_label)

        btn_layout = QHBoxLayout()
        self.reshuffle_btn = QPushButton("Reshuffle")
        self.reshuffle_btn.clicked.connect(self._on_reshuffle)
        btn_layout.addWidget(self.reshuffle_btn)
        btn_layout.addStretch()

        self.cancel_btn = QPushButton("Start Over")
        self.cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(self.cancel_btn)

        self.retry_btn = QPushButton("Retry")
        self.retry_btn.clicked.connect(self._on_retry)
        btn_layout.addWidget(self.retry_btn)

        self.verify_btn = QPushButton("Verify")
        self.verify_btn.setDefault(True)
        self.verify_btn.clicked.connect(self._on_verify)
        btn_layout.addWidget(self.verify_btn)
        layout.addLayout(btn_layout)

        controller.phase_changed.connect(self._on_phase_changed)
        controller.busy_changed.connect(self._on_busy_changed)
        self._connected = True
        self.refresh()

    @staticmethod
    def _clear_grid(grid: QGridLayout):
        while grid.count():
            item = grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    def refresh(self):
        ceremony = self.controller.ceremony
        phase = self.controller.phase
        verifying = phase is SessionPhase.AWAITING_SEED_VERIFICATION
        busy = self.controller.is_busy

        self._clear_grid(self.selected_grid)
        for i, word in enumerate(ceremony.selected):
            btn = QPushButton(f"{i + 1}. {word}")
            btn.setEnabled(verifying and not busy)
            btn.clicked.connect(lambda _, w=word, idx=i: self._on_deselect(w, idx))
            self.selected_grid.addWidget(btn, i // self.COLUMNS, i % self.COLUMNS)

        self._clear_grid(self.pool_grid)
        for i, word in enumerate(ceremony.pool):
            btn = QPushButton(word)
            btn.setEnabled(verifying and not busy)
            btn.clicked.connect(lambda _, w=word, idx=i: self._on_select(w, idx))
            self.pool_grid.addWidget(btn, i // self.COLUMNS, i % self.COLUMNS)

        retrying = phase is SessionPhase.AWAITING_CREATE_RETRY
        self.verify_btn.setVisible(not retrying)
        self.verify_btn.setEnabled(verifying and ceremony.can_verify and not busy)
        self.reshuffle_btn.setEnabled(verifying and not busy)
        self.retry_btn.setVisible(retrying)
        self.retry_btn.setEnabled(not busy)
        self.cancel_btn.setEnabled(not busy)

        if retrying:
            self.status_label.setText(
                f"{self.controller.error_message}\n"
                "Your seed phrase is unchanged. Retry with the same phrase, or start over."
            )
        elif self.controller.verification_failed:
            self.status_label.setText("The words are not in the correct order. Please try again.")
        else:
            self.status_label.setText("")

    def _on_select(self, word: str, index: int):
        self.controller.select_word(word, index)
        self.refresh()

    def _on_deselect(self, word: str, index: int):
        self.controller.deselect_word(word, index)
        self.refresh()

    def _on_reshuffle(self):
        self.controller.reshuffle()
        self.refresh()

    def _on_phase_changed(self, phase: SessionPhase):
        if phase is SessionPhase.OPEN:
            self.accept()
        else:
            self.refresh()

    def _on_busy_changed(self, busy: bool):
        self.refresh()

    def done(self, result: int):
        if self._connected:
            self.controller.phase_changed.disconnect(self._on_phase_changed)
            self.controller.busy_changed.disconnect(self._on_busy_changed)
            self._connected = False
        super().done(result)

    @asyncSlot()
    async def _on_verify(self):
        await self.controller.confirm_verification()

    @asyncSlot()
    async def _on_retry(self):
        await self.controller.retry_create()


# ============================================
# Secure Wallet Dialog
# ============================================

class SecureWalletDialog(QDialog):
    """Add password protection to an unsecured wallet."""

    BUTTON_WIDTH = 100

    def __init__(self, controller: SessionController, wallet_name: str, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.wallet_name = wallet_name
        self.setWindowTitle("Secure Wallet")
        self.setModal(True)
        self.setFixedWidth(400)

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        subtitle = QLabel(
            f"Set a password for \"{wallet_name}\". You will need it every time you open this wallet."
        )
        subtitle.setWordWrap(True)
        layout.addWidget(subtitle)

        self.password_input = _password_input("Enter password")
        layout.addWidget(self.password_input)
        self.confirm_input = _password_input("Confirm password")
        self.confirm_input.returnPressed.connect(self.on_secure)
        layout.addWidget(self.confirm_input)

        self.error_label = _error_label()
        layout.addWidget(self.error_label)

        layout.addStretch()

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setFixedWidth(self.BUTTON_WIDTH)
        self.cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(self.cancel_btn)
        self.secure_btn = QPushButton("Secure")
        self.secure_btn.setFixedWidth(self.BUTTON_WIDTH)
        self.secure_btn.setDefault(True)
        self.secure_btn.clicked.connect(self.on_secure)
        btn_layout.addWidget(self.secure_btn)
        layout.addLayout(btn_layout)

    @asyncSlot()
    async def on_secure(self):
        self.secure_btn.setEnabled(False)
        self.cancel_btn.setEnabled(False)
        try:
            ok = await self.controller.secure_wallet(
                self.wallet_name, self.password_input.text(), self.confirm_input.text()
            )
        finally:
            self.secure_btn.setEnabled(True)
            self.cancel_btn.setEnabled(True)
        if ok:
            self.accept()
        else:
            self.error_label.setText(self.controller.error_message)


# ============================================
# Settings Dialog
# ============================================

class SettingsDialog(QDialog):
    """Application preferences, including developer options."""

    def __init__(self, store: SettingsStore, parent=None):
        super().__init__(parent)
        self.store = store
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(Theme.MIN_DIALOG_WIDTH)

        settings = store.settings
        layout = QVBoxLayout(self)

        general = QGroupBox("General")
        form = QFormLayout(general)
        self.minimize_check = QCheckBox("Minimize to system tray")
        self.minimize_check.setChecked(settings.minimize_to_tray)
        form.addRow(self.minimize_check)
        self.close_check = QCheckBox("Close to system tray")
        self.close_check.setChecked(settings.close_to_tray)
        form.addRow(self.close_check)
        self.retention_spin = QSpinBox()
        self.retention_spin.setRange(0, 365)
        self.retention_spin.setSuffix(" days")
        self.retention_spin.setSpecialValueText("Don't save")
        self.retention_spin.setValue(settings.log_retention_days)
        form.addRow("Keep activity log:", self.retention_spin)
        layout.addWidget(general)

        developer = QGroupBox("Developer")
        dev_layout = QVBoxLayout(developer)
        self.developer_check = QCheckBox("Developer mode")
        self.developer_check.setChecked(settings.developer_mode)
        self.developer_check.toggled.connect(self._on_developer_toggled)
        dev_layout.addWidget(self.developer_check)
        self.skip_check = QCheckBox("Skip seed phrase dialogs when creating wallets")
        self.skip_check.setChecked(settings.skip_seed_phrase_dialogs)
        dev_layout.addWidget(self.skip_check)
        self.skip_warning = QLabel(
            "Wallets created this way have no verified backup. Only use for testing."
        )
        self.skip_warning.setWordWrap(True)
        self.skip_warning.setStyleSheet(WARNING_STYLE)
        dev_layout.addWidget(self.skip_warning)
        layout.addWidget(developer)

        self.error_label = _error_label()
        layout.addWidget(self.error_label)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_layout.addWidget(cancel_btn)
        save_btn = QPushButton("Save")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self.on_save)
        btn_layout.addWidget(save_btn)
        layout.addLayout(btn_layout)

        self._on_developer_toggled(settings.developer_mode)

    def _on_developer_toggled(self, checked: bool):
        self.skip_check.setEnabled(checked)
        self.skip_warning.setVisible(checked)

    def on_save(self):
        try:
            self.store.update(
                minimize_to_tray=self.minimize_check.isChecked(),
                close_to_tray=self.close_check.isChecked(),
                log_retention_days=self.retention_spin.value(),
            )
            developer_mode = self.developer_check.isChecked()
            if developer_mode != self.store.settings.developer_mode:
                self.store.set_developer_mode(developer_mode)
            if developer_mode:
                self.store.set_skip_seed_phrase_dialogs(self.skip_check.isChecked())
        except ValueError as e:
            self.error_label.setText(str(e))
            return
        self.accept()
