"""
Main Window - The primary application window.

Contains the header, wallet panel, activity log, and system tray.
"""

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QStatusBar, QMenu, QFrame, QTextEdit, QSystemTrayIcon, QStyle,
    QApplication, QDialog, QDialogButtonBox
)
from PyQt6.QtCore import Qt, QTimer, QEvent
from PyQt6.QtGui import QFont
from qasync import asyncSlot
from datetime import datetime
import logging

from .theme import Theme, ask_question, show_warning
from .dialogs import OpenCreateWalletDialog, SecureWalletDialog, SettingsDialog
from models import SessionState, SettingsStore, Tab
from onboarding import SessionController, SessionPhase
from services.logging import ActivityLog, to_display

logger = logging.getLogger(__name__)

# Activity lines restored from disk on startup
LOG_LINES_ON_STARTUP = 200


class LogView(QWidget):
    """Activity log with optional disk persistence."""

    def __init__(self, activity_log: ActivityLog):
        super().__init__()
        self.activity_log = activity_log
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.log_view = QTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setFont(QFont(Theme.MONO_FONT, 9))
        layout.addWidget(self.log_view)

        controls = QHBoxLayout()
        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(self.log_view.clear)
        controls.addWidget(clear_btn)
        copy_btn = QPushButton("Copy")
        copy_btn.clicked.connect(lambda: QApplication.clipboard().setText(self.log_view.toPlainText()))
        controls.addWidget(copy_btn)
        controls.addStretch()
        layout.addLayout(controls)

    def set_retention_days(self, days: int):
        """Set log retention (0 = don't save to disk)."""
        self.activity_log.retention_days = days

    def load_recent(self, max_lines: int):
        """Load recent logs from disk on startup."""
        lines = self.activity_log.recent(max_lines)
        if lines:
            for line in lines:
                self.log_view.append(to_display(line))
            self.log_view.append("[--:--:--] --- Session started ---")

    def add_log(self, message: str):
        self.log_view.append(self.activity_log.record(message))


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: SessionController, settings_store: SettingsStore):
        super().__init__()
        self.controller = controller
        self.settings_store = settings_store

        self.setWindowTitle("B-Rad Wallet")
        self.setMinimumSize(640, 420)

        self.create_menu_bar()

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        layout.addWidget(self.create_header())
        layout.addWidget(self.create_wallet_panel())

        settings = settings_store.settings
        self.log_view = LogView(ActivityLog(settings.log_retention_days))
        if settings.log_retention_days > 0:
            self.log_view.load_recent(LOG_LINES_ON_STARTUP)
            deleted = self.log_view.activity_log.prune()
            if deleted > 0:
                self.log_view.add_log(f"Cleaned up {deleted} old log file(s)")
        layout.addWidget(self.log_view, 1)

        self.status = QStatusBar()
        self.setStatusBar(self.status)

        self.onboarding_dialog = OpenCreateWalletDialog(controller, self)

        controller.session_changed.connect(self.on_session_changed)
        controller.phase_changed.connect(self.on_phase_changed)
        controller.dialog_changed.connect(self.on_dialog_changed)
        controller.catalog_changed.connect(lambda _: self.update_wallet_panel())
        controller.busy_changed.connect(lambda _: self.update_wallet_panel())
        controller.activity.connect(self.update_activity)

        self.setup_tray()
        self.on_session_changed(controller.session)

    # ----------------------------------------
    # Layout
    # ----------------------------------------

    def create_header(self) -> QFrame:
        header = QFrame()
        header.setStyleSheet(f"background-color: {Theme.BLUE_DARK};")
        header.setFixedHeight(84)

        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(16, 12, 16, 12)

        logo_label = QLabel("B-RAD WALLET")
        logo_label.setStyleSheet(f"color: {Theme.WHITE}; font-weight: bold; font-size: 16px;")
        header_layout.addWidget(logo_label, alignment=Qt.AlignmentFlag.AlignTop)
        header_layout.addStretch()

        wallet_row = QHBoxLayout()
        wallet_row.setSpacing(4)
        self.wallet_indicator = QLabel("●")
        self.wallet_indicator.setFixedWidth(12)
        wallet_row.addWidget(self.wallet_indicator)
        self.wallet_label = QLabel("No wallet open")
        self.wallet_label.setFont(QFont(Theme.MONO_FONT, 9))
        wallet_row.addWidget(self.wallet_label)
        header_layout.addLayout(wallet_row)
        header_layout.addStretch()

        self.activity_log = QTextEdit()
        self.activity_log.setReadOnly(True)
        self.activity_log.setFont(QFont(Theme.MONO_FONT, 9))
        self.activity_log.setStyleSheet(f"""
            QTextEdit {{
                background-color: transparent;
                border: none;
                color: {Theme.WHITE};
            }}
        """)
        self.activity_log.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.activity_log.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.activity_log.setMinimumWidth(320)
        self.activity_log.setMaximumHeight(60)
        self.activity_entries = []
        header_layout.addWidget(self.activity_log)

        return header

    def create_wallet_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(16, 12, 16, 0)

        self.wallet_name_label = QLabel("")
        self.wallet_name_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(self.wallet_name_label)

        self.secured_label = QLabel("")
        layout.addWidget(self.secured_label)

        btn_layout = QHBoxLayout()
        self.switch_btn = QPushButton("Switch Wallet")
        self.switch_btn.clicked.connect(lambda: self.show_onboarding(Tab.OPEN))
        btn_layout.addWidget(self.switch_btn)

        self.new_btn = QPushButton("New Wallet")
        self.new_btn.clicked.connect(lambda: self.show_onboarding(Tab.CREATE))
        btn_layout.addWidget(self.new_btn)

        self.secure_btn = QPushButton("Secure...")
        self.secure_btn.clicked.connect(self.secure_current_wallet)
        btn_layout.addWidget(self.secure_btn)

        self.close_btn = QPushButton("Close Wallet")
        self.close_btn.clicked.connect(self.close_wallet)
        btn_layout.addWidget(self.close_btn)

        self.delete_btn = QPushButton("Delete...")
        self.delete_btn.clicked.connect(self.confirm_delete_wallet)
        btn_layout.addWidget(self.delete_btn)

        btn_layout.addStretch()
        layout.addLayout(btn_layout)
        return panel

    def create_menu_bar(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        file_menu.addAction("Open Wallet...", lambda: self.show_onboarding(Tab.OPEN))
        file_menu.addAction("Create Wallet...", lambda: self.show_onboarding(Tab.CREATE))
        file_menu.addSeparator()
        file_menu.addAction("Close Wallet", self.close_wallet)
        file_menu.addSeparator()
        file_menu.addAction("Quit", QApplication.quit)

        settings_menu = menubar.addMenu("Settings")
        settings_menu.addAction("Preferences...", self.show_settings)

        self.developer_menu = menubar.addMenu("Developer")
        self.developer_menu.addAction("Delete All Wallets...", self.confirm_delete_all_wallets)
        self.developer_menu.menuAction().setVisible(self.settings_store.settings.developer_mode)

        help_menu = menubar.addMenu("Help")
        help_menu.addAction("About B-Rad Wallet", self.show_about)

    # ----------------------------------------
    # Controller signals
    # ----------------------------------------

    def on_session_changed(self, session: SessionState):
        current = session.current
        if current is None:
            self.wallet_indicator.setStyleSheet(f"color: {Theme.ERROR}; font-size: 12px;")
            self.wallet_label.setStyleSheet(f"color: {Theme.ERROR};")
            self.wallet_label.setText("No wallet open")
            self.status.showMessage("No wallet open")
        else:
            color = Theme.SUCCESS if current.secured else Theme.WARNING
            self.wallet_indicator.setStyleSheet(f"color: {color}; font-size: 12px;")
            self.wallet_label.setStyleSheet(f"color: {color};")
            self.wallet_label.setText(current.name)
            self.status.showMessage(f"Wallet: {current.name}")
        self.update_wallet_panel()
        self.update_tray()

    def on_phase_changed(self, phase: SessionPhase):
        if phase is not SessionPhase.OPEN and not self.onboarding_dialog.isVisible():
            self.show_and_activate()
            self.onboarding_dialog.sync_from_controller()
            self.onboarding_dialog.open()
        self.update_wallet_panel()

    def on_dialog_changed(self, visible: bool, tab: Tab):
        if visible:
            self.show_and_activate()
            self.onboarding_dialog.sync_from_controller()
            if not self.onboarding_dialog.isVisible():
                self.onboarding_dialog.open()
            self.onboarding_dialog.raise_()
        else:
            self.onboarding_dialog.hide()

    def update_wallet_panel(self):
        current = self.controller.session.current
        busy = self.controller.is_busy
        if current is None:
            self.wallet_name_label.setText("No wallet open")
            self.secured_label.setText("")
        else:
            self.wallet_name_label.setText(current.name)
            if current.secured:
                self.secured_label.setText("Password protected")
                self.secured_label.setStyleSheet(f"color: {Theme.SUCCESS};")
            else:
                self.secured_label.setText("Not password protected")
                self.secured_label.setStyleSheet(f"color: {Theme.WARNING};")
        is_open = current is not None
        self.close_btn.setEnabled(is_open and not busy)
        self.delete_btn.setEnabled(is_open and not busy)
        self.secure_btn.setEnabled(is_open and not current.secured and not busy)
        self.switch_btn.setEnabled(not busy)
        self.new_btn.setEnabled(not busy)

    def update_activity(self, message: str, is_error: bool = False):
        """Update both the activity log in the header and the log view."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        color = Theme.ERROR if is_error else Theme.WHITE

        entry = f'<span style="color: {color};">[{timestamp}] {message}</span>'
        self.activity_entries.append(entry)
        if len(self.activity_entries) > 3:
            self.activity_entries = self.activity_entries[-3:]
        self.activity_log.setHtml("<br>".join(self.activity_entries))

        self.log_view.add_log(message)

    # ----------------------------------------
    # Wallet actions
    # ----------------------------------------

    @asyncSlot()
    async def show_onboarding(self, tab: Tab = Tab.OPEN):
        await self.controller.open_dialog(tab)

    @asyncSlot()
    async def close_wallet(self):
        await self.controller.close_wallet()

    def confirm_delete_wallet(self):
        current = self.controller.session.current
        if current is None:
            return
        if ask_question(
            self,
            "Delete Wallet",
            f"Delete wallet \"{current.name}\"?\n\n"
            "Without its seed phrase the wallet cannot be recovered."
        ):
            self.delete_wallet(current.name)

    @asyncSlot()
    async def delete_wallet(self, name: str):
        if not await self.controller.delete_wallet(name):
            message = self.controller.error_message or f"Wallet {name} was not deleted"
            show_warning(self, "Delete Failed", message)

    def secure_current_wallet(self):
        current = self.controller.session.current
        if current is None or current.secured:
            return
        dialog = SecureWalletDialog(self.controller, current.name, self)
        dialog.open()

    def confirm_delete_all_wallets(self):
        backend = self.controller.backend
        if not hasattr(backend, "delete_all_wallets"):
            show_warning(self, "Not Supported", "This wallet backend cannot delete all wallets.")
            return
        if ask_question(
            self,
            "Delete All Wallets",
            "Delete EVERY wallet on this machine?\n\nThis cannot be undone."
        ):
            self.delete_all_wallets()

    @asyncSlot()
    async def delete_all_wallets(self):
        count = await self.controller.backend.delete_all_wallets()
        self.update_activity(f"Deleted {count} wallet(s)", is_error=True)

    def show_settings(self):
        """Show the settings dialog."""
        dialog = SettingsDialog(self.settings_store, self)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            settings = self.settings_store.settings
            self.log_view.set_retention_days(settings.log_retention_days)
            self.developer_menu.menuAction().setVisible(settings.developer_mode)
            self.update_activity("Settings saved")

    def show_about(self):
        """Show the About dialog."""
        dialog = QDialog(self)
        dialog.setWindowTitle("About B-Rad Wallet")
        dialog.setMinimumWidth(Theme.MIN_DIALOG_WIDTH)

        layout = QVBoxLayout(dialog)
        layout.setSpacing(12)
        layout.addWidget(QLabel("B-Rad Wallet"))
        version = QLabel("Version 0.1.0")
        version.setStyleSheet(f"color: {Theme.CHARCOAL};")
        layout.addWidget(version)
        desc = QLabel("Your seed phrase never leaves your machine.")
        desc.setWordWrap(True)
        layout.addWidget(desc)
        layout.addStretch()

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok)
        buttons.accepted.connect(dialog.accept)
        layout.addWidget(buttons)
        dialog.exec()

    # ----------------------------------------
    # System tray
    # ----------------------------------------

    def setup_tray(self):
        """Set up system tray icon with context menu."""
        self.tray = None
        if not QSystemTrayIcon.isSystemTrayAvailable():
            return

        self.tray = QSystemTrayIcon(self)
        self.tray.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon))

        tray_menu = QMenu()
        show_action = tray_menu.addAction("Show B-Rad Wallet")
        show_action.triggered.connect(self.show_and_activate)
        tray_menu.addSeparator()

        open_action = tray_menu.addAction("Open Wallet...")
        open_action.triggered.connect(lambda: self.show_onboarding(Tab.OPEN))
        create_action = tray_menu.addAction("Create Wallet...")
        create_action.triggered.connect(self.tray_create_wallet)
        self.tray_close_action = tray_menu.addAction("Close Wallet")
        self.tray_close_action.triggered.connect(self.close_wallet)

        tray_menu.addSeparator()
        quit_action = tray_menu.addAction("Quit")
        quit_action.triggered.connect(QApplication.quit)

        self.tray.setContextMenu(tray_menu)
        self.tray.activated.connect(self.on_tray_activated)
        self.tray.show()
        self.update_tray()

    def update_tray(self):
        if self.tray is None:
            return
        current = self.controller.session.current
        if current is None:
            self.tray.setToolTip("B-Rad Wallet - No wallet open")
        else:
            self.tray.setToolTip(f"B-Rad Wallet - {current.name}")
        self.tray_close_action.setEnabled(current is not None)

    @asyncSlot()
    async def tray_create_wallet(self):
        self.show_and_activate()
        await self.controller.handle_tray_create()

    def show_and_activate(self):
        """Show and bring window to front."""
        self.showNormal()
        self.activateWindow()
        self.raise_()

    def on_tray_activated(self, reason):
        """Handle tray icon activation."""
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self.show_and_activate()

    def closeEvent(self, event):
        """Handle window close - optionally minimize to tray instead."""
        if self.settings_store.settings.close_to_tray and self.tray is not None and self.tray.isVisible():
            event.ignore()
            self.hide()
            self.tray.showMessage(
                "B-Rad Wallet",
                "B-Rad Wallet is still running in the system tray.",
                QSystemTrayIcon.MessageIcon.Information,
                2000
            )
        else:
            event.accept()

    def changeEvent(self, event):
        """Handle window state changes - optionally minimize to tray."""
        if event.type() == QEvent.Type.WindowStateChange:
            if self.windowState() & Qt.WindowState.WindowMinimized:
                if self.settings_store.settings.minimize_to_tray and self.tray is not None and self.tray.isVisible():
                    event.ignore()
                    QTimer.singleShot(0, self.hide)
                    return
        super().changeEvent(event)
