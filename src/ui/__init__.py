"""
UI package - PyQt6 user interface components.

Contains:
- Theme: Design system colors and fonts
- MainWindow: Main application window with system tray
- Dialogs: Open/Create wallet, seed phrase backup and verification,
  secure wallet, settings
"""

from .theme import Theme, ask_question, show_warning
from .main_window import MainWindow, LogView
from .dialogs import (
    OpenCreateWalletDialog,
    SeedPhraseDialog,
    VerifySeedPhraseDialog,
    SecureWalletDialog,
    SettingsDialog,
    copy_sensitive_to_clipboard,
    format_seed_grid,
)

__all__ = [
    # Theme
    "Theme",
    "ask_question",
    "show_warning",
    # Main Window
    "MainWindow",
    "LogView",
    # Dialogs
    "OpenCreateWalletDialog",
    "SeedPhraseDialog",
    "VerifySeedPhraseDialog",
    "SecureWalletDialog",
    "SettingsDialog",
    "copy_sensitive_to_clipboard",
    "format_seed_grid",
]
