"""
UI Theme - Design system colors and fonts.
"""

from PyQt6.QtWidgets import QMessageBox


class Theme:
    """B-Rad Wallet colors."""

    # Brand colors
    BLUE = "#1976d2"
    BLUE_DARK = "#0a1929"
    NAVY = "#132f4c"
    CHARCOAL = "#4A4543"       # Borders, secondary text
    WHITE = "#fafafa"

    # Status colors
    SUCCESS = "#22c55e"
    ERROR = "#ef4444"
    WARNING = "#f59e0b"

    # Banners
    WARNING_BG = "#FFF3CD"
    WARNING_FG = "#856404"
    WARNING_BORDER = "#FFECB5"
    SEED_BG = "#ffffcc"
    SEED_BORDER = "#cccc00"

    # Typography
    MONO_FONT = "Consolas"

    # Standard dialog sizes
    MIN_DIALOG_WIDTH = 420
    MIN_POPUP_WIDTH = 300


def ask_question(parent, title: str, message: str, default_no: bool = True) -> bool:
    """
    Show a question dialog with consistent sizing.
    Returns True if user clicked Yes, False otherwise.
    """
    msg = QMessageBox(parent)
    msg.setWindowTitle(title)
    msg.setText(message)
    msg.setIcon(QMessageBox.Icon.Question)
    msg.setStandardButtons(QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No)
    msg.setDefaultButton(
        QMessageBox.StandardButton.No if default_no else QMessageBox.StandardButton.Yes
    )
    msg.setMinimumWidth(Theme.MIN_POPUP_WIDTH)
    return msg.exec() == QMessageBox.StandardButton.Yes


def show_warning(parent, title: str, message: str) -> None:
    """Show a warning dialog with consistent sizing."""
    msg = QMessageBox(parent)
    msg.setWindowTitle(title)
    msg.setText(message)
    msg.setIcon(QMessageBox.Icon.Warning)
    msg.setStandardButtons(QMessageBox.StandardButton.Ok)
    msg.setMinimumWidth(Theme.MIN_POPUP_WIDTH)
    msg.exec()
