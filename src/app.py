"""
B-Rad Wallet - Local seed phrase wallet manager

Entry point for the application.
"""

import asyncio
import sys

from PyQt6.QtWidgets import QApplication
from qasync import QEventLoop

from models import SettingsStore
from onboarding import SessionController
from services import LocalWalletBackend
from services.logging import configure_logging
from ui import MainWindow
from utils import get_settings_path, get_wallet_dir


def main():
    """Application entry point."""
    # Configure logging before anything else
    configure_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("B-Rad Wallet")
    app.setOrganizationName("B-Rad")

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app_close_event = asyncio.Event()
    app.aboutToQuit.connect(app_close_event.set)

    settings_store = SettingsStore(get_settings_path())
    backend = LocalWalletBackend(get_wallet_dir())
    controller = SessionController(backend, settings_store.snapshot)

    window = MainWindow(controller, settings_store)
    window.show()
    window.update_activity("Welcome to B-Rad Wallet")

    with loop:
        loop.create_task(controller.initialize())
        loop.run_until_complete(app_close_event.wait())


if __name__ == "__main__":
    main()
