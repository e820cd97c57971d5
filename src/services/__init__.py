"""
Services package - Backend services for B-Rad Wallet.

Contains:
- WalletBackend: Contract for the wallet keystore service
- LocalWalletBackend: File based keystore
- Logging configuration and activity log persistence
"""

from .backend import WalletBackend, BackendEvents, BackendError
from .local_backend import LocalWalletBackend

__all__ = [
    "WalletBackend",
    "BackendEvents",
    "BackendError",
    "LocalWalletBackend",
]
