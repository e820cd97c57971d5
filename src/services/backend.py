"""
Wallet Backend - Contract between the onboarding controller and the
keystore that actually creates, encrypts and opens wallets.

Every operation is a coroutine. Failures are reported either by returning
False or by raising; BackendError carries the backend's own message.
"""

from abc import ABC, abstractmethod
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models import WalletSummary


class BackendError(Exception):
    """A wallet backend operation failed. The message is shown verbatim."""


class BackendEvents(QObject):
    """Events pushed by the backend outside of any request."""

    wallets_deleted = pyqtSignal()  # No payload; listeners refresh everything
    wallet_closed = pyqtSignal()    # Wallet closed outside the controller (e.g. tray)


class WalletBackend(ABC):
    """Abstract wallet service consumed by the onboarding controller."""

    def __init__(self):
        self.events = BackendEvents()

    @abstractmethod
    async def list_wallets(self) -> list[WalletSummary]:
        """All known wallets, in display order."""

    @abstractmethod
    async def check_open(self) -> bool:
        """Whether a wallet is currently open."""

    @abstractmethod
    async def current_wallet_name(self) -> Optional[str]:
        """Name of the open wallet, if any."""

    @abstractmethod
    async def is_current_secured(self) -> Optional[bool]:
        """Whether the open wallet is password protected (None if none open)."""

    @abstractmethod
    async def generate_seed_phrase(self) -> str:
        """A new space-separated seed phrase."""

    @abstractmethod
    async def open_wallet(self, name: str, password: Optional[str] = None) -> bool:
        ...

    @abstractmethod
    async def create_wallet(self, name: str, password: Optional[str], use_password: bool,
                            seed_phrase: Optional[str] = None) -> bool:
        """
        Create and open a wallet.

        seed_phrase is None only on the developer bypass path; the backend
        decides what to do without one.
        """

    @abstractmethod
    async def recover_wallet(self, name: str, seed_phrase: str, password: Optional[str],
                             use_password: bool) -> bool:
        ...

    @abstractmethod
    async def close_wallet(self) -> bool:
        ...

    @abstractmethod
    async def delete_wallet(self, name: str) -> bool:
        ...

    @abstractmethod
    async def secure_wallet(self, name: str, password: str) -> bool:
        """Add password protection to an unsecured wallet."""
