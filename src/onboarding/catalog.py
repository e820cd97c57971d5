"""
Wallet Catalog - Local view of the wallets the backend knows about.
"""

import logging
from typing import Optional

from models import WalletSummary
from services import WalletBackend
from .errors import BackendUnavailable

logger = logging.getLogger(__name__)


class WalletCatalog:
    """
    Wallet list as last reported by the backend.

    The list is replaced wholesale on every refresh; a failed refresh
    leaves it empty rather than stale.
    """

    def __init__(self, backend: WalletBackend):
        self._backend = backend
        self._wallets: tuple[WalletSummary, ...] = ()

    @property
    def wallets(self) -> list[WalletSummary]:
        return list(self._wallets)

    @property
    def names(self) -> list[str]:
        return [w.name for w in self._wallets]

    def is_empty(self) -> bool:
        return not self._wallets

    def __len__(self) -> int:
        return len(self._wallets)

    def __iter__(self):
        return iter(self._wallets)

    def find(self, name: Optional[str]) -> Optional[WalletSummary]:
        """Exact-name lookup."""
        if not name:
            return None
        for wallet in self._wallets:
            if wallet.name == name:
                return wallet
        return None

    def clear(self) -> None:
        self._wallets = ()

    async def refresh(self) -> list[WalletSummary]:
        """
        Reload the wallet list from the backend.

        Raises: BackendUnavailable (the catalog is cleared first).
        """
        try:
            reported = await self._backend.list_wallets()
        except Exception as e:
            logger.error(f"Error fetching wallet details: {e}")
            self._wallets = ()
            raise BackendUnavailable(f"Could not load wallets: {e}") from e

        wallets = []
        seen = set()
        for item in reported or []:
            wallet = item if isinstance(item, WalletSummary) else WalletSummary.from_dict(item)
            key = wallet.name.lower()
            if not wallet.name or key in seen:
                logger.warning(f"Ignoring invalid or duplicate wallet entry: {wallet.name!r}")
                continue
            seen.add(key)
            wallets.append(wallet)

        self._wallets = tuple(wallets)
        logger.debug(f"Catalog refreshed: {len(self._wallets)} wallet(s)")
        return list(self._wallets)
