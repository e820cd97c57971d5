"""
Wallet session models.

Plain data carried between the wallet catalog, the onboarding form,
the seed phrase ceremony and the session controller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Tab(Enum):
    """Onboarding dialog tabs."""
    OPEN = 0
    CREATE = 1


@dataclass(frozen=True)
class WalletSummary:
    """A wallet as reported by the backend's wallet list."""
    name: str
    secured: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "WalletSummary":
        return cls(name=str(data["name"]), secured=data.get("secured") is True)

    def to_dict(self) -> dict:
        return {"name": self.name, "secured": self.secured}


@dataclass(frozen=True)
class CurrentWallet:
    """Identity of the wallet that is open in the backend."""
    name: str
    secured: bool = False


@dataclass(frozen=True)
class SessionState:
    """
    UI-visible session state.

    `is_open` is derived from `current`, so an open session without a
    wallet (or the reverse) cannot be represented.
    """
    current: Optional[CurrentWallet] = None

    @property
    def is_open(self) -> bool:
        return self.current is not None

    @property
    def is_secured(self) -> bool:
        return self.current is not None and self.current.secured

    @classmethod
    def closed(cls) -> "SessionState":
        return cls(current=None)

    @classmethod
    def opened(cls, name: str, secured: bool) -> "SessionState":
        return cls(current=CurrentWallet(name=name, secured=secured))


@dataclass
class OnboardingDraft:
    """Form fields of the Open / Create / Recover dialog."""
    mode: Tab = Tab.OPEN
    selected_wallet: Optional[str] = None
    open_password: str = ""
    new_name: str = ""
    new_password: str = ""
    confirm_password: str = ""
    use_password_protection: bool = False
    is_recovery: bool = False
    recovery_phrase: str = ""


@dataclass(frozen=True)
class PendingWalletData:
    """Name and password collected for a wallet whose seed is not yet verified."""
    name: str
    password: str
    use_password: bool


@dataclass
class SeedPhraseSession:
    """
    A generated seed phrase being shown to and reconstructed by the user.

    `shuffled_pool` and `selected` always hold, between them, exactly the
    words of `phrase` (counting duplicates).
    """
    phrase: str
    shuffled_pool: list[str] = field(default_factory=list)
    selected: list[str] = field(default_factory=list)
    acknowledged: bool = False

    @property
    def words(self) -> list[str]:
        return self.phrase.split(" ")

    @property
    def is_complete(self) -> bool:
        return len(self.selected) == len(self.words)
