"""
Local Wallet Backend - File based implementation of WalletBackend.

Each wallet is a JSON file in the wallet directory; wallets.json keeps
the index (name, filename, secured flag) in creation order. Secured
wallets store their seed phrase encrypted with the wallet password.
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, asdict

from models import WalletSummary
from .backend import WalletBackend, BackendError
from .crypto import (
    encrypt_seed,
    decrypt_seed,
    new_seed_phrase,
    is_valid_seed_phrase,
    set_secure_permissions,
)

logger = logging.getLogger(__name__)

MAX_WALLETS = 999
MAX_NAME_LENGTH = 64


@dataclass
class WalletRecord:
    """Index entry for a wallet file."""
    name: str
    filename: str
    secured: bool
    created_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WalletRecord":
        return cls(**data)


@dataclass
class OpenWallet:
    """The wallet currently open (seed held in memory only)."""
    name: str
    secured: bool
    seed_phrase: str


class LocalWalletBackend(WalletBackend):
    """Stores wallets under wallet_dir and keeps at most one open."""

    def __init__(self, wallet_dir: Path):
        super().__init__()
        self.wallet_dir = Path(wallet_dir)
        self.index_path = self.wallet_dir / "wallets.json"
        self._records: list[WalletRecord] = []
        self._current: Optional[OpenWallet] = None
        self._load_index()

    # Index persistence

    def _load_index(self) -> None:
        if not self.index_path.exists():
            return
        try:
            with open(self.index_path, "r") as f:
                data = json.load(f)
            self._records = [WalletRecord.from_dict(w) for w in data]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load wallet index: {e}")
            self._records = []

    def _save_index(self) -> None:
        self.wallet_dir.mkdir(parents=True, exist_ok=True)
        with open(self.index_path, "w") as f:
            json.dump([r.to_dict() for r in self._records], f, indent=2)
        set_secure_permissions(self.index_path)

    def _find(self, name: str) -> Optional[WalletRecord]:
        for record in self._records:
            if record.name == name:
                return record
        return None

    def _name_taken(self, name: str) -> bool:
        lowered = name.strip().lower()
        return any(r.name.lower() == lowered for r in self._records)

    def _wallet_path(self, record: WalletRecord) -> Path:
        return self.wallet_dir / record.filename

    def _read_wallet_file(self, record: WalletRecord) -> dict:
        path = self._wallet_path(record)
        try:
            with open(path, "r") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise BackendError(f"Wallet file for '{record.name}' is unreadable: {e}")

    def _write_wallet_file(self, record: WalletRecord, seed_phrase: str,
                           password: Optional[str]) -> None:
        data = {
            "name": record.name,
            "secured": record.secured,
            "created_at": record.created_at,
        }
        if record.secured:
            data["seed"] = encrypt_seed(seed_phrase, password)
        else:
            data["seed_phrase"] = seed_phrase
        path = self._wallet_path(record)
        self.wallet_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        set_secure_permissions(path)

    def _read_seed(self, record: WalletRecord, password: Optional[str]) -> str:
        data = self._read_wallet_file(record)
        key = "seed" if record.secured else "seed_phrase"
        if key not in data:
            raise BackendError(f"Wallet file for '{record.name}' is corrupt")
        if not record.secured:
            return data[key]
        if not password:
            raise BackendError("A password is required to open this wallet")
        try:
            return decrypt_seed(data[key], password)
        except ValueError as e:
            raise BackendError(str(e))

    # Validation shared by create and recover

    def _check_new_wallet(self, name: str, password: Optional[str], use_password: bool) -> str:
        name = name.strip()
        if not name:
            raise BackendError("Wallet name cannot be empty")
        if len(name) > MAX_NAME_LENGTH:
            raise BackendError(f"Wallet name must be at most {MAX_NAME_LENGTH} characters")
        if self._name_taken(name):
            raise BackendError(f"A wallet with name \"{name}\" already exists")
        if len(self._records) >= MAX_WALLETS:
            raise BackendError("Maximum number of wallets reached")
        if use_password and not password:
            raise BackendError("A password is required for a secured wallet")
        return name

    async def _store_new_wallet(self, name: str, seed_phrase: str, password: Optional[str],
                                use_password: bool) -> None:
        record = WalletRecord(
            name=name,
            filename=f"wallet_{uuid.uuid4().hex[:8]}.json",
            secured=use_password,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        # Argon2 takes about a second; keep it off the UI thread
        await asyncio.to_thread(self._write_wallet_file, record, seed_phrase, password)
        self._records.append(record)
        self._save_index()
        self._current = OpenWallet(name=name, secured=use_password, seed_phrase=seed_phrase)

    # WalletBackend

    async def list_wallets(self) -> list[WalletSummary]:
        return [WalletSummary(name=r.name, secured=r.secured) for r in self._records]

    async def check_open(self) -> bool:
        return self._current is not None

    async def current_wallet_name(self) -> Optional[str]:
        return self._current.name if self._current else None

    async def is_current_secured(self) -> Optional[bool]:
        return self._current.secured if self._current else None

    async def generate_seed_phrase(self) -> str:
        return new_seed_phrase()

    async def open_wallet(self, name: str, password: Optional[str] = None) -> bool:
        record = self._find(name)
        if record is None:
            raise BackendError(f"Wallet '{name}' not found")
        seed_phrase = await asyncio.to_thread(self._read_seed, record, password)
        self._current = OpenWallet(name=record.name, secured=record.secured, seed_phrase=seed_phrase)
        logger.info(f"Opened wallet {record.name}")
        return True

    async def create_wallet(self, name: str, password: Optional[str], use_password: bool,
                            seed_phrase: Optional[str] = None) -> bool:
        name = self._check_new_wallet(name, password, use_password)
        if seed_phrase is None:
            logger.warning(f"No seed phrase supplied for {name}, generating one")
            seed_phrase = new_seed_phrase()
        elif not is_valid_seed_phrase(seed_phrase):
            raise BackendError("Invalid seed phrase")
        await self._store_new_wallet(name, seed_phrase, password, use_password)
        logger.info(f"Created wallet {name}")
        return True

    async def recover_wallet(self, name: str, seed_phrase: str, password: Optional[str],
                             use_password: bool) -> bool:
        name = self._check_new_wallet(name, password, use_password)
        normalized = " ".join(seed_phrase.strip().lower().split())
        if not is_valid_seed_phrase(normalized):
            raise BackendError("Invalid seed phrase. Check for typos.")
        await self._store_new_wallet(name, normalized, password, use_password)
        logger.info(f"Recovered wallet {name}")
        return True

    async def close_wallet(self) -> bool:
        if self._current is None:
            return False
        logger.info(f"Closed wallet {self._current.name}")
        self._current = None
        return True

    async def delete_wallet(self, name: str) -> bool:
        record = self._find(name)
        if record is None:
            return False
        try:
            self._wallet_path(record).unlink(missing_ok=True)
        except OSError as e:
            raise BackendError(f"Failed to delete wallet file: {e}")
        self._records.remove(record)
        self._save_index()
        if self._current and self._current.name == name:
            self._current = None
        logger.info(f"Deleted wallet {name}")
        return True

    async def secure_wallet(self, name: str, password: str) -> bool:
        record = self._find(name)
        if record is None:
            raise BackendError(f"Wallet '{name}' not found")
        if record.secured:
            raise BackendError(f"Wallet '{name}' is already secured")
        if not password:
            raise BackendError("Password cannot be empty")
        seed_phrase = self._read_seed(record, None)
        record.secured = True
        try:
            await asyncio.to_thread(self._write_wallet_file, record, seed_phrase, password)
        except Exception:
            record.secured = False
            raise
        self._save_index()
        if self._current and self._current.name == name:
            self._current.secured = True
        logger.info(f"Secured wallet {name}")
        return True

    async def delete_all_wallets(self) -> int:
        """Remove every wallet (developer reset). Emits wallets_deleted."""
        count = 0
        for record in list(self._records):
            try:
                self._wallet_path(record).unlink(missing_ok=True)
                count += 1
            except OSError as e:
                logger.error(f"Failed to delete wallet file {record.filename}: {e}")
        self._records = []
        self._current = None
        self._save_index()
        self.events.wallets_deleted.emit()
        return count
