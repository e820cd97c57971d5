"""
Filesystem locations for B-Rad Wallet.

All state lives under one data directory:

    <data>/settings.json
    <data>/wallets/
    <data>/logs/

BRAD_WALLET_HOME overrides the location. Otherwise a frozen build keeps
its data beside the executable and a source checkout uses <repo>/data.
"""

import os
import sys
from pathlib import Path

DATA_DIR_ENV = "BRAD_WALLET_HOME"


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_app_dir() -> Path:
    """Resolve (and create) the data directory."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        base = Path(override).expanduser()
    elif getattr(sys, 'frozen', False):
        base = Path(sys.executable).parent / "data"
    else:
        base = Path(__file__).resolve().parent.parent / "data"
    return _ensure_dir(base)


def get_wallet_dir() -> Path:
    # LocalWalletBackend creates it on first write
    return get_app_dir() / "wallets"


def get_settings_path() -> Path:
    return get_app_dir() / "settings.json"


def get_logs_dir() -> Path:
    return _ensure_dir(get_app_dir() / "logs")
