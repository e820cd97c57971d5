"""
App Settings - JSON persistence for user preferences.

The onboarding controller only ever reads a snapshot of these settings;
changes go through SettingsStore (used by the settings dialog).
"""

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppSettings:
    """User preferences relevant to the wallet app."""
    developer_mode: bool = False
    skip_seed_phrase_dialogs: bool = False
    log_retention_days: int = 0
    minimize_to_tray: bool = False
    close_to_tray: bool = False

    @property
    def bypass_seed_ceremony(self) -> bool:
        """Skip seed phrase dialogs (developer builds only)."""
        return should_bypass_ceremony(self.developer_mode, self.skip_seed_phrase_dialogs)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary, ignoring unknown keys and mistyped values."""
        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            f = known.get(key)
            if f is None:
                continue
            default = f.default
            if isinstance(default, bool):
                if isinstance(value, bool):
                    kwargs[key] = value
            elif isinstance(default, int):
                if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                    kwargs[key] = value
        return cls(**kwargs)


def should_bypass_ceremony(developer_mode: bool, skip_flag: bool) -> bool:
    """
    Whether wallet creation may skip seed phrase display and verification.

    Both flags are required. A skip flag left over from an earlier
    developer session has no effect once developer mode is off.
    """
    return bool(developer_mode) and bool(skip_flag)


class SettingsStore:
    """Loads and saves AppSettings, preserving keys it does not know about."""

    def __init__(self, settings_path: Path):
        self.settings_path = settings_path
        self._raw: dict = {}
        self._settings = AppSettings()
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        if not self.settings_path.exists():
            return
        try:
            with open(self.settings_path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file does not contain an object")
            self._raw = data
            self._settings = AppSettings.from_dict(data)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings: {e}")

    def _save(self) -> None:
        """Save settings to disk."""
        self._raw.update(self._settings.to_dict())
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.settings_path, "w") as f:
                json.dump(self._raw, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def snapshot(self) -> AppSettings:
        """Current settings (immutable)."""
        return self._settings

    def set_developer_mode(self, enabled: bool) -> None:
        logger.info(f"Setting developer mode to: {enabled}")
        self._settings = replace(self._settings, developer_mode=enabled)
        self._save()

    def set_skip_seed_phrase_dialogs(self, skip: bool) -> None:
        if skip and not self._settings.developer_mode:
            raise ValueError("Developer mode must be enabled to skip seed phrase dialogs")
        logger.info(f"Setting skip seed phrase dialogs to: {skip}")
        self._settings = replace(self._settings, skip_seed_phrase_dialogs=skip)
        self._save()

    def update(self, **changes) -> None:
        """Update general (non-developer) preferences."""
        for key in ("developer_mode", "skip_seed_phrase_dialogs"):
            if key in changes:
                raise ValueError(f"Use the dedicated setter for {key}")
        self._settings = replace(self._settings, **changes)
        self._save()
