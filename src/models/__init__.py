"""
Models package - Data models for B-Rad Wallet.

Contains:
- WalletSummary, CurrentWallet, SessionState: wallet catalog and session
- OnboardingDraft, PendingWalletData, SeedPhraseSession: onboarding drafts
- AppSettings, SettingsStore: JSON persisted preferences
"""

from .wallet import (
    Tab,
    WalletSummary,
    CurrentWallet,
    SessionState,
    OnboardingDraft,
    PendingWalletData,
    SeedPhraseSession,
)
from .settings import AppSettings, SettingsStore, should_bypass_ceremony

__all__ = [
    "Tab",
    "WalletSummary",
    "CurrentWallet",
    "SessionState",
    "OnboardingDraft",
    "PendingWalletData",
    "SeedPhraseSession",
    "AppSettings",
    "SettingsStore",
    "should_bypass_ceremony",
]
