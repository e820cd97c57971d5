import random

import pytest
from PyQt6.QtCore import QCoreApplication

from models import AppSettings, WalletSummary
from onboarding import SeedPhraseCeremony, SessionController
from services import BackendError, WalletBackend

PHRASE = "abandon ability able about above absent absorb abstract absurd abuse access accident"


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class FakeWalletBackend(WalletBackend):
    """In-memory backend recording every call."""

    def __init__(self, wallets=None, phrase=PHRASE):
        super().__init__()
        self.wallets = list(wallets or [])
        self.phrase = phrase
        self.calls = []
        self.current = None
        self.fail = {}      # operation -> exception to raise
        self.results = {}   # operation -> return value override
        self.gate = None    # asyncio.Event that open/create wait on

    def _call(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.fail:
            raise self.fail[op]
        return self.results.get(op, True)

    def names(self):
        return [w.name for w in self.wallets]

    async def list_wallets(self):
        self._call("list_wallets")
        return list(self.wallets)

    async def check_open(self):
        self._call("check_open")
        return self.current is not None

    async def current_wallet_name(self):
        self._call("current_wallet_name")
        return self.current

    async def is_current_secured(self):
        self._call("is_current_secured")
        for w in self.wallets:
            if w.name == self.current:
                return w.secured
        return None

    async def generate_seed_phrase(self):
        self._call("generate_seed_phrase")
        return self.phrase

    async def open_wallet(self, name, password=None):
        if self.gate is not None:
            await self.gate.wait()
        ok = self._call("open_wallet", name, password)
        if ok:
            self.current = name
        return ok

    async def create_wallet(self, name, password, use_password, seed_phrase=None):
        if self.gate is not None:
            await self.gate.wait()
        ok = self._call("create_wallet", name, password, use_password, seed_phrase)
        if ok:
            self.wallets.append(WalletSummary(name, use_password))
            self.current = name
        return ok

    async def recover_wallet(self, name, seed_phrase, password, use_password):
        ok = self._call("recover_wallet", name, seed_phrase, password, use_password)
        if ok:
            self.wallets.append(WalletSummary(name, use_password))
            self.current = name
        return ok

    async def close_wallet(self):
        ok = self._call("close_wallet")
        if ok:
            self.current = None
        return ok

    async def delete_wallet(self, name):
        ok = self._call("delete_wallet", name)
        if ok:
            self.wallets = [w for w in self.wallets if w.name != name]
            if self.current == name:
                self.current = None
        return ok

    async def secure_wallet(self, name, password):
        ok = self._call("secure_wallet", name, password)
        if ok:
            self.wallets = [WalletSummary(w.name, True) if w.name == name else w for w in self.wallets]
        return ok

    def delete_everything(self):
        """Simulate another process wiping the keystore."""
        self.wallets = []
        self.current = None
        self.events.wallets_deleted.emit()

    def called(self, op):
        return [c for c in self.calls if c[0] == op]


@pytest.fixture
def backend():
    return FakeWalletBackend()


@pytest.fixture
def settings():
    """Mutable holder so tests can flip settings between operations."""
    holder = {"value": AppSettings()}
    return holder


@pytest.fixture
def controller(backend, settings):
    ceremony = SeedPhraseCeremony(rng=random.Random(7))
    return SessionController(backend, lambda: settings["value"], ceremony=ceremony)


def rebuild_phrase(controller, phrase=PHRASE):
    """Select the pool words in phrase order."""
    for word in phrase.split():
        controller.select_word(word, controller.ceremony.pool.index(word))
