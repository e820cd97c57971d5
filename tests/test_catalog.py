import pytest

from models import WalletSummary
from onboarding import BackendUnavailable, WalletCatalog
from conftest import FakeWalletBackend


@pytest.mark.asyncio
async def test_refresh_replaces_wallets():
    backend = FakeWalletBackend([WalletSummary("Alice"), WalletSummary("Bob", True)])
    catalog = WalletCatalog(backend)

    wallets = await catalog.refresh()

    assert [w.name for w in wallets] == ["Alice", "Bob"]
    assert catalog.find("Bob").secured is True
    assert catalog.find("bob") is None
    assert len(catalog) == 2

    backend.wallets = [WalletSummary("Carol")]
    await catalog.refresh()
    assert catalog.names == ["Carol"]


@pytest.mark.asyncio
async def test_refresh_failure_leaves_catalog_empty():
    backend = FakeWalletBackend([WalletSummary("Alice")])
    catalog = WalletCatalog(backend)
    await catalog.refresh()

    backend.fail["list_wallets"] = RuntimeError("keystore offline")
    with pytest.raises(BackendUnavailable, match="keystore offline"):
        await catalog.refresh()

    assert catalog.is_empty()
    assert catalog.wallets == []


@pytest.mark.asyncio
async def test_refresh_accepts_dicts_and_drops_duplicates():
    backend = FakeWalletBackend([
        {"name": "Alice", "secured": True},
        {"name": "alice"},
        {"name": ""},
        {"name": "Bob"},
    ])
    catalog = WalletCatalog(backend)

    await catalog.refresh()

    assert catalog.names == ["Alice", "Bob"]
    assert catalog.find("Alice").secured is True


def test_find_ignores_empty_name():
    catalog = WalletCatalog(FakeWalletBackend())
    assert catalog.find(None) is None
    assert catalog.find("") is None
