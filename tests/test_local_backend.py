import json

import pytest

from models import WalletSummary
from services import BackendError, LocalWalletBackend
from services.crypto import is_valid_seed_phrase, new_seed_phrase

VALID_PHRASE = " ".join(["abandon"] * 11 + ["about"])


@pytest.fixture
def local(tmp_path):
    return LocalWalletBackend(tmp_path / "wallets")


@pytest.mark.asyncio
async def test_generated_phrase_is_valid(local):
    phrase = await local.generate_seed_phrase()
    assert len(phrase.split()) == 12
    assert is_valid_seed_phrase(phrase)


@pytest.mark.asyncio
async def test_create_opens_and_persists(local, tmp_path):
    assert await local.create_wallet("Alice", None, False, VALID_PHRASE)

    assert await local.check_open()
    assert await local.current_wallet_name() == "Alice"
    assert await local.is_current_secured() is False

    reloaded = LocalWalletBackend(tmp_path / "wallets")
    assert await reloaded.list_wallets() == [WalletSummary("Alice", False)]


@pytest.mark.asyncio
async def test_create_without_phrase_generates_one(local):
    assert await local.create_wallet("Dev", None, False, None)
    assert is_valid_seed_phrase(local._current.seed_phrase)


def test_new_seed_phrase_word_counts():
    for count in (12, 24):
        phrase = new_seed_phrase(count)
        assert len(phrase.split()) == count
        assert is_valid_seed_phrase(phrase)
    assert new_seed_phrase() != new_seed_phrase()


@pytest.mark.asyncio
async def test_create_rejects_duplicates_and_bad_phrases(local):
    await local.create_wallet("Alice", None, False, VALID_PHRASE)
    with pytest.raises(BackendError, match="already exists"):
        await local.create_wallet("ALICE", None, False, VALID_PHRASE)
    with pytest.raises(BackendError, match="Invalid seed phrase"):
        await local.create_wallet("Bob", None, False, "not a real phrase")
    with pytest.raises(BackendError, match="password"):
        await local.create_wallet("Carol", None, True, VALID_PHRASE)


@pytest.mark.asyncio
async def test_secured_wallet_round_trip(local):
    await local.create_wallet("Vault", "hunter2", True, VALID_PHRASE)
    await local.close_wallet()

    wallet_file = local.wallet_dir / local._find("Vault").filename
    assert VALID_PHRASE not in wallet_file.read_text()

    with pytest.raises(BackendError, match="Wrong password"):
        await local.open_wallet("Vault", "hunter3")
    with pytest.raises(BackendError, match="password is required"):
        await local.open_wallet("Vault")

    assert await local.open_wallet("Vault", "hunter2")
    assert local._current.seed_phrase == VALID_PHRASE


@pytest.mark.asyncio
async def test_recover_normalizes_phrase(local):
    messy = "  " + VALID_PHRASE.upper().replace(" ", "   ") + " "
    assert await local.recover_wallet("Restored", messy, None, False)
    assert local._current.seed_phrase == VALID_PHRASE

    with pytest.raises(BackendError, match="Check for typos"):
        await local.recover_wallet("Other", "abandon " * 12, None, False)


@pytest.mark.asyncio
async def test_secure_existing_wallet(local):
    await local.create_wallet("Alice", None, False, VALID_PHRASE)

    assert await local.secure_wallet("Alice", "pw")

    assert await local.list_wallets() == [WalletSummary("Alice", True)]
    assert await local.is_current_secured() is True
    with pytest.raises(BackendError, match="already secured"):
        await local.secure_wallet("Alice", "pw")


@pytest.mark.asyncio
async def test_delete_wallet(local):
    await local.create_wallet("Alice", None, False, VALID_PHRASE)

    assert not await local.delete_wallet("Nobody")
    assert await local.delete_wallet("Alice")

    assert await local.list_wallets() == []
    assert not await local.check_open()
    assert not await local.close_wallet()
    assert json.loads(local.index_path.read_text()) == []


@pytest.mark.asyncio
async def test_delete_all_wallets_emits_event(local):
    await local.create_wallet("Alice", None, False, VALID_PHRASE)
    await local.create_wallet("Bob", None, False, VALID_PHRASE)
    fired = []
    local.events.wallets_deleted.connect(lambda: fired.append(True))

    assert await local.delete_all_wallets() == 2

    assert fired == [True]
    assert await local.list_wallets() == []
    assert await local.current_wallet_name() is None
