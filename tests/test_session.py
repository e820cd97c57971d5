import asyncio

import pytest

from models import AppSettings, SessionState, Tab, WalletSummary
from onboarding import SessionPhase
from services import BackendError
from conftest import PHRASE, rebuild_phrase


def record(signal):
    seen = []
    signal.connect(lambda *args: seen.append(args if len(args) > 1 else args[0]))
    return seen


async def start_create(controller, name="Alice"):
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    controller.form.set_new_name(name)
    assert await controller.submit()


async def open_wallet(controller, backend, name="Alice"):
    backend.wallets = [WalletSummary(name)]
    await controller.initialize()
    assert await controller.submit_open()


# ---------------------------------------------------------------
# Startup
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_initialize_without_wallets_shows_create_tab(controller):
    dialog = record(controller.dialog_changed)

    session = await controller.initialize()

    assert session == SessionState.closed()
    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.form.draft.mode is Tab.CREATE
    assert dialog[-1] == (True, Tab.CREATE)


@pytest.mark.asyncio
async def test_initialize_picks_up_open_wallet(controller, backend):
    backend.wallets = [WalletSummary("Vault", True)]
    backend.current = "Vault"

    session = await controller.initialize()

    assert session == SessionState.opened("Vault", True)
    assert controller.phase is SessionPhase.OPEN
    assert not controller.onboarding_visible


@pytest.mark.asyncio
async def test_initialize_treats_probe_errors_as_closed(controller, backend):
    backend.wallets = [WalletSummary("Alice")]
    backend.current = "Alice"
    backend.fail["check_open"] = RuntimeError("no socket")

    session = await controller.initialize()

    assert not session.is_open
    assert controller.phase is SessionPhase.CLOSED_SELECTING


@pytest.mark.asyncio
async def test_catalog_failure_shows_banner(controller, backend):
    backend.fail["list_wallets"] = RuntimeError("keystore offline")

    await controller.initialize()

    assert controller.catalog.is_empty()
    assert "keystore offline" in controller.error_message
    controller.dismiss_error()
    assert controller.error_message == ""


# ---------------------------------------------------------------
# Create with seed phrase ceremony
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_wallet_end_to_end(controller, backend):
    phases = record(controller.phase_changed)

    await start_create(controller)
    assert controller.phase is SessionPhase.AWAITING_SEED_DISPLAY
    assert controller.ceremony.phrase == PHRASE
    assert controller.pending.name == "Alice"
    assert backend.called("create_wallet") == []

    assert controller.acknowledge_seed()
    assert controller.phase is SessionPhase.AWAITING_SEED_VERIFICATION
    assert sorted(controller.ceremony.pool) == sorted(PHRASE.split())

    rebuild_phrase(controller)
    assert await controller.confirm_verification()

    assert backend.called("create_wallet") == [("create_wallet", "Alice", None, False, PHRASE)]
    assert controller.session == SessionState.opened("Alice", False)
    assert controller.phase is SessionPhase.OPEN
    assert controller.catalog.names == ["Alice"]
    assert controller.pending is None
    assert controller.ceremony.session is None
    assert phases[-1] is SessionPhase.OPEN


@pytest.mark.asyncio
async def test_secured_create_passes_password(controller, backend):
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    form = controller.form
    form.set_new_name("Vault")
    form.set_use_password_protection(True)
    form.set_new_password("hunter2")
    form.set_confirm_password("hunter2")
    await controller.submit()
    controller.acknowledge_seed()
    rebuild_phrase(controller)

    await controller.confirm_verification()

    assert backend.called("create_wallet") == [("create_wallet", "Vault", "hunter2", True, PHRASE)]
    assert controller.session.is_secured


@pytest.mark.asyncio
async def test_wrong_order_keeps_verifying(controller, backend):
    await start_create(controller)
    controller.acknowledge_seed()
    for word in reversed(PHRASE.split()):
        controller.select_word(word, controller.ceremony.pool.index(word))

    assert not await controller.confirm_verification()

    assert controller.verification_failed
    assert controller.phase is SessionPhase.AWAITING_SEED_VERIFICATION
    assert backend.called("create_wallet") == []

    controller.deselect_word(controller.ceremony.selected[-1], 11)
    assert not controller.verification_failed


@pytest.mark.asyncio
async def test_word_selection_outside_verification_is_rejected(controller):
    await start_create(controller)
    with pytest.raises(ValueError):
        controller.select_word(PHRASE.split()[0], 0)
    with pytest.raises(ValueError):
        controller.reshuffle()


@pytest.mark.asyncio
async def test_cancel_leaves_no_residue(controller, backend):
    await start_create(controller)
    controller.acknowledge_seed()
    controller.select_word(controller.ceremony.pool[0], 0)

    assert controller.cancel_ceremony()

    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.pending is None
    assert controller.ceremony.session is None
    assert not controller.verification_failed

    backend.phrase = "zoo " * 11 + "wrong"
    assert await controller.submit()
    assert controller.ceremony.phrase == backend.phrase.strip()
    assert controller.ceremony.selected == []
    assert len(backend.called("generate_seed_phrase")) == 2


@pytest.mark.asyncio
async def test_phrase_generation_failure(controller, backend):
    backend.fail["generate_seed_phrase"] = RuntimeError("no entropy")
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    controller.form.set_new_name("Alice")

    assert not await controller.submit()

    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.pending is None
    assert "no entropy" in controller.error_message


@pytest.mark.asyncio
async def test_create_failure_can_retry_with_same_phrase(controller, backend):
    await start_create(controller)
    controller.acknowledge_seed()
    rebuild_phrase(controller)
    backend.fail["create_wallet"] = BackendError("disk full")

    assert not await controller.confirm_verification()

    assert controller.phase is SessionPhase.AWAITING_CREATE_RETRY
    assert controller.error_message == "disk full"
    assert controller.ceremony.phrase == PHRASE
    assert not controller.session.is_open

    del backend.fail["create_wallet"]
    assert await controller.retry_create()

    creates = backend.called("create_wallet")
    assert len(creates) == 2
    assert {c[4] for c in creates} == {PHRASE}
    assert len(backend.called("generate_seed_phrase")) == 1
    assert controller.phase is SessionPhase.OPEN


@pytest.mark.asyncio
async def test_create_failure_start_over(controller, backend):
    await start_create(controller)
    controller.acknowledge_seed()
    rebuild_phrase(controller)
    backend.results["create_wallet"] = False

    await controller.confirm_verification()
    assert controller.error_message == "Failed to create wallet"

    assert controller.cancel_ceremony()
    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.pending is None
    assert controller.ceremony.session is None


# ---------------------------------------------------------------
# Duplicate names and developer bypass
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_duplicate_name_blocks_create(controller, backend):
    backend.wallets = [WalletSummary("Alice")]
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    controller.form.set_new_name("alice")

    assert not controller.can_submit()
    assert not await controller.submit()

    assert controller.error_message == 'A wallet with name "alice" already exists'
    assert backend.called("generate_seed_phrase") == []
    assert backend.called("create_wallet") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("developer_mode, skip, bypass", [
    (False, False, False),
    (False, True, False),
    (True, False, False),
    (True, True, True),
])
async def test_bypass_requires_both_flags(controller, backend, settings, developer_mode, skip, bypass):
    settings["value"] = AppSettings(developer_mode=developer_mode, skip_seed_phrase_dialogs=skip)
    assert controller.should_bypass_ceremony is bypass

    await start_create(controller)

    if bypass:
        assert controller.phase is SessionPhase.OPEN
        assert backend.called("create_wallet") == [("create_wallet", "Alice", None, False, None)]
        assert backend.called("generate_seed_phrase") == []
    else:
        assert controller.phase is SessionPhase.AWAITING_SEED_DISPLAY
        assert backend.called("create_wallet") == []


@pytest.mark.asyncio
async def test_bypass_failure_returns_to_form(controller, backend, settings):
    settings["value"] = AppSettings(developer_mode=True, skip_seed_phrase_dialogs=True)
    backend.fail["create_wallet"] = BackendError("disk full")
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    controller.form.set_new_name("Alice")

    assert not await controller.submit()

    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.form.draft.new_name == "Alice"


# ---------------------------------------------------------------
# Open and recover
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_open_unsecured_wallet_sends_no_password(controller, backend):
    backend.wallets = [WalletSummary("Alice")]
    await controller.initialize()
    controller.form.set_open_password("stale")

    assert await controller.submit()

    assert backend.called("open_wallet") == [("open_wallet", "Alice", None)]
    assert controller.session == SessionState.opened("Alice", False)
    assert controller.form.draft.open_password == ""


@pytest.mark.asyncio
async def test_open_failure_keeps_password(controller, backend):
    backend.wallets = [WalletSummary("Vault", True)]
    backend.fail["open_wallet"] = BackendError("Wrong password")
    await controller.initialize()
    controller.form.set_open_password("hunter3")

    assert not await controller.submit()

    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.error_message == "Wrong password"
    assert controller.form.draft.open_password == "hunter3"
    assert not controller.session.is_open


@pytest.mark.asyncio
async def test_secured_wallet_needs_password(controller, backend):
    backend.wallets = [WalletSummary("Vault", True)]
    await controller.initialize()

    assert not await controller.submit()

    assert controller.error_message == "Please enter your password for this secured wallet"
    assert backend.called("open_wallet") == []


@pytest.mark.asyncio
async def test_recover_wallet(controller, backend):
    await controller.initialize()
    controller.switch_tab(Tab.CREATE)
    controller.set_recovery_mode(True)
    controller.form.set_new_name("Restored")
    controller.form.set_recovery_phrase(f"  {PHRASE}  ")

    assert await controller.submit()

    assert backend.called("recover_wallet") == [("recover_wallet", "Restored", PHRASE, None, False)]
    assert controller.session == SessionState.opened("Restored", False)
    assert backend.called("generate_seed_phrase") == []


@pytest.mark.asyncio
async def test_second_submit_is_ignored_while_busy(controller, backend):
    backend.wallets = [WalletSummary("Alice")]
    await controller.initialize()
    backend.gate = asyncio.Event()

    first = asyncio.ensure_future(controller.submit())
    await asyncio.sleep(0)
    assert controller.is_busy
    assert controller.phase is SessionPhase.SUBMITTING
    assert not controller.can_submit()

    assert not await controller.submit_open()

    backend.gate.set()
    assert await first
    assert len(backend.called("open_wallet")) == 1
    assert not controller.is_busy


# ---------------------------------------------------------------
# Close, delete, secure
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_close_wallet(controller, backend):
    await open_wallet(controller, backend)

    assert await controller.close_wallet()

    assert not controller.session.is_open
    assert controller.phase is SessionPhase.CLOSED_SELECTING


@pytest.mark.asyncio
async def test_close_failure_keeps_session(controller, backend):
    await open_wallet(controller, backend)
    backend.results["close_wallet"] = False

    assert not await controller.close_wallet()

    assert controller.session.is_open
    assert controller.error_message == "Failed to close wallet"


@pytest.mark.asyncio
async def test_delete_current_wallet_closes_session(controller, backend):
    await open_wallet(controller, backend)

    assert await controller.delete_wallet("Alice")

    assert not controller.session.is_open
    assert controller.catalog.is_empty()
    assert controller.form.draft.mode is Tab.CREATE


@pytest.mark.asyncio
async def test_delete_error_shows_banner(controller, backend):
    await open_wallet(controller, backend)
    backend.fail["delete_wallet"] = OSError("read-only")
    activity = record(controller.activity)

    assert not await controller.delete_wallet("Alice")

    assert controller.error_message == "Error: read-only"
    assert activity[-1] == ("Error: read-only", True)
    assert controller.session.is_open
    assert not controller.is_busy


@pytest.mark.asyncio
async def test_delete_refused_shows_banner(controller, backend):
    await open_wallet(controller, backend)
    backend.results["delete_wallet"] = False

    assert not await controller.delete_wallet("Alice")

    assert controller.error_message == "Failed to delete wallet"
    assert controller.session.is_open
    assert controller.catalog.names == ["Alice"]


@pytest.mark.asyncio
async def test_secure_wallet_updates_session(controller, backend):
    await open_wallet(controller, backend)

    assert not await controller.secure_wallet("Alice", "pw", "px")
    assert controller.error_message == "Passwords do not match"
    assert backend.called("secure_wallet") == []

    assert await controller.secure_wallet("Alice", "pw", "pw")
    assert controller.session == SessionState.opened("Alice", True)


# ---------------------------------------------------------------
# Backend events
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_wallets_deleted_event_closes_session(controller, backend):
    await open_wallet(controller, backend)

    backend.delete_everything()
    for _ in range(5):
        await asyncio.sleep(0)

    assert controller.session == SessionState.closed()
    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.catalog.is_empty()
    assert controller.form.draft.mode is Tab.CREATE


@pytest.mark.asyncio
async def test_wallets_deleted_resets_surviving_session(controller, backend):
    backend.wallets = [WalletSummary("Alice"), WalletSummary("Bob")]
    await controller.initialize()
    await controller.submit_open()
    backend.wallets = [WalletSummary("Alice")]

    await controller.handle_wallets_deleted()

    assert controller.session == SessionState.closed()
    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.catalog.names == ["Alice"]


@pytest.mark.asyncio
async def test_wallets_deleted_leaves_ceremony_alone(controller, backend):
    await start_create(controller)
    controller.acknowledge_seed()

    await controller.handle_wallets_deleted()

    assert controller.phase is SessionPhase.AWAITING_SEED_VERIFICATION
    assert controller.ceremony.phrase == PHRASE


@pytest.mark.asyncio
async def test_wallet_closed_event(controller, backend):
    await open_wallet(controller, backend)
    backend.current = None

    await controller.handle_wallet_closed()

    assert not controller.session.is_open
    assert controller.phase is SessionPhase.CLOSED_SELECTING


# ---------------------------------------------------------------
# Dialog entry points
# ---------------------------------------------------------------

@pytest.mark.asyncio
async def test_open_dialog_clears_passwords_and_ceremony(controller, backend):
    backend.wallets = [WalletSummary("Vault", True)]
    await controller.initialize()
    controller.form.set_open_password("secret")
    controller.switch_tab(Tab.CREATE)
    controller.form.set_new_name("Alice")
    await controller.submit()

    assert await controller.open_dialog(Tab.OPEN)

    assert controller.phase is SessionPhase.CLOSED_SELECTING
    assert controller.ceremony.session is None
    assert controller.form.draft.open_password == ""
    assert controller.form.draft.mode is Tab.OPEN


@pytest.mark.asyncio
async def test_open_dialog_on_empty_catalog_stays_on_create(controller):
    await controller.initialize()
    await controller.open_dialog(Tab.OPEN)
    assert controller.form.draft.mode is Tab.CREATE


@pytest.mark.asyncio
async def test_close_dialog_requires_open_wallet(controller, backend):
    await controller.initialize()
    assert not controller.close_dialog()

    await open_wallet(controller, backend)
    await controller.open_dialog(Tab.OPEN)
    assert controller.close_dialog()
    assert controller.phase is SessionPhase.OPEN


@pytest.mark.asyncio
async def test_tray_create_closes_wallet_first(controller, backend):
    await open_wallet(controller, backend)
    dialog = record(controller.dialog_changed)

    assert await controller.handle_tray_create()

    assert len(backend.called("close_wallet")) == 1
    assert not controller.session.is_open
    assert controller.form.draft.mode is Tab.CREATE
    assert dialog[-1] == (True, Tab.CREATE)
