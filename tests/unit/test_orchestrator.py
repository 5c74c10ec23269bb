"""Unit tests for TransactionOrchestrator using a mock ledger gateway."""

import asyncio
from unittest.mock import AsyncMock

from src.ml_common.enums import OperationKind, OperationStatus
from src.ml_common.errors import (
    ConnectivityError,
    RevertedError,
    UserRejectedError,
)
from src.ml_ledger.application.client import LedgerClient
from src.ml_ledger.domain.cache import LedgerCache
from src.ml_ledger.domain.models import Receipt
from src.ml_session.application.service import SessionStateMachine
from src.ml_tx.application.service import IDLE_MESSAGE, TransactionOrchestrator
from tests.fakes import NOW, FakeWalletProvider, make_gateway


async def _build(
    gateway: AsyncMock,
    connected: bool = True,
    fresh_read_before_extend: bool = False,
) -> tuple[TransactionOrchestrator, LedgerCache]:
    session = SessionStateMachine(FakeWalletProvider())
    if connected:
        await session.connect()
    client = LedgerClient(gateway)
    cache = LedgerCache(client, session)
    orchestrator = TransactionOrchestrator(
        client,
        session,
        cache,
        clock=lambda: NOW,
        fresh_read_before_extend=fresh_read_before_extend,
    )
    return orchestrator, cache


def _no_writes(gateway: AsyncMock) -> None:
    gateway.submit_deposit.assert_not_awaited()
    gateway.submit_withdraw.assert_not_awaited()
    gateway.submit_extend_lock.assert_not_awaited()
    gateway.await_confirmation.assert_not_awaited()


class TestDeposit:
    async def test_confirmed_and_refreshed_once(self) -> None:
        gateway = make_gateway(balance=0)
        orchestrator, cache = await _build(gateway)
        gateway.read_balance.return_value = 10_000_000_000_000_000

        op = await orchestrator.deposit("0.01")

        assert op.status == OperationStatus.CONFIRMED
        assert op.kind == OperationKind.DEPOSIT
        assert op.argument == 10_000_000_000_000_000
        assert op.handle == "0xdeposit"
        assert op.message == "Deposit successful!"
        gateway.submit_deposit.assert_awaited_once_with(10_000_000_000_000_000)
        gateway.await_confirmation.assert_awaited_once_with("0xdeposit")
        assert gateway.read_balance.await_count == 1
        assert gateway.read_unlock_time.await_count == 1
        assert cache.snapshot is not None
        assert cache.snapshot.balance_atomic == 10_000_000_000_000_000
        assert orchestrator.current == op
        assert orchestrator.last_handle == "0xdeposit"

    async def test_invalid_amount_fails_locally(self) -> None:
        gateway = make_gateway()
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.deposit("-1")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 1001
        assert op.message.startswith("Deposit failed: Invalid amount")
        _no_writes(gateway)

    async def test_user_rejected(self) -> None:
        gateway = make_gateway()
        gateway.submit_deposit.side_effect = UserRejectedError()
        orchestrator, cache = await _build(gateway)

        op = await orchestrator.deposit("1")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 3002
        assert op.handle is None
        assert cache.snapshot is None
        gateway.await_confirmation.assert_not_awaited()

    async def test_connectivity_error_during_confirmation(self) -> None:
        gateway = make_gateway()
        gateway.await_confirmation.side_effect = ConnectivityError("lost")
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.deposit("1")

        assert op.status == OperationStatus.FAILED
        assert op.handle == "0xdeposit"
        assert op.error_code == 3001

    async def test_refresh_failure_after_confirmation_is_noted(self) -> None:
        gateway = make_gateway()
        gateway.read_balance.side_effect = ConnectivityError("down")
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.deposit("1")

        assert op.status == OperationStatus.CONFIRMED
        assert op.message.startswith("Deposit successful!")
        assert "Could not read contract data" in op.message

    async def test_unexpected_error_never_escapes(self) -> None:
        gateway = make_gateway()
        orchestrator, cache = await _build(gateway)
        cache.refresh = AsyncMock(side_effect=RuntimeError("boom"))  # type: ignore[method-assign]

        op = await orchestrator.deposit("1")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 9002
        assert "boom" in op.message


class TestWithdraw:
    async def test_revert_reason_surfaced_verbatim(self) -> None:
        gateway = make_gateway()
        gateway.submit_withdraw.side_effect = RevertedError("Funds are still locked")
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.withdraw("0.5")

        assert op.status == OperationStatus.FAILED
        assert op.reason == "Funds are still locked"
        assert op.error_code == 3003
        assert op.message == "Withdraw failed: Funds are still locked"

    async def test_reverted_receipt(self) -> None:
        gateway = make_gateway()
        gateway.await_confirmation.side_effect = None
        gateway.await_confirmation.return_value = Receipt(
            handle="0xwithdraw", confirmed=False, reason="transaction execution reverted"
        )
        orchestrator, cache = await _build(gateway)

        op = await orchestrator.withdraw("0.5")

        assert op.status == OperationStatus.FAILED
        assert op.reason == "transaction execution reverted"
        assert cache.snapshot is None

    async def test_disconnected_rejected_locally(self) -> None:
        gateway = make_gateway()
        orchestrator, _ = await _build(gateway, connected=False)

        op = await orchestrator.withdraw("0.5")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 2001
        assert op.error_code != RevertedError("x").code
        _no_writes(gateway)
        gateway.read_balance.assert_not_awaited()

    async def test_confirmed(self) -> None:
        gateway = make_gateway()
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.withdraw("0.25")

        assert op.status == OperationStatus.CONFIRMED
        assert op.message == "Withdraw successful!"
        gateway.submit_withdraw.assert_awaited_once_with(25 * 10**16)


class TestExtendLock:
    async def test_non_increasing_fails_without_network_write(self) -> None:
        gateway = make_gateway(unlock=NOW + 100)
        orchestrator, cache = await _build(gateway)
        await cache.refresh()
        gateway.read_unlock_time.reset_mock()

        op = await orchestrator.extend_lock(1, "minutes")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 1003
        assert "later than the current unlock time" in op.message
        _no_writes(gateway)
        gateway.read_unlock_time.assert_not_awaited()

    async def test_already_unlocked_submits_difference(self) -> None:
        gateway = make_gateway(unlock=NOW - 10)
        orchestrator, cache = await _build(gateway)
        await cache.refresh()

        op = await orchestrator.extend_lock(1, "hours")

        assert op.status == OperationStatus.CONFIRMED
        assert op.argument == 3610
        assert op.message == "Lock extended successfully!"
        gateway.submit_extend_lock.assert_awaited_once_with(3610)

    async def test_unpopulated_cache_refreshes_first(self) -> None:
        gateway = make_gateway(unlock=NOW - 10)
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.extend_lock(1, "hours")

        assert op.status == OperationStatus.CONFIRMED
        gateway.submit_extend_lock.assert_awaited_once_with(3610)
        # once before computing, once after confirmation
        assert gateway.read_unlock_time.await_count == 2

    async def test_uses_cached_value_by_default(self) -> None:
        gateway = make_gateway(unlock=NOW - 10)
        orchestrator, cache = await _build(gateway)
        await cache.refresh()
        # an extension confirmed elsewhere moved the lock; the cache has not seen it
        gateway.read_unlock_time.return_value = NOW + 7200

        op = await orchestrator.extend_lock(1, "hours")

        gateway.submit_extend_lock.assert_awaited_once_with(3610)
        assert op.status == OperationStatus.CONFIRMED

    async def test_fresh_read_option_uses_current_unlock(self) -> None:
        gateway = make_gateway(unlock=NOW - 10)
        orchestrator, cache = await _build(gateway, fresh_read_before_extend=True)
        await cache.refresh()
        gateway.read_unlock_time.return_value = NOW + 7200

        op = await orchestrator.extend_lock(1, "hours")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 1003
        gateway.submit_extend_lock.assert_not_awaited()

    async def test_sync_failure_before_compute(self) -> None:
        gateway = make_gateway()
        gateway.read_balance.side_effect = ConnectivityError("down")
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.extend_lock(1, "days")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 3004
        _no_writes(gateway)

    async def test_invalid_duration(self) -> None:
        gateway = make_gateway()
        orchestrator, _ = await _build(gateway)

        op = await orchestrator.extend_lock(0, "minutes")

        assert op.status == OperationStatus.FAILED
        assert op.error_code == 1002
        gateway.read_unlock_time.assert_not_awaited()


class TestSupersede:
    async def test_idle_message(self) -> None:
        orchestrator, _ = await _build(make_gateway())
        assert orchestrator.current is None
        assert orchestrator.status_message == IDLE_MESSAGE

    async def test_new_operation_supersedes_pending_one(self) -> None:
        gateway = make_gateway(unlock=NOW - 10)
        release = asyncio.Event()

        async def confirm(handle: str) -> Receipt:
            if handle == "0xdeposit":
                await release.wait()
            return Receipt(handle=handle, confirmed=True)

        gateway.await_confirmation.side_effect = confirm
        orchestrator, cache = await _build(gateway)
        await cache.refresh()

        deposit_task = asyncio.create_task(orchestrator.deposit("1"))
        while orchestrator.current is None or orchestrator.current.status != (
            OperationStatus.AWAITING_CONFIRMATION
        ):
            await asyncio.sleep(0)

        extend = await orchestrator.extend_lock(1, "hours")
        assert extend.status == OperationStatus.CONFIRMED
        assert orchestrator.current == extend

        release.set()
        deposit = await deposit_task

        assert deposit.status == OperationStatus.CONFIRMED
        assert orchestrator.current == extend
        assert orchestrator.last_handle == "0xextend"
