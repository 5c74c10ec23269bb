"""Ledger gateway Protocol — dependency inversion for testability.

Unit tests inject an AsyncMock that conforms to this Protocol.
Infrastructure layer provides the JSON-RPC implementation (TimeLockContract).
"""

from typing import Protocol

from src.ml_ledger.domain.models import Receipt, TransactionHandle


class LedgerGatewayProtocol(Protocol):
    async def read_balance(self) -> int: ...

    async def read_unlock_time(self) -> int: ...

    async def submit_deposit(self, atomic_amount: int) -> TransactionHandle: ...

    async def submit_withdraw(self, atomic_amount: int) -> TransactionHandle: ...

    async def submit_extend_lock(self, additional_seconds: int) -> TransactionHandle: ...

    async def await_confirmation(self, handle: TransactionHandle) -> Receipt: ...
