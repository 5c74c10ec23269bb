"""LedgerClient — typed pass-through over the ledger gateway.

Holds no state and performs no retries. Every failure leaves this class as
an AppError: collaborator errors already typed by the infrastructure layer
pass through unchanged, HTTP-level failures become ConnectivityError, and
anything else becomes InternalError.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from src.ml_common.errors import AppError, ConnectivityError, InternalError
from src.ml_ledger.domain.models import Receipt, TransactionHandle
from src.ml_ledger.domain.repository import LedgerGatewayProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerClient:
    def __init__(self, gateway: LedgerGatewayProtocol) -> None:
        self._gateway = gateway

    async def _call(self, op: str, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        except AppError:
            raise
        except httpx.HTTPError as exc:
            raise ConnectivityError(str(exc) or type(exc).__name__) from exc
        except Exception as exc:
            logger.exception("Unexpected ledger error during %s", op)
            raise InternalError(f"{op} failed: {exc}") from exc

    async def read_balance(self) -> int:
        return await self._call("read_balance", self._gateway.read_balance)

    async def read_unlock_time(self) -> int:
        return await self._call("read_unlock_time", self._gateway.read_unlock_time)

    async def submit_deposit(self, atomic_amount: int) -> TransactionHandle:
        return await self._call(
            "submit_deposit", lambda: self._gateway.submit_deposit(atomic_amount)
        )

    async def submit_withdraw(self, atomic_amount: int) -> TransactionHandle:
        return await self._call(
            "submit_withdraw", lambda: self._gateway.submit_withdraw(atomic_amount)
        )

    async def submit_extend_lock(self, additional_seconds: int) -> TransactionHandle:
        return await self._call(
            "submit_extend_lock",
            lambda: self._gateway.submit_extend_lock(additional_seconds),
        )

    async def await_confirmation(self, handle: TransactionHandle) -> Receipt:
        return await self._call(
            "await_confirmation", lambda: self._gateway.await_confirmation(handle)
        )
