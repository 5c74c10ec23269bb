"""TransactionOrchestrator — deposit, withdraw and extend-lock lifecycles.

Each entry point creates a fresh PendingOperation, which supersedes the
previous one for display. Local validation (amount, duration, connection,
monotonic extension) completes before any ledger call. No AppError escapes
an entry point: every failure ends the operation in FAILED with a
human-readable message.
"""

import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal

from src.ml_common.datetime_utils import unix_now
from src.ml_common.enums import DurationUnit, OperationKind
from src.ml_common.errors import AppError, InternalError, RevertedError
from src.ml_common.units import to_atomic, to_seconds
from src.ml_ledger.application.client import LedgerClient
from src.ml_ledger.domain.cache import LedgerCache
from src.ml_ledger.domain.models import TransactionHandle
from src.ml_session.application.service import SessionStateMachine
from src.ml_tx.domain.lock import additional_lock_seconds
from src.ml_tx.domain.models import PendingOperation

logger = logging.getLogger(__name__)

IDLE_MESSAGE = "No recent actions yet."

Validator = Callable[[], Awaitable[int]]
Submitter = Callable[[int], Awaitable[TransactionHandle]]


class TransactionOrchestrator:
    def __init__(
        self,
        client: LedgerClient,
        session: SessionStateMachine,
        cache: LedgerCache,
        clock: Callable[[], int] = unix_now,
        fresh_read_before_extend: bool = False,
    ) -> None:
        self._client = client
        self._session = session
        self._cache = cache
        self._clock = clock
        self._fresh_read_before_extend = fresh_read_before_extend
        self._current: PendingOperation | None = None
        self._last_handle: TransactionHandle | None = None

    @property
    def current(self) -> PendingOperation | None:
        return self._current

    @property
    def last_handle(self) -> TransactionHandle | None:
        return self._last_handle

    @property
    def status_message(self) -> str:
        return self._current.message if self._current is not None else IDLE_MESSAGE

    # --- entry points ---

    async def deposit(self, amount: str | int | float | Decimal) -> PendingOperation:
        return await self._run(
            OperationKind.DEPOSIT,
            lambda: self._validate_amount(amount),
            self._client.submit_deposit,
        )

    async def withdraw(self, amount: str | int | float | Decimal) -> PendingOperation:
        return await self._run(
            OperationKind.WITHDRAW,
            lambda: self._validate_amount(amount),
            self._client.submit_withdraw,
        )

    async def extend_lock(
        self, value: str | int | float | Decimal, unit: DurationUnit | str
    ) -> PendingOperation:
        return await self._run(
            OperationKind.EXTEND_LOCK,
            lambda: self._validate_extension(value, unit),
            self._client.submit_extend_lock,
        )

    # --- validation ---

    async def _validate_amount(self, amount: str | int | float | Decimal) -> int:
        atomic = to_atomic(amount)
        self._session.require_connected()
        return atomic

    async def _validate_extension(
        self, value: str | int | float | Decimal, unit: DurationUnit | str
    ) -> int:
        duration_seconds = to_seconds(value, unit)
        self._session.require_connected()
        now = self._clock()

        snapshot = self._cache.snapshot
        if snapshot is None or self._fresh_read_before_extend:
            snapshot = await self._cache.refresh()
        return additional_lock_seconds(now, duration_seconds, snapshot.unlock_timestamp)

    # --- lifecycle ---

    def _track(self, op: PendingOperation) -> PendingOperation:
        """Publish op for display unless a newer operation has superseded it."""
        if self._current is not None and self._current.id == op.id:
            self._current = op
        return op

    def _fail(self, op: PendingOperation, exc: AppError) -> PendingOperation:
        logger.warning("%s failed [%d]: %s", op.kind.value, exc.code, exc.message)
        return self._track(op.failed(exc.message, exc.code))

    async def _run(
        self, kind: OperationKind, validate: Validator, submit: Submitter
    ) -> PendingOperation:
        op = PendingOperation(kind=kind)
        self._current = op
        try:
            return await self._execute(op, validate, submit)
        except Exception as exc:
            logger.exception("Unexpected error in %s", kind.value)
            latest = self._current if self._current is not None and self._current.id == op.id else op
            if latest.is_terminal:
                return latest
            return self._fail(latest, InternalError(f"Unknown error: {exc}"))

    async def _execute(
        self, op: PendingOperation, validate: Validator, submit: Submitter
    ) -> PendingOperation:
        try:
            argument = await validate()
        except AppError as exc:
            return self._fail(op, exc)

        op = self._track(op.submitting(argument))
        try:
            # validation may have awaited a refresh; the session can be gone by now
            self._session.require_connected()
            handle = await submit(argument)
        except AppError as exc:
            return self._fail(op, exc)

        if self._current is not None and self._current.id == op.id:
            self._last_handle = handle
        op = self._track(op.awaiting_confirmation(handle))

        try:
            receipt = await self._client.await_confirmation(handle)
        except AppError as exc:
            return self._fail(op, exc)
        if not receipt.confirmed:
            return self._fail(op, RevertedError(receipt.reason or "transaction reverted"))

        note = None
        try:
            await self._cache.refresh()
        except AppError as exc:
            note = f"({exc.message})"
        logger.info("%s confirmed: %s", op.kind.value, handle)
        return self._track(op.confirmed(note))
