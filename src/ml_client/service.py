"""MetaLockedClient — composition root for one wallet session.

Owns exactly one generation of (SessionStateMachine, LedgerCache,
TransactionOrchestrator). A chain-change notification discards the whole
generation and builds a fresh, disconnected one. The discarded session is
disconnected too, so an operation still in flight cannot submit and its
late results land only on the discarded objects.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from src.ml_client.schemas import DisplayState, LedgerView, OperationView, SessionView
from src.ml_common.datetime_utils import unix_now
from src.ml_common.enums import DurationUnit
from src.ml_common.errors import AppError, ConnectionFailedError
from src.ml_ledger.application.client import LedgerClient
from src.ml_ledger.domain.cache import LedgerCache
from src.ml_ledger.domain.models import LedgerSnapshot
from src.ml_ledger.domain.repository import LedgerGatewayProtocol
from src.ml_session.application.service import SessionStateMachine
from src.ml_session.domain.provider import WalletProviderProtocol
from src.ml_tx.application.service import TransactionOrchestrator
from src.ml_tx.domain.models import PendingOperation

logger = logging.getLogger(__name__)

SenderGetter = Callable[[], str | None]
GatewayFactory = Callable[[SenderGetter], LedgerGatewayProtocol]


@dataclass
class ClientGeneration:
    number: int
    session: SessionStateMachine
    ledger: LedgerClient
    cache: LedgerCache
    orchestrator: TransactionOrchestrator


class MetaLockedClient:
    def __init__(
        self,
        provider: WalletProviderProtocol,
        build_gateway: GatewayFactory,
        contract_address: str,
        expected_chain_id: str,
        network_name: str,
        clock: Callable[[], int] = unix_now,
        fresh_read_before_extend: bool = False,
    ) -> None:
        self._provider = provider
        self._build_gateway = build_gateway
        self._contract_address = contract_address
        self._expected_chain_id = expected_chain_id
        self._network_name = network_name
        self._clock = clock
        self._fresh_read_before_extend = fresh_read_before_extend
        self._notice: str | None = None
        self._gen = self._build_generation(1)

    def _build_generation(self, number: int) -> ClientGeneration:
        async def resync() -> None:
            await self._refresh_quietly(generation)

        session = SessionStateMachine(self._provider, on_resync=resync, on_reset=self._reset)
        # Writes are signed by this generation's account only
        ledger = LedgerClient(self._build_gateway(lambda: session.session.address))
        cache = LedgerCache(ledger, session)
        orchestrator = TransactionOrchestrator(
            ledger,
            session,
            cache,
            clock=self._clock,
            fresh_read_before_extend=self._fresh_read_before_extend,
        )
        generation = ClientGeneration(number, session, ledger, cache, orchestrator)
        session.subscribe()
        return generation

    async def _reset(self, chain_id: str) -> None:
        previous = self._gen
        previous.session.close()
        previous.session.disconnect()
        self._gen = self._build_generation(previous.number + 1)
        self._notice = None
        logger.info("Client reset for chain %s (generation %d)", chain_id, self._gen.number)

    async def _refresh_quietly(self, generation: ClientGeneration) -> None:
        try:
            await generation.cache.refresh()
        except AppError as exc:
            if generation is self._gen:
                self._notice = exc.message

    # --- accessors ---

    def current_address(self) -> str | None:
        return self._gen.session.session.address

    @property
    def generation(self) -> ClientGeneration:
        return self._gen

    @property
    def snapshot(self) -> LedgerSnapshot | None:
        return self._gen.cache.snapshot

    @property
    def operation(self) -> PendingOperation | None:
        return self._gen.orchestrator.current

    # --- user actions ---

    async def connect(self) -> DisplayState:
        generation = self._gen
        try:
            await generation.session.connect()
        except ConnectionFailedError as exc:
            logger.warning("Connect failed: %s", exc.message)
            if generation is self._gen:
                self._notice = "Failed to connect wallet."
            raise
        self._notice = None
        await self._refresh_quietly(generation)
        return self.display()

    def disconnect(self) -> DisplayState:
        self._gen.session.disconnect()
        return self.display()

    async def refresh(self) -> DisplayState:
        generation = self._gen
        try:
            await generation.cache.refresh()
        except AppError as exc:
            if generation is self._gen:
                self._notice = exc.message
            raise
        return self.display()

    async def deposit(self, amount: str | int | float | Decimal) -> PendingOperation:
        self._notice = None
        return await self._gen.orchestrator.deposit(amount)

    async def withdraw(self, amount: str | int | float | Decimal) -> PendingOperation:
        self._notice = None
        return await self._gen.orchestrator.withdraw(amount)

    async def extend_lock(
        self, value: str | int | float | Decimal, unit: DurationUnit | str
    ) -> PendingOperation:
        self._notice = None
        return await self._gen.orchestrator.extend_lock(value, unit)

    # --- display surface ---

    def display(self) -> DisplayState:
        generation = self._gen
        op = generation.orchestrator.current
        return DisplayState(
            session=SessionView.from_session(
                generation.session.session, self._expected_chain_id, self._network_name
            ),
            ledger=LedgerView.from_snapshot(
                generation.cache.snapshot, self._contract_address, self._clock()
            ),
            operation=OperationView.from_operation(op) if op is not None else None,
            status_message=self._notice or generation.orchestrator.status_message,
            last_tx_hash=generation.orchestrator.last_handle,
            generation=generation.number,
        )
