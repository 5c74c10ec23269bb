"""SessionStateMachine — wallet connection and active chain.

States: DISCONNECTED -> CONNECTING -> CONNECTED, and back to DISCONNECTED on
disconnect() or an empty account list. A chain change is not merged into
the session; it is handed to the owner's reset hook, which discards this
state machine together with the cache and any pending operation.
"""

import logging
from collections.abc import Awaitable, Callable

from src.ml_common.enums import SessionStatus
from src.ml_common.errors import AppError, ConnectionFailedError, NotConnectedError
from src.ml_session.domain.models import Session
from src.ml_session.domain.provider import Unsubscribe, WalletProviderProtocol

logger = logging.getLogger(__name__)

ResyncHook = Callable[[], Awaitable[None]]
ResetHook = Callable[[str], Awaitable[None]]


class SessionStateMachine:
    def __init__(
        self,
        provider: WalletProviderProtocol,
        on_resync: ResyncHook | None = None,
        on_reset: ResetHook | None = None,
    ) -> None:
        self._provider = provider
        self._on_resync = on_resync
        self._on_reset = on_reset
        self._session = Session()
        self._unsubscribers: list[Unsubscribe] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session.is_connected

    def require_connected(self) -> Session:
        if not self._session.is_connected:
            raise NotConnectedError()
        return self._session

    def subscribe(self) -> None:
        """Register provider listeners. Idempotent."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._provider.on_accounts_changed(self.on_accounts_changed),
            self._provider.on_chain_changed(self.on_chain_changed),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def connect(self) -> Session:
        if self._session.status != SessionStatus.DISCONNECTED:
            return self._session

        self._session = self._session.connecting()
        try:
            accounts = await self._provider.request_accounts()
            if not accounts:
                raise ConnectionFailedError("no accounts returned by wallet")
            chain_id = await self._provider.get_chain_id()
            connected = self._session.connected(accounts[0], chain_id)
        except ConnectionFailedError:
            self._session = self._session.disconnected()
            raise
        except AppError as exc:
            self._session = self._session.disconnected()
            raise ConnectionFailedError(exc.message) from exc
        except Exception as exc:
            logger.exception("Unexpected wallet response during connect")
            self._session = self._session.disconnected()
            raise ConnectionFailedError(str(exc) or type(exc).__name__) from exc

        self._session = connected
        logger.info("Wallet connected: %s on %s", self._session.address, self._session.chain_id)
        return self._session

    def disconnect(self) -> Session:
        self._session = self._session.disconnected()
        return self._session

    async def on_accounts_changed(self, accounts: list[str]) -> None:
        if not accounts:
            if self._session.status != SessionStatus.DISCONNECTED:
                logger.info("Wallet account list emptied; disconnecting")
            self._session = self._session.disconnected()
            return
        if not self._session.is_connected:
            logger.debug("Ignoring accountsChanged while %s", self._session.status.value)
            return

        self._session = self._session.with_address(accounts[0])
        logger.info("Active account changed to %s", accounts[0])
        if self._on_resync is not None:
            await self._on_resync()

    async def on_chain_changed(self, chain_id: str) -> None:
        logger.info("Chain changed to %s; resetting client", chain_id)
        if self._on_reset is not None:
            await self._on_reset(chain_id)
