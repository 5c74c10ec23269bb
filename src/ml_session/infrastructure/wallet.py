"""RpcWalletProvider — WalletProviderProtocol over the shared JSON-RPC transport.

An HTTP endpoint cannot push accountsChanged/chainChanged events, so changes
are detected by comparing eth_accounts / eth_chainId against the last values
seen (poll_changes), either on demand or from the watch() loop.
"""

import asyncio
import logging
from typing import TypeVar

from src.ml_common.errors import AppError
from src.ml_ledger.infrastructure.rpc import JsonRpcTransport
from src.ml_session.domain.models import normalize_chain_id
from src.ml_session.domain.provider import AccountsListener, ChainListener, Unsubscribe

logger = logging.getLogger(__name__)

L = TypeVar("L")


def _register(listeners: list[L], listener: L) -> Unsubscribe:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe


class RpcWalletProvider:
    def __init__(self, transport: JsonRpcTransport) -> None:
        self._transport = transport
        self._accounts_listeners: list[AccountsListener] = []
        self._chain_listeners: list[ChainListener] = []
        self._last_accounts: list[str] | None = None
        self._last_chain_id: str | None = None

    async def request_accounts(self) -> list[str]:
        accounts = list(await self._transport.request("eth_requestAccounts") or [])
        self._last_accounts = accounts
        return accounts

    async def get_chain_id(self) -> str:
        chain_id = normalize_chain_id(await self._transport.request("eth_chainId"))
        self._last_chain_id = chain_id
        return chain_id

    def on_accounts_changed(self, listener: AccountsListener) -> Unsubscribe:
        return _register(self._accounts_listeners, listener)

    def on_chain_changed(self, listener: ChainListener) -> Unsubscribe:
        return _register(self._chain_listeners, listener)

    async def emit_accounts_changed(self, accounts: list[str]) -> None:
        for listener in list(self._accounts_listeners):
            await listener(accounts)

    async def emit_chain_changed(self, chain_id: str) -> None:
        for listener in list(self._chain_listeners):
            await listener(chain_id)

    async def poll_changes(self) -> None:
        """Compare current accounts/chain with the last seen values and notify.

        The first poll only records a baseline. A chain change is delivered
        alone; the account list is re-baselined with it.
        """
        accounts = list(await self._transport.request("eth_accounts") or [])
        chain_id = normalize_chain_id(await self._transport.request("eth_chainId"))

        previous_chain, previous_accounts = self._last_chain_id, self._last_accounts
        self._last_chain_id = chain_id
        self._last_accounts = accounts

        if previous_chain is not None and chain_id != previous_chain:
            logger.info("Chain changed: %s -> %s", previous_chain, chain_id)
            await self.emit_chain_changed(chain_id)
            return
        if previous_accounts is not None and accounts != previous_accounts:
            logger.info("Accounts changed: %s", accounts)
            await self.emit_accounts_changed(accounts)

    async def watch(self, interval: float) -> None:
        while True:
            try:
                await self.poll_changes()
            except AppError as exc:
                logger.warning("Wallet poll failed: %s", exc.message)
            await asyncio.sleep(interval)
