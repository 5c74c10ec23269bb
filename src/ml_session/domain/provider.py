"""Wallet provider Protocol — what the session state machine consumes.

Listeners are coroutine functions; the provider awaits each one in
registration order on the event loop, so deliveries never interleave with
each other.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

AccountsListener = Callable[[list[str]], Awaitable[None]]
ChainListener = Callable[[str], Awaitable[None]]
Unsubscribe = Callable[[], None]


class WalletProviderProtocol(Protocol):
    async def request_accounts(self) -> list[str]: ...

    async def get_chain_id(self) -> str: ...

    def on_accounts_changed(self, listener: AccountsListener) -> Unsubscribe: ...

    def on_chain_changed(self, listener: ChainListener) -> Unsubscribe: ...
