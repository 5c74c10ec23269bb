"""Process-wide MetaLockedClient factory — FastAPI dependency.

One client per process: exactly one Session, one LedgerSnapshot. The
shared httpx.AsyncClient is closed on application shutdown.
"""

import httpx

from config.settings import settings
from src.ml_client.service import MetaLockedClient, SenderGetter
from src.ml_ledger.infrastructure.contract import TimeLockContract
from src.ml_ledger.infrastructure.rpc import JsonRpcTransport
from src.ml_session.infrastructure.wallet import RpcWalletProvider

_http_client: httpx.AsyncClient | None = None
_provider: RpcWalletProvider | None = None
_client: MetaLockedClient | None = None


def _build() -> tuple[httpx.AsyncClient, RpcWalletProvider, MetaLockedClient]:
    http_client = httpx.AsyncClient(timeout=settings.RPC_TIMEOUT_SECONDS)
    transport = JsonRpcTransport(http_client, settings.PROVIDER_URL)
    provider = RpcWalletProvider(transport)

    def build_gateway(sender: SenderGetter) -> TimeLockContract:
        return TimeLockContract(
            transport,
            settings.CONTRACT_ADDRESS,
            sender,
            poll_interval=settings.RECEIPT_POLL_INTERVAL,
        )

    client = MetaLockedClient(
        provider=provider,
        build_gateway=build_gateway,
        contract_address=settings.CONTRACT_ADDRESS,
        expected_chain_id=settings.EXPECTED_CHAIN_ID,
        network_name=settings.NETWORK_NAME,
        fresh_read_before_extend=settings.FRESH_READ_BEFORE_EXTEND,
    )
    return http_client, provider, client


def get_client() -> MetaLockedClient:
    """Get or create the process-wide client."""
    global _http_client, _provider, _client  # noqa: PLW0603
    if _client is None:
        _http_client, _provider, _client = _build()
    return _client


def get_wallet_provider() -> RpcWalletProvider:
    get_client()
    assert _provider is not None
    return _provider


async def close_client() -> None:
    """Close the HTTP connection pool and drop the client."""
    global _http_client, _provider, _client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
    _http_client = None
    _provider = None
    _client = None
