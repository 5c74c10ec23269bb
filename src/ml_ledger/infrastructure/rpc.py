"""Ethereum JSON-RPC transport over httpx.

One transport is shared by the wallet provider and the contract gateway,
mirroring an injected browser provider that serves both roles.

Error mapping (EIP-1193 / EIP-1474):
  transport failure / non-2xx     -> ConnectivityError
  code 4001                       -> UserRejectedError
  code 3 or "execution reverted"  -> RevertedError (Error(string) reason verbatim)
  any other JSON-RPC error        -> ProviderError
"""

import logging
from typing import Any

import httpx

from src.ml_common.errors import (
    AppError,
    ConnectivityError,
    ProviderError,
    RevertedError,
    UserRejectedError,
)

logger = logging.getLogger(__name__)

USER_REJECTED_CODE = 4001
EXECUTION_REVERTED_CODE = 3
# bytes4(keccak256("Error(string)"))
ERROR_STRING_SELECTOR = "08c379a0"
_REVERT_PREFIX = "execution reverted:"


def to_hex(value: int) -> str:
    return hex(value)


def from_hex(value: str) -> int:
    return int(value, 16)


def decode_revert_reason(data: Any) -> str | None:
    """Decode ABI-encoded Error(string) revert data. Returns None if not decodable."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str):
        return None
    payload_hex = data[2:] if data.startswith("0x") else data
    if not payload_hex.startswith(ERROR_STRING_SELECTOR):
        return None
    try:
        payload = bytes.fromhex(payload_hex[8:])
        offset = int.from_bytes(payload[0:32], "big")
        length = int.from_bytes(payload[offset:offset + 32], "big")
        raw = payload[offset + 32:offset + 32 + length]
    except ValueError:
        return None
    if len(raw) != length:
        return None
    return raw.decode("utf-8", errors="replace")


def _strip_revert_prefix(message: str) -> str:
    if message.lower().startswith(_REVERT_PREFIX):
        stripped = message[len(_REVERT_PREFIX):].strip()
        return stripped or message
    return message


def map_rpc_error(error: dict[str, Any]) -> AppError:
    code = int(error.get("code", 0))
    message = str(error.get("message", ""))
    if code == USER_REJECTED_CODE:
        return UserRejectedError()
    if code == EXECUTION_REVERTED_CODE or "revert" in message.lower():
        reason = decode_revert_reason(error.get("data"))
        return RevertedError(reason or _strip_revert_prefix(message) or "execution reverted")
    return ProviderError(code, message)


class JsonRpcTransport:
    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url
        self._next_id = 0

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        self._next_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id,
            "method": method,
            "params": params or [],
        }
        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ConnectivityError(
                f"HTTP {exc.response.status_code} from {self._url}"
            ) from exc
        except httpx.TransportError as exc:
            raise ConnectivityError(str(exc) or type(exc).__name__) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(-32700, "invalid JSON in provider response") from exc

        error = body.get("error")
        if error:
            mapped = map_rpc_error(error)
            logger.debug("%s -> %s (%s)", method, type(mapped).__name__, mapped.message)
            raise mapped
        return body.get("result")
