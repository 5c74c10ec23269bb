"""TimeLockContract — LedgerGatewayProtocol over Ethereum JSON-RPC.

Contract surface (fixed address, see Settings.CONTRACT_ADDRESS):
  getBalance()          view  -> uint256 wei
  unlockTime()          view  -> uint256 unix seconds
  deposit()             payable, amount sent as msg.value
  withdraw(uint256)     reverts while funds are locked or caller is not owner
  extendLock(uint256)   adds seconds to unlockTime; owner only
"""

import asyncio
import logging
from collections.abc import Callable

from Crypto.Hash import keccak

from src.ml_common.errors import NotConnectedError, ProviderError
from src.ml_common.units import MAX_UINT256
from src.ml_ledger.domain.models import Receipt, TransactionHandle
from src.ml_ledger.infrastructure.rpc import JsonRpcTransport, from_hex, to_hex

logger = logging.getLogger(__name__)

REVERTED_RECEIPT_REASON = "transaction execution reverted"


def function_selector(signature: str) -> str:
    """First 4 bytes of keccak256(signature), hex without 0x."""
    digest = keccak.new(digest_bits=256, data=signature.encode("ascii"))
    return digest.hexdigest()[:8]


def encode_uint256(value: int) -> str:
    if not (0 <= value <= MAX_UINT256):
        raise ValueError(f"uint256 out of range: {value}")
    return f"{value:064x}"


def decode_uint256(result: str | None) -> int:
    if not result or result == "0x":
        raise ProviderError(-32000, "empty eth_call result; is the contract deployed?")
    return from_hex(result)


GET_BALANCE = function_selector("getBalance()")
UNLOCK_TIME = function_selector("unlockTime()")
DEPOSIT = function_selector("deposit()")
WITHDRAW = function_selector("withdraw(uint256)")
EXTEND_LOCK = function_selector("extendLock(uint256)")


class TimeLockContract:
    def __init__(
        self,
        transport: JsonRpcTransport,
        address: str,
        sender: Callable[[], str | None],
        poll_interval: float = 2.0,
    ) -> None:
        self._transport = transport
        self._address = address
        self._sender = sender
        self._poll_interval = poll_interval

    @property
    def address(self) -> str:
        return self._address

    async def _call_view(self, selector: str) -> int:
        result = await self._transport.request(
            "eth_call", [{"to": self._address, "data": "0x" + selector}, "latest"]
        )
        return decode_uint256(result)

    async def _send(self, data: str, value: int = 0) -> TransactionHandle:
        sender = self._sender()
        if sender is None:
            raise NotConnectedError()
        tx: dict[str, str] = {"from": sender, "to": self._address, "data": "0x" + data}
        if value:
            tx["value"] = to_hex(value)
        handle = await self._transport.request("eth_sendTransaction", [tx])
        logger.info("Submitted %s... from %s: %s", data[:8], sender, handle)
        return str(handle)

    async def read_balance(self) -> int:
        return await self._call_view(GET_BALANCE)

    async def read_unlock_time(self) -> int:
        return await self._call_view(UNLOCK_TIME)

    async def submit_deposit(self, atomic_amount: int) -> TransactionHandle:
        return await self._send(DEPOSIT, value=atomic_amount)

    async def submit_withdraw(self, atomic_amount: int) -> TransactionHandle:
        return await self._send(WITHDRAW + encode_uint256(atomic_amount))

    async def submit_extend_lock(self, additional_seconds: int) -> TransactionHandle:
        return await self._send(EXTEND_LOCK + encode_uint256(additional_seconds))

    async def await_confirmation(self, handle: TransactionHandle) -> Receipt:
        # No overall timeout: a transaction that is never mined keeps polling
        while True:
            receipt = await self._transport.request("eth_getTransactionReceipt", [handle])
            if receipt is not None:
                break
            await asyncio.sleep(self._poll_interval)

        block = receipt.get("blockNumber")
        block_number = from_hex(block) if block else None
        if from_hex(receipt.get("status", "0x0")) == 1:
            return Receipt(handle=handle, confirmed=True, block_number=block_number)
        logger.warning("Transaction %s reverted in block %s", handle, block_number)
        return Receipt(
            handle=handle,
            confirmed=False,
            reason=REVERTED_RECEIPT_REASON,
            block_number=block_number,
        )
