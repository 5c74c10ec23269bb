"""Display surface — pydantic views over Session, LedgerSnapshot and PendingOperation."""

from pydantic import BaseModel

from src.ml_common.datetime_utils import format_unix_timestamp
from src.ml_common.units import from_atomic
from src.ml_ledger.domain.models import LedgerSnapshot
from src.ml_session.domain.models import Session
from src.ml_tx.domain.models import PendingOperation


class SessionView(BaseModel):
    status: str
    address: str | None
    chain_id: str | None
    network: str
    is_expected_network: bool

    @classmethod
    def from_session(
        cls, session: Session, expected_chain_id: str, network_name: str
    ) -> "SessionView":
        return cls(
            status=session.status.value,
            address=session.address,
            chain_id=session.chain_id,
            network=session.network_label(expected_chain_id, network_name),
            is_expected_network=session.is_expected_network(expected_chain_id),
        )


class LedgerView(BaseModel):
    contract_address: str
    synced: bool
    balance_wei: int
    balance_eth: str
    unlock_timestamp: int
    unlock_time_display: str
    is_unlocked: bool
    refreshed_at: str | None  # ISO8601; None until the first successful refresh

    @classmethod
    def from_snapshot(
        cls, snapshot: LedgerSnapshot | None, contract_address: str, now: int
    ) -> "LedgerView":
        if snapshot is None:
            return cls(
                contract_address=contract_address,
                synced=False,
                balance_wei=0,
                balance_eth="0",
                unlock_timestamp=0,
                unlock_time_display=format_unix_timestamp(0),
                is_unlocked=False,
                refreshed_at=None,
            )
        return cls(
            contract_address=contract_address,
            synced=True,
            balance_wei=snapshot.balance_atomic,
            balance_eth=from_atomic(snapshot.balance_atomic),
            unlock_timestamp=snapshot.unlock_timestamp,
            unlock_time_display=format_unix_timestamp(snapshot.unlock_timestamp),
            is_unlocked=snapshot.is_unlocked(now),
            refreshed_at=snapshot.refreshed_at.isoformat(),
        )


class OperationView(BaseModel):
    id: str
    kind: str
    status: str
    argument: int
    handle: str | None
    reason: str | None
    error_code: int | None
    message: str

    @classmethod
    def from_operation(cls, op: PendingOperation) -> "OperationView":
        return cls(
            id=op.id,
            kind=op.kind.value,
            status=op.status.value,
            argument=op.argument,
            handle=op.handle,
            reason=op.reason,
            error_code=op.error_code,
            message=op.message,
        )


class DisplayState(BaseModel):
    session: SessionView
    ledger: LedgerView
    operation: OperationView | None
    status_message: str
    last_tx_hash: str | None
    generation: int  # increments on every chain-change reset
