"""Domain models for ml_ledger — frozen dataclasses, replaced wholesale on update."""

from dataclasses import dataclass
from datetime import datetime

# Transaction hash as returned by the signer, e.g. "0xabc..."
TransactionHandle = str


@dataclass(frozen=True)
class LedgerSnapshot:
    balance_atomic: int      # wei
    unlock_timestamp: int    # unix seconds
    refreshed_at: datetime   # when the reads that produced this snapshot completed

    def __post_init__(self) -> None:
        if self.balance_atomic < 0:
            raise ValueError(f"balance_atomic must be >= 0, got {self.balance_atomic}")
        if self.unlock_timestamp < 0:
            raise ValueError(f"unlock_timestamp must be >= 0, got {self.unlock_timestamp}")

    def is_unlocked(self, now: int) -> bool:
        return now >= self.unlock_timestamp


@dataclass(frozen=True)
class Receipt:
    handle: TransactionHandle
    confirmed: bool
    reason: str | None = None        # revert reason when not confirmed
    block_number: int | None = None
