"""PendingOperation — one user-initiated write and its status progression.

VALIDATING -> SUBMITTING -> AWAITING_CONFIRMATION -> CONFIRMED
any non-terminal state -> FAILED

Frozen dataclass; each transition returns a new value. Terminal states
(CONFIRMED, FAILED) accept no further transitions.
"""

import uuid
from dataclasses import dataclass, field, replace

from src.ml_common.enums import OperationKind, OperationStatus

TERMINAL_STATUSES = (OperationStatus.CONFIRMED, OperationStatus.FAILED)


@dataclass(frozen=True)
class OperationLabels:
    tx_name: str         # contract function, as shown in "Sending ... transaction..."
    title: str
    success: str


LABELS: dict[OperationKind, OperationLabels] = {
    OperationKind.DEPOSIT: OperationLabels("deposit", "Deposit", "Deposit successful!"),
    OperationKind.WITHDRAW: OperationLabels("withdraw", "Withdraw", "Withdraw successful!"),
    OperationKind.EXTEND_LOCK: OperationLabels(
        "extendLock", "Extend lock", "Lock extended successfully!"
    ),
}


@dataclass(frozen=True)
class PendingOperation:
    kind: OperationKind
    argument: int = 0            # wei for deposit/withdraw, seconds for extend
    status: OperationStatus = OperationStatus.VALIDATING
    handle: str | None = None
    reason: str | None = None
    error_code: int | None = None
    message: str = ""
    id: str = field(default_factory=lambda: f"op_{uuid.uuid4().hex[:12]}")

    @property
    def labels(self) -> OperationLabels:
        return LABELS[self.kind]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def _advance(self, status: OperationStatus, **changes: object) -> "PendingOperation":
        if self.is_terminal:
            raise ValueError(f"Operation {self.id} already {self.status.value}")
        return replace(self, status=status, **changes)

    def submitting(self, argument: int) -> "PendingOperation":
        return self._advance(
            OperationStatus.SUBMITTING,
            argument=argument,
            message=f"Sending {self.labels.tx_name} transaction...",
        )

    def awaiting_confirmation(self, handle: str) -> "PendingOperation":
        return self._advance(
            OperationStatus.AWAITING_CONFIRMATION,
            handle=handle,
            message=f"{self.labels.title} pending... waiting for confirmation.",
        )

    def confirmed(self, note: str | None = None) -> "PendingOperation":
        message = self.labels.success if note is None else f"{self.labels.success} {note}"
        return self._advance(OperationStatus.CONFIRMED, message=message)

    def failed(self, reason: str, error_code: int | None = None) -> "PendingOperation":
        return self._advance(
            OperationStatus.FAILED,
            reason=reason,
            error_code=error_code,
            message=f"{self.labels.title} failed: {reason}",
        )
