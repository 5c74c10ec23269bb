"""Pydantic schemas for the ml_tx API."""

from pydantic import BaseModel, Field

from src.ml_client.schemas import OperationView
from src.ml_common.enums import DurationUnit
from src.ml_tx.domain.models import PendingOperation

# Amounts and durations are accepted as strings so that the decimal value
# the user typed reaches the unit converter unchanged; the converter does
# all validation (positivity, precision, finiteness).


class DepositRequest(BaseModel):
    amount: str = Field(..., description="Amount in ETH, e.g. '0.01'")


class WithdrawRequest(BaseModel):
    amount: str = Field(..., description="Amount in ETH, e.g. '0.01'")


class ExtendLockRequest(BaseModel):
    value: str = Field(..., description="Duration measured from now, e.g. '7'")
    unit: DurationUnit = Field(DurationUnit.MINUTES, description="seconds/minutes/hours/days")


class OperationResponse(BaseModel):
    operation: OperationView | None
    status_message: str
    last_tx_hash: str | None

    @classmethod
    def from_operation(
        cls, op: PendingOperation | None, status_message: str, last_tx_hash: str | None
    ) -> "OperationResponse":
        return cls(
            operation=OperationView.from_operation(op) if op is not None else None,
            status_message=status_message,
            last_tx_hash=last_tx_hash,
        )
