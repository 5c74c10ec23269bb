"""Global enums shared across modules."""

from enum import Enum


class SessionStatus(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class OperationKind(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    EXTEND_LOCK = "EXTEND_LOCK"


class OperationStatus(str, Enum):
    VALIDATING = "VALIDATING"
    SUBMITTING = "SUBMITTING"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class DurationUnit(str, Enum):
    """Lock duration units; values are lowercase to match user input."""
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
