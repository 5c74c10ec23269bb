"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Local validation (never reaches the network)
  2xxx: Session / wallet connection
  3xxx: Ledger collaborator (provider, signer, contract)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Local validation ---

class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid amount: {detail}", 422)


class InvalidDurationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Invalid duration: {detail}", 422)


class NonIncreasingLockError(AppError):
    def __init__(self, desired_end: int, unlock_timestamp: int) -> None:
        super().__init__(
            1003,
            "New lock time must be later than the current unlock time "
            f"(requested {desired_end}, current {unlock_timestamp})",
            422,
        )
        self.desired_end = desired_end
        self.unlock_timestamp = unlock_timestamp


# --- 2xxx: Session ---

class NotConnectedError(AppError):
    def __init__(self) -> None:
        super().__init__(2001, "Wallet is not connected", 409)


class ConnectionFailedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Failed to connect wallet: {detail}", 502)


# --- 3xxx: Ledger collaborator ---

class ConnectivityError(AppError):
    def __init__(self, detail: str = "provider unreachable") -> None:
        super().__init__(3001, f"Connectivity error: {detail}", 503)


class UserRejectedError(AppError):
    def __init__(self) -> None:
        super().__init__(3002, "User rejected the request", 409)


class RevertedError(AppError):
    """Contract-side rule violation. ``message`` is the revert reason verbatim."""

    def __init__(self, reason: str) -> None:
        super().__init__(3003, reason, 422)
        self.reason = reason


class SyncError(AppError):
    def __init__(self, cause: AppError) -> None:
        super().__init__(3004, f"Could not read contract data: {cause.message}", 502)
        self.cause = cause


class ProviderError(AppError):
    def __init__(self, rpc_code: int, detail: str) -> None:
        super().__init__(3005, f"Provider error {rpc_code}: {detail}", 502)
        self.rpc_code = rpc_code


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal error") -> None:
        super().__init__(9002, detail, 500)
