"""Lock duration calculator — the unlock time may only move forward.

The user picks a duration measured from now; the contract takes the number
of seconds to add to its current unlock time:

    desired_end = now + duration_seconds
    additional  = desired_end - unlock_timestamp     (must be > 0)
"""

from src.ml_common.errors import InvalidDurationError, NonIncreasingLockError
from src.ml_common.units import MAX_UINT256


def desired_unlock_time(now: int, duration_seconds: int) -> int:
    return now + duration_seconds


def additional_lock_seconds(now: int, duration_seconds: int, unlock_timestamp: int) -> int:
    """Seconds to pass to extendLock; raises NonIncreasingLockError unless desired_end > unlock.

    The result must also fit the contract's uint256 argument.
    """
    desired_end = desired_unlock_time(now, duration_seconds)
    additional = desired_end - unlock_timestamp
    if additional <= 0:
        raise NonIncreasingLockError(desired_end, unlock_timestamp)
    if additional > MAX_UINT256:
        raise InvalidDurationError(f"extension of {additional} seconds is too long")
    return additional
