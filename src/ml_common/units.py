"""Unit conversion for ETH amounts and lock durations.

Amounts cross the wire as int (wei, 18 decimals). Human input is parsed
with Decimal, never float arithmetic.
"""

from decimal import Decimal, InvalidOperation

from src.ml_common.enums import DurationUnit
from src.ml_common.errors import InvalidAmountError, InvalidDurationError

ETH_DECIMALS = 18
WEI_PER_ETH = 10**ETH_DECIMALS
MAX_UINT256 = 2**256 - 1
UINT256_DIGITS = len(str(MAX_UINT256))

SECONDS_PER_UNIT: dict[DurationUnit, int] = {
    DurationUnit.SECONDS: 1,
    DurationUnit.MINUTES: 60,
    DurationUnit.HOURS: 3600,
    DurationUnit.DAYS: 86400,
}


def _parse_decimal(value: object) -> Decimal | None:
    """Parse str/int/float/Decimal into a finite Decimal. Returns None on failure."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def _split(value: Decimal) -> tuple[int, int]:
    """Decimal -> (integer coefficient, base-10 exponent)."""
    _, digits, exponent = value.as_tuple()
    return int("".join(str(d) for d in digits)), int(exponent)


def to_atomic(amount: str | int | float | Decimal) -> int:
    """Convert an ETH amount to wei: '0.01' -> 10000000000000000.

    Raises InvalidAmountError for non-numeric, NaN/Infinity, non-positive,
    more than 18 fractional digits, or values above uint256.
    """
    value = _parse_decimal(amount)
    if value is None:
        raise InvalidAmountError(f"{amount!r} is not a finite number")
    if value <= 0:
        raise InvalidAmountError(f"{amount!r} must be positive")

    # Exact integer scaling; Decimal.scaleb would round at context precision.
    # Exponents are bounded before any power of ten is built.
    coefficient, exponent = _split(value)
    shift = exponent + ETH_DECIMALS
    if shift >= UINT256_DIGITS:
        raise InvalidAmountError(f"{amount!r} exceeds the maximum representable amount")
    if shift >= 0:
        atomic = coefficient * 10**shift
    else:
        if -shift > len(str(coefficient)) or coefficient % 10**-shift:
            raise InvalidAmountError(
                f"{amount!r} has more than {ETH_DECIMALS} decimal places"
            )
        atomic = coefficient // 10**-shift

    if atomic > MAX_UINT256:
        raise InvalidAmountError(f"{amount!r} exceeds the maximum representable amount")
    return atomic


def from_atomic(atomic: int) -> str:
    """Convert wei to a canonical ETH string: 10**16 -> '0.01', 10**18 -> '1'."""
    if isinstance(atomic, bool) or not isinstance(atomic, int) or atomic < 0:
        raise InvalidAmountError(f"{atomic!r} is not a non-negative integer")
    whole, frac = divmod(atomic, WEI_PER_ETH)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:0{ETH_DECIMALS}d}".rstrip("0")


def parse_duration_unit(unit: DurationUnit | str) -> DurationUnit:
    if isinstance(unit, DurationUnit):
        return unit
    try:
        return DurationUnit(str(unit).strip().lower())
    except ValueError:
        raise InvalidDurationError(f"unknown unit {unit!r}") from None


def to_seconds(value: str | int | float | Decimal, unit: DurationUnit | str) -> int:
    """Convert (value, unit) to whole seconds; fractional seconds are floored.

    Raises InvalidDurationError if value is not a positive finite number, the
    unit is unknown, or the result is shorter than one second or longer than
    uint256 seconds.
    """
    duration_unit = parse_duration_unit(unit)
    parsed = _parse_decimal(value)
    if parsed is None:
        raise InvalidDurationError(f"{value!r} is not a finite number")
    if parsed <= 0:
        raise InvalidDurationError(f"{value!r} must be positive")

    coefficient, exponent = _split(parsed)
    scaled = coefficient * SECONDS_PER_UNIT[duration_unit]
    if exponent >= UINT256_DIGITS:
        raise InvalidDurationError(f"{value!r} {duration_unit.value} is too long")
    if exponent >= 0:
        seconds = scaled * 10**exponent
    elif -exponent > len(str(scaled)):
        seconds = 0
    else:
        seconds = scaled // 10**-exponent

    if seconds < 1:
        raise InvalidDurationError(f"{value!r} {duration_unit.value} is shorter than one second")
    if seconds > MAX_UINT256:
        raise InvalidDurationError(f"{value!r} {duration_unit.value} is too long")
    return seconds
