"""
Utility functions for Bitpanda client.

Wire-format helpers for decimals and timestamps, plus small validation
functions shared by the models and the API layer.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from enum import Enum
from typing import Any, Dict, Optional, Union

_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_decimal(value: Union[Decimal, int, str]) -> Decimal:
    """Parse a wire amount into a Decimal."""
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Expected a decimal string, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def parse_optional_decimal(value: Any) -> Optional[Decimal]:
    """Parse an amount that may be absent."""
    if value is None or value == "":
        return None
    return parse_decimal(value)


def format_decimal(value: Decimal) -> str:
    """Format a Decimal as a plain (non-scientific) string."""
    return format(value, "f")


def format_with_precision(value: Union[Decimal, str], precision: int) -> Decimal:
    """Round a value down to the given number of decimal places."""
    decimal_value = parse_decimal(value)
    quantizer = Decimal(f"1e-{precision}")
    return decimal_value.quantize(quantizer, rounding=ROUND_DOWN)


def decimal_places(value: Union[Decimal, str]) -> int:
    """Number of significant decimal places, ignoring trailing zeros."""
    exponent = parse_decimal(value).normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"Not a finite decimal: {value!r}")
    return max(0, -exponent)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _instant(value: datetime):
    """Sort key of a datetime including sub-microsecond nanoseconds."""
    epoch = _EPOCH if value.tzinfo is not None else _EPOCH.replace(tzinfo=None)
    return value - epoch, getattr(value, "nanosecond", 0)


class Timestamp(datetime):
    """A datetime that also carries the nanoseconds below one microsecond.

    The exchange sends up to nine fractional digits. ``datetime`` stops at
    microseconds, so the remaining three digits live in ``nanosecond`` and
    are written back by ``format_time``. Comparisons take them into
    account; arithmetic and ``replace`` return microsecond precision.
    """

    def __new__(cls, *args, nanosecond: int = 0, **kwargs):
        if not 0 <= nanosecond < 1000:
            raise ValueError(f"nanosecond must be in 0..999, got {nanosecond}")
        self = super().__new__(cls, *args, **kwargs)
        self._nanosecond = nanosecond
        return self

    @classmethod
    def from_datetime(cls, value: datetime, nanosecond: int = 0) -> "Timestamp":
        return cls(
            value.year, value.month, value.day,
            value.hour, value.minute, value.second, value.microsecond,
            tzinfo=value.tzinfo, fold=value.fold, nanosecond=nanosecond,
        )

    @property
    def nanosecond(self) -> int:
        return self._nanosecond

    def __eq__(self, other):
        if not isinstance(other, datetime):
            return NotImplemented
        try:
            return _instant(self) == _instant(other)
        except TypeError:
            # naive and aware values are never equal
            return False

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __lt__(self, other):
        if not isinstance(other, datetime):
            return NotImplemented
        return _instant(self) < _instant(other)

    def __le__(self, other):
        if not isinstance(other, datetime):
            return NotImplemented
        return _instant(self) <= _instant(other)

    def __gt__(self, other):
        if not isinstance(other, datetime):
            return NotImplemented
        return _instant(self) > _instant(other)

    def __ge__(self, other):
        if not isinstance(other, datetime):
            return NotImplemented
        return _instant(self) >= _instant(other)

    def __hash__(self):
        base = datetime.__hash__(self)
        return base if not self._nanosecond else hash((base, self._nanosecond))

    def __reduce_ex__(self, protocol):
        return (
            _restore_timestamp,
            (datetime.__reduce_ex__(self, protocol)[1], self._nanosecond),
        )

    def __repr__(self):
        base = super().__repr__()
        if not self._nanosecond:
            return base
        return f"{base[:-1]}, nanosecond={self._nanosecond})"


def _restore_timestamp(state, nanosecond: int) -> Timestamp:
    return Timestamp.from_datetime(datetime(*state), nanosecond)


def to_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_time(value: str) -> Timestamp:
    """Parse an RFC 3339 timestamp into an aware UTC Timestamp.

    Accepts a ``Z`` suffix or numeric offset and up to nine fractional
    digits. Naive timestamps are taken as UTC.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected an RFC 3339 string, got {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    nanosecond = 0
    match = _FRACTION_RE.search(text)
    if match:
        digits = match.group(1)
        if len(digits) > 9:
            raise ValueError(f"Too many fractional digits in timestamp: {value!r}")
        digits = digits.ljust(9, "0")
        nanosecond = int(digits[6:])
        text = text[:match.start()] + "." + digits[:6] + text[match.end():]

    return Timestamp.from_datetime(to_utc(datetime.fromisoformat(text)), nanosecond)


def parse_optional_time(value: Any) -> Optional[datetime]:
    """Parse a timestamp that may be absent."""
    if value is None or value == "":
        return None
    return parse_time(value)


def format_time(value: datetime) -> str:
    """Format a datetime as RFC 3339 in UTC with a ``Z`` suffix.

    Writes six fractional digits when there are microseconds and nine when
    the value carries nanoseconds.
    """
    nanosecond = getattr(value, "nanosecond", 0)
    value = to_utc(value)
    text = value.isoformat(timespec="seconds").replace("+00:00", "")
    if nanosecond:
        return f"{text}.{value.microsecond:06d}{nanosecond:03d}Z"
    if value.microsecond:
        return f"{text}.{value.microsecond:06d}Z"
    return f"{text}Z"


def validate_url(url: str) -> bool:
    """Validate URL format."""
    if not url or not isinstance(url, str):
        return False
    return url.startswith(("http://", "https://")) and "." in url


def validate_amount(amount: Union[Decimal, str, None]) -> bool:
    """Validate amount is a positive decimal."""
    if amount is None:
        return False
    try:
        return parse_decimal(amount) > 0
    except (ValueError, TypeError):
        return False


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Remove None values and empty strings from dictionary."""
    return {
        key: value for key, value in data.items()
        if value is not None and value != ""
    }


def encode_query_params(params: Dict[str, Any]) -> Dict[str, str]:
    """Convert query parameter values into their wire strings.

    aiohttp only accepts str/int/float query values, so booleans, enums,
    decimals and datetimes are rendered here. None values and empty strings are dropped.
    """
    encoded = {}
    for key, value in sanitize_dict(params).items():
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, Enum):
            encoded[key] = str(value.value)
        elif isinstance(value, datetime):
            encoded[key] = format_time(value)
        elif isinstance(value, Decimal):
            encoded[key] = format_decimal(value)
        else:
            encoded[key] = str(value)
    return encoded
