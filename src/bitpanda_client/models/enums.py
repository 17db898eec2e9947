"""
Enumerations for Bitpanda client.

Closed sets of wire values with an open escape hatch: the exchange may add
currencies, instruments or statuses before this package knows about them,
so looking up an unknown value yields a pseudo-member carrying the raw
string instead of raising.
"""

import logging
from enum import Enum, IntEnum
from typing import Optional

logger = logging.getLogger(__name__)


class OpenEnum(str, Enum):
    """String enumeration that accepts unknown values."""

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str) or not value:
            return None
        logger.warning(f"Unknown {cls.__name__} value from API: {value!r}")
        pseudo_member = str.__new__(cls, value)
        pseudo_member._name_ = value
        pseudo_member._value_ = value
        return pseudo_member

    @property
    def is_known(self) -> bool:
        """True if the value is one of the declared members."""
        return type(self)._value2member_map_.get(self._value_) is self

    def __str__(self) -> str:
        return self._value_


class CurrencyCode(OpenEnum):
    """Currency codes."""
    BEST = "BEST"
    BTC = "BTC"
    ETH = "ETH"
    EUR = "EUR"
    MIOTA = "MIOTA"
    PAN = "PAN"
    USDT = "USDT"
    XRP = "XRP"


class InstrumentCode(OpenEnum):
    """Instrument codes, formatted as ``BASE_QUOTE``."""
    BEST_BTC = "BEST_BTC"
    BEST_EUR = "BEST_EUR"
    BEST_USDT = "BEST_USDT"
    BTC_EUR = "BTC_EUR"
    BTC_USDT = "BTC_USDT"
    ETH_BTC = "ETH_BTC"
    ETH_EUR = "ETH_EUR"
    MIOTA_BTC = "MIOTA_BTC"
    MIOTA_EUR = "MIOTA_EUR"
    PAN_BTC = "PAN_BTC"
    XRP_BTC = "XRP_BTC"
    XRP_EUR = "XRP_EUR"

    @classmethod
    def from_currencies(cls, base: str, quote: str) -> "InstrumentCode":
        """Build the instrument code for a currency pair."""
        return cls(f"{base}_{quote}")

    @property
    def base(self) -> CurrencyCode:
        return CurrencyCode(self._value_.partition("_")[0])

    @property
    def quote(self) -> Optional[CurrencyCode]:
        quote = self._value_.partition("_")[2]
        return CurrencyCode(quote) if quote else None


class OrderType(OpenEnum):
    """Possible values for ``type`` in orders."""
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"


class OrderSide(OpenEnum):
    """Possible values for ``side`` in orders."""
    BUY = "BUY"
    SELL = "SELL"


class OrderStatus(OpenEnum):
    """Order lifecycle.

    OPEN is the entry state. STOP_TRIGGERED is the intermediate state of a
    stop order whose trigger price was hit. FILLED means partially filled and
    still live. Every other status is terminal.
    """
    OPEN = "OPEN"
    STOP_TRIGGERED = "STOP_TRIGGERED"
    FILLED = "FILLED"
    FILLED_FULLY = "FILLED_FULLY"
    FILLED_CLOSED = "FILLED_CLOSED"
    FILLED_REJECTED = "FILLED_REJECTED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self._value_ in _TERMINAL_STATUSES

    @property
    def is_filled(self) -> bool:
        """True for statuses that carry trade and fee information."""
        return self._value_ in _FILLED_STATUSES

    def can_transition_to(self, other: "OrderStatus") -> bool:
        """Check whether an order may move from this status to ``other``.

        Terminal statuses never change. Unknown statuses are treated as live
        and may be entered from any live status.
        """
        other = OrderStatus(other)
        if other == self:
            return True
        if self.is_terminal:
            return False
        allowed = _LIVE_TRANSITIONS.get(self._value_)
        if allowed is None or not other.is_known:
            return True
        return other._value_ in allowed


_TERMINAL_STATUSES = frozenset({
    "FILLED_FULLY",
    "FILLED_CLOSED",
    "FILLED_REJECTED",
    "REJECTED",
    "CLOSED",
    "FAILED",
})

_FILLED_STATUSES = frozenset({
    "FILLED",
    "FILLED_FULLY",
    "FILLED_CLOSED",
    "FILLED_REJECTED",
})

_LIVE_TRANSITIONS = {
    "OPEN": frozenset({"STOP_TRIGGERED", "FILLED"}) | _TERMINAL_STATUSES,
    "STOP_TRIGGERED": frozenset({"FILLED"}) | _TERMINAL_STATUSES,
    "FILLED": _TERMINAL_STATUSES,
}


class TimeUnit(OpenEnum):
    """Candlestick granularity units."""
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"


class InstrumentState(OpenEnum):
    """Trading state of an instrument."""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    IN_MAINTENANCE = "IN_MAINTENANCE"
    POST_ONLY = "POST_ONLY"
    CLOSED = "CLOSED"


class FeeType(OpenEnum):
    """Which side of the book paid the fee."""
    MAKER = "MAKER"
    TAKER = "TAKER"


class OrderBookLevel(IntEnum):
    """Order book aggregation levels."""
    ONE = 1
    TWO = 2
    THREE = 3

    @classmethod
    def default(cls) -> "OrderBookLevel":
        return cls.THREE
