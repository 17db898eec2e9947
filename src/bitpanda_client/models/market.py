"""
Market-related models for Bitpanda client.

Immutable data structures for currencies, instruments, order books,
candlesticks and tickers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..constants import SUPPORTED_PERIODS
from ..utils import (
    decimal_places,
    format_decimal,
    format_time,
    format_with_precision,
    parse_decimal,
    parse_time,
)
from .enums import (
    CurrencyCode,
    InstrumentCode,
    InstrumentState,
    OrderSide,
    TimeUnit,
)


@dataclass(frozen=True)
class Currency:
    """Currency with the number of decimal places its amounts may carry."""
    code: CurrencyCode
    precision: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Currency":
        precision = data.get("precision")
        return cls(
            code=CurrencyCode(data["code"]),
            precision=int(precision) if precision is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"code": self.code.value}
        if self.precision is not None:
            result["precision"] = self.precision
        return result

    def quantize(self, amount: Union[Decimal, str]) -> Decimal:
        """Round an amount down to this currency's precision."""
        if self.precision is None:
            return parse_decimal(amount)
        return format_with_precision(amount, self.precision)

    def fits_precision(self, amount: Union[Decimal, str]) -> bool:
        """Check that an amount has no more decimal places than allowed."""
        if self.precision is None:
            return True
        return decimal_places(amount) <= self.precision


@dataclass(frozen=True)
class Instrument:
    """Tradable currency pair."""
    state: InstrumentState
    base: Currency
    quote: Currency
    amount_precision: int
    market_precision: int
    min_size: Decimal

    @property
    def code(self) -> InstrumentCode:
        return InstrumentCode.from_currencies(self.base.code.value, self.quote.code.value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Instrument":
        return cls(
            state=InstrumentState(data["state"]),
            base=Currency.from_dict(data["base"]),
            quote=Currency.from_dict(data["quote"]),
            amount_precision=int(data["amount_precision"]),
            market_precision=int(data["market_precision"]),
            min_size=parse_decimal(data["min_size"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "base": self.base.to_dict(),
            "quote": self.quote.to_dict(),
            "amount_precision": self.amount_precision,
            "market_precision": self.market_precision,
            "min_size": format_decimal(self.min_size),
        }


@dataclass(frozen=True)
class BookEntry:
    """One row of an order book side.

    Level 2 rows aggregate a price level and carry ``number_of_orders``;
    level 3 rows are single orders and carry ``order_id``.
    """
    price: Decimal
    amount: Decimal
    number_of_orders: Optional[int] = None
    order_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookEntry":
        number_of_orders = data.get("number_of_orders")
        return cls(
            price=parse_decimal(data["price"]),
            amount=parse_decimal(data["amount"]),
            number_of_orders=int(number_of_orders) if number_of_orders is not None else None,
            order_id=data.get("order_id") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "price": format_decimal(self.price),
            "amount": format_decimal(self.amount),
        }
        if self.number_of_orders is not None:
            result["number_of_orders"] = self.number_of_orders
        if self.order_id is not None:
            result["order_id"] = self.order_id
        return result


# Both sides share one row shape
Bids = BookEntry
Asks = BookEntry


@dataclass(frozen=True)
class OrderBook:
    """A snapshot of the order book state."""
    instrument_code: InstrumentCode
    time: datetime
    bids: List[BookEntry] = field(default_factory=list)
    asks: List[BookEntry] = field(default_factory=list)

    @property
    def best_bid(self) -> Optional[BookEntry]:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> Optional[BookEntry]:
        return self.asks[0] if self.asks else None

    @property
    def spread(self) -> Optional[Decimal]:
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask.price - self.best_bid.price

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderBook":
        return cls(
            instrument_code=InstrumentCode(data["instrument_code"]),
            time=parse_time(data["time"]),
            bids=[BookEntry.from_dict(entry) for entry in data.get("bids") or []],
            asks=[BookEntry.from_dict(entry) for entry in data.get("asks") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instrument_code": self.instrument_code.value,
            "time": format_time(self.time),
            "bids": [entry.to_dict() for entry in self.bids],
            "asks": [entry.to_dict() for entry in self.asks],
        }


@dataclass(frozen=True)
class Value:
    """Aggregated top-of-book price level."""
    price: Decimal
    amount: Decimal
    number_of_orders: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Value":
        return cls(
            price=parse_decimal(data["price"]),
            amount=parse_decimal(data["amount"]),
            number_of_orders=int(data["number_of_orders"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price": format_decimal(self.price),
            "amount": format_decimal(self.amount),
            "number_of_orders": self.number_of_orders,
        }


@dataclass(frozen=True)
class Bid:
    """Best bid of a level one order book."""
    value: Value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bid":
        return cls(value=Value.from_dict(data["value"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value.to_dict()}


@dataclass(frozen=True)
class Ask:
    """Best ask of a level one order book."""
    value: Value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ask":
        return cls(value=Value.from_dict(data["value"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value.to_dict()}


@dataclass(frozen=True)
class OrderBookLevelOne:
    """A snapshot of the best bid and ask only."""
    instrument_code: InstrumentCode
    time: datetime
    bids: Bid
    asks: Ask

    @property
    def spread(self) -> Decimal:
        return self.asks.value.price - self.bids.value.price

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderBookLevelOne":
        return cls(
            instrument_code=InstrumentCode(data["instrument_code"]),
            time=parse_time(data["time"]),
            bids=Bid.from_dict(data["bids"]),
            asks=Ask.from_dict(data["asks"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instrument_code": self.instrument_code.value,
            "time": format_time(self.time),
            "bids": self.bids.to_dict(),
            "asks": self.asks.to_dict(),
        }


@dataclass(frozen=True)
class Granularity:
    """Length of time identifying a candlestick type, e.g. (MINUTES, 5)."""
    unit: TimeUnit
    period: int

    @property
    def is_supported(self) -> bool:
        """True for resolutions the exchange serves."""
        return self.period in SUPPORTED_PERIODS.get(self.unit.value, ())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Granularity":
        return cls(unit=TimeUnit(data["unit"]), period=int(data["period"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"unit": self.unit.value, "period": self.period}


TimeGranularity = Granularity


@dataclass(frozen=True)
class Candlestick:
    """Price action (OHLCV) for one granularity bucket."""
    last_sequence: int
    instrument_code: InstrumentCode
    granularity: Granularity
    high: Decimal
    low: Decimal
    open: Decimal
    close: Decimal
    volume: Decimal
    time: datetime

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candlestick":
        return cls(
            last_sequence=int(data["last_sequence"]),
            instrument_code=InstrumentCode(data["instrument_code"]),
            granularity=Granularity.from_dict(data["granularity"]),
            high=parse_decimal(data["high"]),
            low=parse_decimal(data["low"]),
            open=parse_decimal(data["open"]),
            close=parse_decimal(data["close"]),
            volume=parse_decimal(data["volume"]),
            time=parse_time(data["time"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_sequence": self.last_sequence,
            "instrument_code": self.instrument_code.value,
            "granularity": self.granularity.to_dict(),
            "high": format_decimal(self.high),
            "low": format_decimal(self.low),
            "open": format_decimal(self.open),
            "close": format_decimal(self.close),
            "volume": format_decimal(self.volume),
            "time": format_time(self.time),
        }


@dataclass(frozen=True)
class MarketTick:
    """24h market statistics for one instrument."""
    instrument_code: InstrumentCode
    sequence: int
    state: InstrumentState
    is_frozen: int
    quote_volume: Decimal
    base_volume: Decimal
    last_price: Decimal
    best_bid: Decimal
    best_ask: Decimal
    price_change: Decimal
    price_change_percentage: Decimal
    high: Decimal
    low: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MarketTick":
        return cls(
            instrument_code=InstrumentCode(data["instrument_code"]),
            sequence=int(data["sequence"]),
            state=InstrumentState(data["state"]),
            is_frozen=int(data["is_frozen"]),
            quote_volume=parse_decimal(data["quote_volume"]),
            base_volume=parse_decimal(data["base_volume"]),
            last_price=parse_decimal(data["last_price"]),
            best_bid=parse_decimal(data["best_bid"]),
            best_ask=parse_decimal(data["best_ask"]),
            price_change=parse_decimal(data["price_change"]),
            price_change_percentage=parse_decimal(data["price_change_percentage"]),
            high=parse_decimal(data["high"]),
            low=parse_decimal(data["low"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instrument_code": self.instrument_code.value,
            "sequence": self.sequence,
            "state": self.state.value,
            "is_frozen": self.is_frozen,
            "quote_volume": format_decimal(self.quote_volume),
            "base_volume": format_decimal(self.base_volume),
            "last_price": format_decimal(self.last_price),
            "best_bid": format_decimal(self.best_bid),
            "best_ask": format_decimal(self.best_ask),
            "price_change": format_decimal(self.price_change),
            "price_change_percentage": format_decimal(self.price_change_percentage),
            "high": format_decimal(self.high),
            "low": format_decimal(self.low),
        }


@dataclass(frozen=True)
class PriceTick:
    """Last trade data for an instrument."""
    instrument_code: InstrumentCode
    price: Decimal
    amount: Decimal
    volume: Decimal
    sequence: int
    taker_side: OrderSide
    time: datetime
    trade_timestamp: int  # epoch milliseconds

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceTick":
        return cls(
            instrument_code=InstrumentCode(data["instrument_code"]),
            price=parse_decimal(data["price"]),
            amount=parse_decimal(data["amount"]),
            volume=parse_decimal(data["volume"]),
            sequence=int(data["sequence"]),
            taker_side=OrderSide(data["taker_side"]),
            time=parse_time(data["time"]),
            trade_timestamp=int(data["trade_timestamp"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instrument_code": self.instrument_code.value,
            "price": format_decimal(self.price),
            "amount": format_decimal(self.amount),
            "volume": format_decimal(self.volume),
            "sequence": self.sequence,
            "taker_side": self.taker_side.value,
            "time": format_time(self.time),
            "trade_timestamp": self.trade_timestamp,
        }


@dataclass(frozen=True)
class ServerTime:
    """Exchange server time."""
    iso: datetime
    epoch_millis: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerTime":
        return cls(iso=parse_time(data["iso"]), epoch_millis=int(data["epoch_millis"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"iso": format_time(self.iso), "epoch_millis": self.epoch_millis}
