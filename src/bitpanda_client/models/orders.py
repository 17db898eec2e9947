"""
Order-related models for Bitpanda client.

Immutable data structures for order management, trades and the paginated
order/trade histories.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..utils import (
    format_decimal,
    format_time,
    parse_decimal,
    parse_optional_decimal,
    parse_optional_time,
    parse_time,
)
from .enums import CurrencyCode, FeeType, InstrumentCode, OrderSide, OrderStatus, OrderType


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class CreateOrder:
    """Order request data structure.

    ``price`` is required for LIMIT and STOP orders and must be absent for
    MARKET orders; ``trigger_price`` is required for STOP orders.
    """
    instrument_code: InstrumentCode
    type: OrderType
    side: OrderSide
    amount: Decimal
    price: Optional[Decimal] = None
    trigger_price: Optional[Decimal] = None
    client_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreateOrder":
        return cls(
            instrument_code=InstrumentCode(data["instrument_code"]),
            type=OrderType(data["type"]),
            side=OrderSide(data["side"]),
            amount=parse_decimal(data["amount"]),
            price=parse_optional_decimal(data.get("price")),
            trigger_price=parse_optional_decimal(data.get("trigger_price")),
            client_id=data.get("client_id") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "instrument_code": self.instrument_code.value,
            "type": self.type.value,
            "side": self.side.value,
            "amount": format_decimal(self.amount),
        }
        if self.price is not None:
            result["price"] = format_decimal(self.price)
        if self.trigger_price is not None:
            result["trigger_price"] = format_decimal(self.trigger_price)
        if self.client_id is not None:
            result["client_id"] = self.client_id
        return result


@dataclass(frozen=True)
class Order:
    """Order as reported by the exchange."""
    order_id: str
    account_id: str
    instrument_code: InstrumentCode
    amount: Decimal
    filled_amount: Decimal
    side: OrderSide
    type: OrderType
    status: OrderStatus
    time: datetime
    price: Optional[Decimal] = None  # absent on market orders
    sequence: Optional[int] = None
    reason: Optional[str] = None
    time_last_updated: Optional[datetime] = None
    time_triggered: Optional[datetime] = None
    trigger_price: Optional[Decimal] = None

    @property
    def remaining_amount(self) -> Decimal:
        return self.amount - self.filled_amount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            order_id=data["order_id"],
            account_id=data["account_id"],
            instrument_code=InstrumentCode(data["instrument_code"]),
            amount=parse_decimal(data["amount"]),
            filled_amount=parse_decimal(data["filled_amount"]),
            side=OrderSide(data["side"]),
            type=OrderType(data["type"]),
            status=OrderStatus(data["status"]),
            time=parse_time(data["time"]),
            price=parse_optional_decimal(data.get("price")),
            sequence=_optional_int(data.get("sequence")),
            reason=data.get("reason") or None,
            time_last_updated=parse_optional_time(data.get("time_last_updated")),
            time_triggered=parse_optional_time(data.get("time_triggered")),
            trigger_price=parse_optional_decimal(data.get("trigger_price")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "order_id": self.order_id,
            "account_id": self.account_id,
            "instrument_code": self.instrument_code.value,
            "amount": format_decimal(self.amount),
            "filled_amount": format_decimal(self.filled_amount),
            "side": self.side.value,
            "type": self.type.value,
            "status": self.status.value,
        }
        if self.sequence is not None:
            result["sequence"] = self.sequence
        if self.price is not None:
            result["price"] = format_decimal(self.price)
        if self.reason is not None:
            result["reason"] = self.reason
        result["time"] = format_time(self.time)
        if self.time_last_updated is not None:
            result["time_last_updated"] = format_time(self.time_last_updated)
        if self.time_triggered is not None:
            result["time_triggered"] = format_time(self.time_triggered)
        if self.trigger_price is not None:
            result["trigger_price"] = format_decimal(self.trigger_price)
        return result


@dataclass(frozen=True)
class Trade:
    """Single execution of an order."""
    trade_id: str
    order_id: str
    account_id: str
    amount: Decimal
    side: OrderSide
    instrument_code: InstrumentCode
    price: Decimal
    time: datetime
    sequence: Optional[int] = None

    @property
    def volume(self) -> Decimal:
        """Quote currency value of the trade."""
        return self.amount * self.price

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trade":
        return cls(
            trade_id=data["trade_id"],
            order_id=data["order_id"],
            account_id=data["account_id"],
            amount=parse_decimal(data["amount"]),
            side=OrderSide(data["side"]),
            instrument_code=InstrumentCode(data["instrument_code"]),
            price=parse_decimal(data["price"]),
            time=parse_time(data["time"]),
            sequence=_optional_int(data.get("sequence")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "trade_id": self.trade_id,
            "order_id": self.order_id,
            "account_id": self.account_id,
            "amount": format_decimal(self.amount),
            "side": self.side.value,
            "instrument_code": self.instrument_code.value,
            "price": format_decimal(self.price),
            "time": format_time(self.time),
        }
        if self.sequence is not None:
            result["sequence"] = self.sequence
        return result


@dataclass(frozen=True)
class Fee:
    """Fee applied to the account balance as part of trade settlement."""
    fee_amount: Decimal
    fee_currency: CurrencyCode
    fee_percentage: Decimal
    fee_group_id: str
    fee_type: FeeType
    running_trading_volume: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fee":
        return cls(
            fee_amount=parse_decimal(data["fee_amount"]),
            fee_currency=CurrencyCode(data["fee_currency"]),
            fee_percentage=parse_decimal(data["fee_percentage"]),
            fee_group_id=data["fee_group_id"],
            fee_type=FeeType(data["fee_type"]),
            running_trading_volume=parse_decimal(data["running_trading_volume"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fee_amount": format_decimal(self.fee_amount),
            "fee_currency": self.fee_currency.value,
            "fee_percentage": format_decimal(self.fee_percentage),
            "fee_group_id": self.fee_group_id,
            "fee_type": self.fee_type.value,
            "running_trading_volume": format_decimal(self.running_trading_volume),
        }


@dataclass(frozen=True)
class TradeHistoryEntry:
    """Trade recorded for exactly one order, with its fee."""
    trade: Trade
    fee: Fee

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradeHistoryEntry":
        return cls(trade=Trade.from_dict(data["trade"]), fee=Fee.from_dict(data["fee"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"trade": self.trade.to_dict(), "fee": self.fee.to_dict()}


@dataclass(frozen=True)
class TradeHistory:
    """Paginated collection of account trades.

    A page with a ``cursor`` has a successor; the final page has none.
    """
    trade_history: List[TradeHistoryEntry] = field(default_factory=list)
    max_page_size: Optional[int] = None
    cursor: Optional[str] = None

    @property
    def has_next_page(self) -> bool:
        return self.cursor is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradeHistory":
        return cls(
            trade_history=[
                TradeHistoryEntry.from_dict(entry) for entry in data.get("trade_history") or []
            ],
            max_page_size=_optional_int(data.get("max_page_size")),
            cursor=data.get("cursor") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "trade_history": [entry.to_dict() for entry in self.trade_history],
        }
        if self.max_page_size is not None:
            result["max_page_size"] = self.max_page_size
        if self.cursor is not None:
            result["cursor"] = self.cursor
        return result


@dataclass(frozen=True)
class OrderHistoryEntry:
    """Active or inactive order.

    For orders with the status FILLED, FILLED_FULLY, FILLED_CLOSED and
    FILLED_REJECTED, information about trades and fees is returned.
    """
    order: Order
    trades: List[TradeHistoryEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderHistoryEntry":
        return cls(
            order=Order.from_dict(data["order"]),
            trades=[TradeHistoryEntry.from_dict(entry) for entry in data.get("trades") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.to_dict(),
            "trades": [entry.to_dict() for entry in self.trades],
        }


@dataclass(frozen=True)
class OrderHistory:
    """Paginated collection of account orders."""
    order_history: List[OrderHistoryEntry] = field(default_factory=list)
    max_page_size: Optional[int] = None
    cursor: Optional[str] = None

    @property
    def has_next_page(self) -> bool:
        return self.cursor is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderHistory":
        return cls(
            order_history=[
                OrderHistoryEntry.from_dict(entry) for entry in data.get("order_history") or []
            ],
            max_page_size=_optional_int(data.get("max_page_size")),
            cursor=data.get("cursor") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "order_history": [entry.to_dict() for entry in self.order_history],
        }
        if self.max_page_size is not None:
            result["max_page_size"] = self.max_page_size
        if self.cursor is not None:
            result["cursor"] = self.cursor
        return result
