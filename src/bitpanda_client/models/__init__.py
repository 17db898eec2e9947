"""
Data models for Bitpanda client.

This package contains every request and response entity exchanged with the
exchange REST API, as immutable dataclasses with exact wire field names.
"""

from .config import ConnectionConfig
from .enums import (
    CurrencyCode,
    FeeType,
    InstrumentCode,
    InstrumentState,
    OpenEnum,
    OrderBookLevel,
    OrderSide,
    OrderStatus,
    OrderType,
    TimeUnit,
)
from .errors import ErrorResponse
from .market import (
    Ask,
    Asks,
    Bid,
    Bids,
    BookEntry,
    Candlestick,
    Currency,
    Granularity,
    Instrument,
    MarketTick,
    OrderBook,
    OrderBookLevelOne,
    PriceTick,
    ServerTime,
    TimeGranularity,
    Value,
)
from .account import (
    Account,
    AccountFees,
    Balance,
    DepositAddress,
    FeeGroup,
    FeeMode,
    FeeTier,
    FiatDepositInfo,
    Recipient,
    TradingVolume,
    Withdraw,
    WithdrawResult,
    select_fee_tier,
)
from .orders import (
    CreateOrder,
    Fee,
    Order,
    OrderHistory,
    OrderHistoryEntry,
    Trade,
    TradeHistory,
    TradeHistoryEntry,
)

__all__ = [
    # Configuration
    "ConnectionConfig",
    # Enumerations
    "OpenEnum",
    "CurrencyCode",
    "InstrumentCode",
    "InstrumentState",
    "OrderType",
    "OrderSide",
    "OrderStatus",
    "TimeUnit",
    "FeeType",
    "OrderBookLevel",
    # Errors
    "ErrorResponse",
    # Market
    "Currency",
    "Instrument",
    "BookEntry",
    "Bids",
    "Asks",
    "OrderBook",
    "Value",
    "Bid",
    "Ask",
    "OrderBookLevelOne",
    "Granularity",
    "TimeGranularity",
    "Candlestick",
    "MarketTick",
    "PriceTick",
    "ServerTime",
    # Account
    "Account",
    "Balance",
    "FeeTier",
    "FeeGroup",
    "AccountFees",
    "FeeMode",
    "TradingVolume",
    "DepositAddress",
    "FiatDepositInfo",
    "Recipient",
    "Withdraw",
    "WithdrawResult",
    "select_fee_tier",
    # Orders
    "CreateOrder",
    "Order",
    "Trade",
    "Fee",
    "TradeHistoryEntry",
    "TradeHistory",
    "OrderHistoryEntry",
    "OrderHistory",
]
