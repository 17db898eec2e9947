"""
Bitpanda Client - Python client for the Bitpanda Global Exchange REST API.

This package provides typed models for every exchange payload and an async
client for the public market data and account endpoints.
"""

from .client import BitpandaClient, create_bitpanda_client
from .http_client import ApiError, DecodeError, HttpClientError, TransportError
from .sequence import SequenceCheck, SequenceStatus, SequenceTracker
from .utils import Timestamp
from .models import (
    # Configuration
    ConnectionConfig,
    # Enumerations
    CurrencyCode,
    InstrumentCode,
    InstrumentState,
    OrderBookLevel,
    OrderSide,
    OrderStatus,
    OrderType,
    TimeUnit,
    FeeType,
    # Market
    Currency,
    Instrument,
    OrderBook,
    OrderBookLevelOne,
    Granularity,
    Candlestick,
    MarketTick,
    PriceTick,
    ServerTime,
    # Account
    Account,
    Balance,
    AccountFees,
    FeeGroup,
    FeeTier,
    # Orders
    CreateOrder,
    Order,
    Trade,
    Fee,
    OrderHistory,
    TradeHistory,
    ErrorResponse,
)

__all__ = [
    # Main Client
    "BitpandaClient",
    "create_bitpanda_client",
    "ConnectionConfig",
    # Errors
    "HttpClientError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "ErrorResponse",
    # Sequence checking
    "SequenceTracker",
    "SequenceCheck",
    "SequenceStatus",
    # Timestamps
    "Timestamp",
    "CurrencyCode",
    "InstrumentCode",
    "InstrumentState",
    "OrderBookLevel",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "TimeUnit",
    "FeeType",
    "Currency",
    "Instrument",
    "OrderBook",
    "OrderBookLevelOne",
    "Granularity",
    "Candlestick",
    "MarketTick",
    "PriceTick",
    "ServerTime",
    "Account",
    "Balance",
    "AccountFees",
    "FeeGroup",
    "FeeTier",
    "CreateOrder",
    "Order",
    "Trade",
    "Fee",
    "OrderHistory",
    "TradeHistory",
]
