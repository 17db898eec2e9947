"""
API method implementations for Bitpanda client.

One coroutine per REST endpoint. Each validates its inputs, issues the
request through HttpClient and decodes the JSON body into models.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from aiohttp import ClientSession

from .constants import FIAT_DEPOSIT_CURRENCY, MAX_PAGE_SIZE, MIN_PAGE_SIZE
from .http_client import DecodeError, HttpClient, JsonPayload
from .models.account import (
    Account,
    AccountFees,
    DepositAddress,
    FeeGroup,
    FeeMode,
    FiatDepositInfo,
    TradingVolume,
    Withdraw,
    WithdrawResult,
)
from .models.enums import CurrencyCode, InstrumentCode, OrderBookLevel, OrderType
from .models.market import (
    Candlestick,
    Currency,
    Granularity,
    Instrument,
    MarketTick,
    OrderBook,
    OrderBookLevelOne,
    PriceTick,
    ServerTime,
)
from .models.orders import (
    CreateOrder,
    Order,
    OrderHistory,
    OrderHistoryEntry,
    TradeHistory,
    TradeHistoryEntry,
)
from .utils import to_utc, validate_amount

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DECODE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def decode(factory: Callable[[Dict[str, Any]], T], payload: JsonPayload) -> T:
    """Decode a JSON object with a model factory, raising DecodeError on mismatch."""
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}", response_data=payload)
    try:
        return factory(payload)
    except _DECODE_ERRORS as e:
        raise DecodeError(f"Unexpected response shape: {e!r}", response_data=payload) from e


def decode_list(factory: Callable[[Dict[str, Any]], T], payload: JsonPayload) -> List[T]:
    """Decode a JSON array of objects."""
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array, got {type(payload).__name__}", response_data=payload)
    return [decode(factory, item) for item in payload]


def _validate_time_range(from_time: Optional[datetime], to_time: Optional[datetime]) -> None:
    # naive values are read as UTC
    if from_time is None or to_time is None:
        return
    if to_utc(from_time) > to_utc(to_time):
        raise ValueError(f"Invalid time range: {from_time} is after {to_time}")


def _validate_page_size(max_page_size: Optional[int]) -> None:
    if max_page_size is not None and not MIN_PAGE_SIZE <= max_page_size <= MAX_PAGE_SIZE:
        raise ValueError(
            f"Invalid max_page_size: {max_page_size}. "
            f"Must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"
        )


def validate_create_order(order: CreateOrder) -> None:
    """Check the price fields an order type requires."""
    if not validate_amount(order.amount):
        raise ValueError(f"Invalid amount: {order.amount}")

    if order.price is not None and not validate_amount(order.price):
        raise ValueError(f"Invalid price: {order.price}")

    if order.trigger_price is not None and not validate_amount(order.trigger_price):
        raise ValueError(f"Invalid trigger price: {order.trigger_price}")

    if order.type == OrderType.MARKET:
        if order.price is not None or order.trigger_price is not None:
            raise ValueError("MARKET orders must not carry a price or trigger price")
    elif order.type == OrderType.LIMIT:
        if order.price is None:
            raise ValueError("LIMIT orders require a price")
        if order.trigger_price is not None:
            raise ValueError("LIMIT orders must not carry a trigger price")
    elif order.type == OrderType.STOP:
        if order.price is None or order.trigger_price is None:
            raise ValueError("STOP orders require a price and a trigger price")


class APIMethods:
    """Container for all API method implementations."""

    def __init__(self, http_client: HttpClient):
        """Initialize API methods with HTTP client."""
        self._http_client = http_client

    # Public market data

    async def get_time(self, session: ClientSession) -> ServerTime:
        response = await self._http_client.request(session, "GET", "/v1/time")
        return decode(ServerTime.from_dict, response)

    async def get_currencies(self, session: ClientSession) -> List[Currency]:
        response = await self._http_client.request(session, "GET", "/v1/currencies")
        return decode_list(Currency.from_dict, response)

    async def get_instruments(self, session: ClientSession) -> List[Instrument]:
        response = await self._http_client.request(session, "GET", "/v1/instruments")
        return decode_list(Instrument.from_dict, response)

    async def get_fee_groups(self, session: ClientSession) -> List[FeeGroup]:
        response = await self._http_client.request(session, "GET", "/v1/fees")
        return decode_list(FeeGroup.from_dict, response)

    async def get_order_book(
        self,
        session: ClientSession,
        instrument_code: Union[InstrumentCode, str],
        level: Union[OrderBookLevel, int] = OrderBookLevel.THREE,
    ) -> Union[OrderBook, OrderBookLevelOne]:
        """Get an order book snapshot.

        Level 1 returns only the best bid and ask; levels 2 and 3 return full
        sides, aggregated by price or listed per order respectively.
        """
        try:
            level = OrderBookLevel(level)
        except ValueError:
            raise ValueError(
                f"Invalid level: {level}. Valid levels are: {[lvl.value for lvl in OrderBookLevel]}"
            ) from None

        code = InstrumentCode(instrument_code)
        response = await self._http_client.request(
            session, "GET", f"/v1/order-book/{code.value}", params={"level": level.value}
        )
        if level is OrderBookLevel.ONE:
            return decode(OrderBookLevelOne.from_dict, response)
        return decode(OrderBook.from_dict, response)

    async def get_candlesticks(
        self,
        session: ClientSession,
        instrument_code: Union[InstrumentCode, str],
        granularity: Granularity,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Candlestick]:
        if not granularity.is_supported:
            raise ValueError(
                f"Unsupported granularity: {granularity.period} {granularity.unit.value}"
            )
        _validate_time_range(from_time, to_time)

        code = InstrumentCode(instrument_code)
        params = {
            "unit": granularity.unit,
            "period": granularity.period,
            "from": from_time,
            "to": to_time,
        }
        response = await self._http_client.request(
            session, "GET", f"/v1/candlesticks/{code.value}", params=params
        )
        return decode_list(Candlestick.from_dict, response)

    async def get_market_ticker(self, session: ClientSession) -> List[MarketTick]:
        response = await self._http_client.request(session, "GET", "/v1/market-ticker")
        return decode_list(MarketTick.from_dict, response)

    async def get_market_tick(
        self, session: ClientSession, instrument_code: Union[InstrumentCode, str]
    ) -> MarketTick:
        code = InstrumentCode(instrument_code)
        response = await self._http_client.request(
            session, "GET", f"/v1/market-ticker/{code.value}"
        )
        return decode(MarketTick.from_dict, response)

    async def get_price_ticks(
        self,
        session: ClientSession,
        instrument_code: Union[InstrumentCode, str],
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> List[PriceTick]:
        _validate_time_range(from_time, to_time)
        code = InstrumentCode(instrument_code)
        response = await self._http_client.request(
            session,
            "GET",
            f"/v1/price-ticks/{code.value}",
            params={"from": from_time, "to": to_time},
        )
        return decode_list(PriceTick.from_dict, response)

    # Account

    async def get_balances(self, session: ClientSession) -> Account:
        response = await self._http_client.request(
            session, "GET", "/v1/account/balances", authenticated=True
        )
        return decode(Account.from_dict, response)

    async def get_account_fees(self, session: ClientSession) -> AccountFees:
        response = await self._http_client.request(
            session, "GET", "/v1/account/fees", authenticated=True
        )
        return decode(AccountFees.from_dict, response)

    async def set_fee_mode(self, session: ClientSession, collect_fees_in_best: bool) -> AccountFees:
        response = await self._http_client.request(
            session,
            "POST",
            "/v1/account/fees",
            json_body=FeeMode(collect_fees_in_best).to_dict(),
            authenticated=True,
        )
        return decode(AccountFees.from_dict, response)

    async def get_trading_volume(self, session: ClientSession) -> TradingVolume:
        response = await self._http_client.request(
            session, "GET", "/v1/account/trading-volume", authenticated=True
        )
        return decode(TradingVolume.from_dict, response)

    # Orders

    async def create_order(self, session: ClientSession, order: CreateOrder) -> Order:
        """Place a new order."""
        validate_create_order(order)

        response = await self._http_client.request(
            session, "POST", "/v1/account/orders", json_body=order.to_dict(), authenticated=True
        )
        created = decode(Order.from_dict, response)
        logger.info(
            f"Order {created.order_id} created: {created.side.value} {created.amount} "
            f"{created.instrument_code.value} ({created.type.value})"
        )
        return created

    async def get_orders(
        self,
        session: ClientSession,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
        instrument_code: Optional[Union[InstrumentCode, str]] = None,
        with_cancelled_and_rejected: Optional[bool] = None,
        with_just_filled_inactive: Optional[bool] = None,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> OrderHistory:
        """Get one page of the account's orders."""
        _validate_time_range(from_time, to_time)
        _validate_page_size(max_page_size)

        params = {
            "from": from_time,
            "to": to_time,
            "instrument_code": InstrumentCode(instrument_code) if instrument_code else None,
            "with_cancelled_and_rejected": with_cancelled_and_rejected,
            "with_just_filled_inactive": with_just_filled_inactive,
            "max_page_size": max_page_size,
            "cursor": cursor,
        }
        response = await self._http_client.request(
            session, "GET", "/v1/account/orders", params=params, authenticated=True
        )
        return decode(OrderHistory.from_dict, response)

    async def get_order(self, session: ClientSession, order_id: str) -> OrderHistoryEntry:
        response = await self._http_client.request(
            session, "GET", f"/v1/account/orders/{order_id}", authenticated=True
        )
        return decode(OrderHistoryEntry.from_dict, response)

    async def cancel_order(self, session: ClientSession, order_id: str) -> None:
        await self._http_client.request(
            session, "DELETE", f"/v1/account/orders/{order_id}", authenticated=True
        )
        logger.info(f"Order {order_id} cancelled")

    async def cancel_all_orders(
        self,
        session: ClientSession,
        instrument_code: Optional[Union[InstrumentCode, str]] = None,
    ) -> List[str]:
        """Cancel all open orders, optionally for one instrument.

        Returns the ids of the cancelled orders.
        """
        params = {"instrument_code": InstrumentCode(instrument_code) if instrument_code else None}
        response = await self._http_client.request(
            session, "DELETE", "/v1/account/orders", params=params, authenticated=True
        )
        if response is None:
            return []
        if not isinstance(response, list):
            raise DecodeError("Expected a JSON array of order ids", response_data=response)
        return [str(order_id) for order_id in response]

    async def get_order_trades(
        self,
        session: ClientSession,
        order_id: str,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> TradeHistory:
        _validate_page_size(max_page_size)
        response = await self._http_client.request(
            session,
            "GET",
            f"/v1/account/orders/{order_id}/trades",
            params={"max_page_size": max_page_size, "cursor": cursor},
            authenticated=True,
        )
        return decode(TradeHistory.from_dict, response)

    # Trades

    async def get_trades(
        self,
        session: ClientSession,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
        instrument_code: Optional[Union[InstrumentCode, str]] = None,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> TradeHistory:
        """Get one page of the account's trades."""
        _validate_time_range(from_time, to_time)
        _validate_page_size(max_page_size)

        params = {
            "from": from_time,
            "to": to_time,
            "instrument_code": InstrumentCode(instrument_code) if instrument_code else None,
            "max_page_size": max_page_size,
            "cursor": cursor,
        }
        response = await self._http_client.request(
            session, "GET", "/v1/account/trades", params=params, authenticated=True
        )
        return decode(TradeHistory.from_dict, response)

    async def get_trade(self, session: ClientSession, trade_id: str) -> TradeHistoryEntry:
        response = await self._http_client.request(
            session, "GET", f"/v1/account/trades/{trade_id}", authenticated=True
        )
        return decode(TradeHistoryEntry.from_dict, response)

    # Deposits and withdrawals

    async def create_deposit_address(
        self, session: ClientSession, currency: Union[CurrencyCode, str]
    ) -> DepositAddress:
        response = await self._http_client.request(
            session,
            "POST",
            "/v1/account/deposit/crypto",
            json_body={"currency": CurrencyCode(currency).value},
            authenticated=True,
        )
        return decode(DepositAddress.from_dict, response)

    async def get_deposit_address(
        self, session: ClientSession, currency: Union[CurrencyCode, str]
    ) -> DepositAddress:
        code = CurrencyCode(currency)
        response = await self._http_client.request(
            session, "GET", f"/v1/account/deposit/crypto/{code.value}", authenticated=True
        )
        return decode(DepositAddress.from_dict, response)

    async def get_fiat_deposit_info(self, session: ClientSession) -> FiatDepositInfo:
        response = await self._http_client.request(
            session,
            "GET",
            f"/v1/account/deposit/fiat/{FIAT_DEPOSIT_CURRENCY}",
            authenticated=True,
        )
        return decode(FiatDepositInfo.from_dict, response)

    async def withdraw_crypto(self, session: ClientSession, withdraw: Withdraw) -> WithdrawResult:
        if not validate_amount(withdraw.amount):
            raise ValueError(f"Invalid amount: {withdraw.amount}")
        if not withdraw.recipient.address:
            raise ValueError("Withdrawal recipient address cannot be empty")

        response = await self._http_client.request(
            session,
            "POST",
            "/v1/account/withdraw/crypto",
            json_body=withdraw.to_dict(),
            authenticated=True,
        )
        result = decode(WithdrawResult.from_dict, response)
        logger.info(f"Withdrawal of {result.amount} {withdraw.currency.value} accepted")
        return result
