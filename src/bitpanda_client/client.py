"""
Bitpanda Client - Main orchestration module.

This module provides the BitpandaClient class that coordinates session
management, HTTP execution and endpoint methods:
- Data models are immutable structures in models/
- HTTP operations are handled by http_client.py
- Session management is handled by session_manager.py
- API methods are implemented in api_methods.py
"""

import asyncio
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional, Union

from dotenv import load_dotenv

from .api_methods import APIMethods
from .constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ENV_API_TOKEN, ENV_BASE_URL, ENV_TIMEOUT
from .http_client import HttpClient, HttpClientError
from .models import (
    Account,
    AccountFees,
    Candlestick,
    ConnectionConfig,
    CreateOrder,
    Currency,
    CurrencyCode,
    DepositAddress,
    FeeGroup,
    FiatDepositInfo,
    Granularity,
    Instrument,
    InstrumentCode,
    MarketTick,
    Order,
    OrderBook,
    OrderBookLevel,
    OrderBookLevelOne,
    OrderHistory,
    OrderHistoryEntry,
    PriceTick,
    ServerTime,
    TradeHistory,
    TradeHistoryEntry,
    TradingVolume,
    Withdraw,
    WithdrawResult,
)
from .session_manager import SessionManager

load_dotenv()
logger = logging.getLogger(__name__)


class BitpandaClient:
    """
    Main Bitpanda client orchestrator.

    Public market data works without a token; account endpoints send the
    configured bearer token. Requests share one aiohttp session and may run
    concurrently.
    """

    def __init__(self, config: ConnectionConfig):
        """Initialize Bitpanda client with configuration."""
        self._config = config
        self._session_manager = SessionManager(config)
        self._http_client = HttpClient(config)
        self._api_methods = APIMethods(self._http_client)
        self._instrument_cache: Dict[str, Instrument] = {}
        self._closed = False

    @classmethod
    def from_env(cls) -> "BitpandaClient":
        """Create client from environment variables."""
        api_token = os.getenv(ENV_API_TOKEN) or None
        base_url = os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL
        timeout = float(os.getenv(ENV_TIMEOUT) or DEFAULT_TIMEOUT)

        config = ConnectionConfig(
            api_token=api_token,
            base_url=base_url,
            timeout=timeout,
        )

        return cls(config)

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    # Public market data
    async def get_time(self) -> ServerTime:
        """Get exchange server time."""
        return await self._execute(self._api_methods.get_time, "GET", "/v1/time")

    async def get_currencies(self) -> List[Currency]:
        """Get all currencies with their precision."""
        return await self._execute(self._api_methods.get_currencies, "GET", "/v1/currencies")

    async def get_instruments(self) -> List[Instrument]:
        """Get all instruments and refresh the instrument cache."""
        instruments = await self._execute(
            self._api_methods.get_instruments, "GET", "/v1/instruments"
        )
        for instrument in instruments:
            self._instrument_cache[instrument.code.value] = instrument
        return instruments

    async def warmup_cache(self) -> int:
        """
        Preload the instrument cache.

        Returns:
            Number of instruments cached
        """
        logger.info("Warming up instrument cache...")
        instruments = await self.get_instruments()
        logger.info(f"Cache warmed up with {len(instruments)} instruments")
        return len(instruments)

    async def get_instrument(
        self, instrument_code: Union[InstrumentCode, str]
    ) -> Optional[Instrument]:
        """
        Get a single instrument by code.

        Instruments change rarely, so results are served from the cache and
        the instrument list is fetched only on a miss.
        """
        code = InstrumentCode(instrument_code).value
        if code in self._instrument_cache:
            logger.debug(f"Returning cached instrument {code}")
            return self._instrument_cache[code]

        await self.get_instruments()
        return self._instrument_cache.get(code)

    async def get_fee_groups(self) -> List[FeeGroup]:
        """Get the fee schedules of all fee groups."""
        return await self._execute(self._api_methods.get_fee_groups, "GET", "/v1/fees")

    async def get_order_book(
        self,
        instrument_code: Union[InstrumentCode, str],
        level: Union[OrderBookLevel, int] = OrderBookLevel.THREE,
    ) -> Union[OrderBook, OrderBookLevelOne]:
        """Get order book snapshot for an instrument."""
        return await self._execute(
            self._api_methods.get_order_book, "GET", "/v1/order-book", instrument_code, level
        )

    async def get_candlesticks(
        self,
        instrument_code: Union[InstrumentCode, str],
        granularity: Granularity,
        from_time: datetime,
        to_time: datetime,
    ) -> List[Candlestick]:
        """Get candlesticks for an instrument between two instants."""
        return await self._execute(
            self._api_methods.get_candlesticks,
            "GET",
            "/v1/candlesticks",
            instrument_code,
            granularity,
            from_time,
            to_time,
        )

    async def get_market_ticker(self) -> List[MarketTick]:
        """Get market statistics for all instruments."""
        return await self._execute(
            self._api_methods.get_market_ticker, "GET", "/v1/market-ticker"
        )

    async def get_market_tick(self, instrument_code: Union[InstrumentCode, str]) -> MarketTick:
        """Get market statistics for one instrument."""
        return await self._execute(
            self._api_methods.get_market_tick, "GET", "/v1/market-ticker", instrument_code
        )

    async def get_price_ticks(
        self,
        instrument_code: Union[InstrumentCode, str],
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
    ) -> List[PriceTick]:
        """Get recent trade prices for an instrument."""
        return await self._execute(
            self._api_methods.get_price_ticks,
            "GET",
            "/v1/price-ticks",
            instrument_code,
            from_time,
            to_time,
        )

    # Account methods
    async def get_balances(self) -> Account:
        """Get account balances."""
        return await self._execute(
            self._api_methods.get_balances, "GET", "/v1/account/balances"
        )

    async def get_account_fees(self) -> AccountFees:
        """Get fee details of the account."""
        return await self._execute(
            self._api_methods.get_account_fees, "GET", "/v1/account/fees"
        )

    async def set_fee_mode(self, collect_fees_in_best: bool) -> AccountFees:
        """Enable or disable paying fees in BEST."""
        return await self._execute(
            self._api_methods.set_fee_mode, "POST", "/v1/account/fees", collect_fees_in_best
        )

    async def get_trading_volume(self) -> TradingVolume:
        """Get the running trading volume of the account."""
        return await self._execute(
            self._api_methods.get_trading_volume, "GET", "/v1/account/trading-volume"
        )

    # Order methods
    async def create_order(self, order: CreateOrder) -> Order:
        """Place a new order."""
        return await self._execute(
            self._api_methods.create_order, "POST", "/v1/account/orders", order
        )

    async def get_orders(
        self,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
        instrument_code: Optional[Union[InstrumentCode, str]] = None,
        with_cancelled_and_rejected: Optional[bool] = None,
        with_just_filled_inactive: Optional[bool] = None,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> OrderHistory:
        """
        Get one page of orders.

        Pass the ``cursor`` of the previous page to fetch the next one; the
        final page has no cursor.
        """
        return await self._execute(
            self._api_methods.get_orders,
            "GET",
            "/v1/account/orders",
            from_time=from_time,
            to_time=to_time,
            instrument_code=instrument_code,
            with_cancelled_and_rejected=with_cancelled_and_rejected,
            with_just_filled_inactive=with_just_filled_inactive,
            max_page_size=max_page_size,
            cursor=cursor,
        )

    async def get_order(self, order_id: str) -> OrderHistoryEntry:
        """Get an order with its trades."""
        return await self._execute(
            self._api_methods.get_order, "GET", "/v1/account/orders/{id}", order_id
        )

    async def cancel_order(self, order_id: str) -> None:
        """Cancel an order by id."""
        return await self._execute(
            self._api_methods.cancel_order, "DELETE", "/v1/account/orders/{id}", order_id
        )

    async def cancel_all_orders(
        self, instrument_code: Optional[Union[InstrumentCode, str]] = None
    ) -> List[str]:
        """Cancel all open orders, optionally for one instrument."""
        return await self._execute(
            self._api_methods.cancel_all_orders, "DELETE", "/v1/account/orders", instrument_code
        )

    async def get_order_trades(
        self,
        order_id: str,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> TradeHistory:
        """Get the trades of one order."""
        return await self._execute(
            self._api_methods.get_order_trades,
            "GET",
            "/v1/account/orders/{id}/trades",
            order_id,
            max_page_size=max_page_size,
            cursor=cursor,
        )

    # Trade methods
    async def get_trades(
        self,
        from_time: Optional[datetime] = None,
        to_time: Optional[datetime] = None,
        instrument_code: Optional[Union[InstrumentCode, str]] = None,
        max_page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> TradeHistory:
        """Get one page of trades."""
        return await self._execute(
            self._api_methods.get_trades,
            "GET",
            "/v1/account/trades",
            from_time=from_time,
            to_time=to_time,
            instrument_code=instrument_code,
            max_page_size=max_page_size,
            cursor=cursor,
        )

    async def get_trade(self, trade_id: str) -> TradeHistoryEntry:
        """Get a trade with its fee."""
        return await self._execute(
            self._api_methods.get_trade, "GET", "/v1/account/trades/{id}", trade_id
        )

    # Deposit and withdrawal methods
    async def create_deposit_address(self, currency: Union[CurrencyCode, str]) -> DepositAddress:
        """Create a new crypto deposit address."""
        return await self._execute(
            self._api_methods.create_deposit_address,
            "POST",
            "/v1/account/deposit/crypto",
            currency,
        )

    async def get_deposit_address(self, currency: Union[CurrencyCode, str]) -> DepositAddress:
        """Get the crypto deposit address for a currency."""
        return await self._execute(
            self._api_methods.get_deposit_address,
            "GET",
            "/v1/account/deposit/crypto/{currency}",
            currency,
        )

    async def get_fiat_deposit_info(self) -> FiatDepositInfo:
        """Get bank transfer instructions for EUR deposits."""
        return await self._execute(
            self._api_methods.get_fiat_deposit_info, "GET", "/v1/account/deposit/fiat"
        )

    async def withdraw_crypto(self, withdraw: Withdraw) -> WithdrawResult:
        """Withdraw crypto to an external address."""
        return await self._execute(
            self._api_methods.withdraw_crypto, "POST", "/v1/account/withdraw/crypto", withdraw
        )

    # Health
    async def health_check(self) -> bool:
        """Check that the exchange answers a server time request."""
        try:
            await self.get_time()
            return True
        except HttpClientError as e:
            logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close client and cleanup resources."""
        if not self._closed:
            await self._session_manager.close_session()
            self._closed = True
            logger.info("Bitpanda client closed")

    async def _execute(self, api_method, method: str, endpoint: str, *args, **kwargs):
        """Execute API method on the shared session, logging its duration."""
        if self._closed:
            raise RuntimeError("Client is closed")

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        session = await self._session_manager.create_session()

        try:
            return await api_method(session, *args, **kwargs)
        finally:
            duration_ms = (loop.time() - start_time) * 1000
            logger.debug(f"{method} {endpoint} took {duration_ms:.1f} ms")

    # Context manager support
    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def __del__(self):
        """Cleanup on deletion."""
        if hasattr(self, '_closed') and not self._closed and self._session_manager.session:
            logger.warning("BitpandaClient not properly closed - call close() explicitly")


def create_bitpanda_client(
    api_token: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> BitpandaClient:
    """
    Factory function to create Bitpanda client with common configuration.

    Args:
        api_token: Bearer token for account endpoints (optional for public data)
        base_url: Base URL for API endpoints
        timeout: Request timeout in seconds

    Returns:
        Configured BitpandaClient instance
    """
    config = ConnectionConfig(
        api_token=api_token,
        base_url=base_url,
        timeout=timeout,
    )

    return BitpandaClient(config)
