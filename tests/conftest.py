# -*- coding: utf-8 -*-
"""
Shared fixtures and utilities for testing Bitpanda client.
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest

from bitpanda_client.client import BitpandaClient
from bitpanda_client.models import ConnectionConfig


TEST_TOKEN = "eyJhbGciOiJSUzI1NiJ9.test-token.signature"


# Mock data fixtures
@pytest.fixture
def order_payload() -> Dict[str, Any]:
    """Limit order as returned by the exchange."""
    return {
        "order_id": "abc",
        "account_id": "u1",
        "instrument_code": "BTC_EUR",
        "amount": "0.5",
        "filled_amount": "0",
        "side": "BUY",
        "type": "LIMIT",
        "status": "OPEN",
        "price": "30000.00",
        "time": "2021-01-01T00:00:00Z",
    }


@pytest.fixture
def stop_order_payload() -> Dict[str, Any]:
    """Stop order that has been triggered and partially filled."""
    return {
        "order_id": "66756a10-3e86-48f4-9678-b634c4b135b2",
        "account_id": "1eb2ad5d-55f1-40b5-bc92-7dc05869e905",
        "instrument_code": "BTC_EUR",
        "amount": "1.23456",
        "filled_amount": "0.6",
        "side": "SELL",
        "type": "STOP",
        "status": "FILLED",
        "sequence": 123456789,
        "price": "8500.00",
        "trigger_price": "8600.00",
        "time": "2019-08-01T08:00:44.026Z",
        "time_last_updated": "2019-08-01T08:01:44.123456Z",
        "time_triggered": "2019-08-01T08:00:50.5Z",
    }


@pytest.fixture
def trade_history_entry_payload() -> Dict[str, Any]:
    return {
        "trade": {
            "trade_id": "fdff2bcc-37d6-4a2d-92a5-46e09c868664",
            "order_id": "36bb2437-7402-4794-bf26-4bdf03526439",
            "account_id": "a4c699f6-338d-4a26-941f-8f9853bfc4b9",
            "amount": "1.4",
            "side": "BUY",
            "instrument_code": "BTC_EUR",
            "price": "7341.4",
            "time": "2019-09-27T15:05:32.564Z",
            "sequence": 48670,
        },
        "fee": {
            "fee_amount": "0.0014",
            "fee_currency": "BTC",
            "fee_percentage": "0.1",
            "fee_group_id": "default",
            "fee_type": "TAKER",
            "running_trading_volume": "0.0",
        },
    }


@pytest.fixture
def trade_history_page_payload(trade_history_entry_payload) -> Dict[str, Any]:
    """Trade history page with a successor."""
    return {
        "trade_history": [trade_history_entry_payload],
        "max_page_size": 100,
        "cursor": "eyJhY2NvdW50X2lkIjp7InMiOiJlMzY5YWM4MC00NTc3LTExZTktYWUwOC05YmVkYzQ3OTBiODQiLCJzcyI6W119fQ==",
    }


@pytest.fixture
def trade_history_final_payload(trade_history_entry_payload) -> Dict[str, Any]:
    """Last trade history page."""
    return {
        "trade_history": [trade_history_entry_payload],
        "max_page_size": 100,
    }


@pytest.fixture
def balances_payload() -> Dict[str, Any]:
    return {
        "account_id": "e4eaaaf2-d142-11e1-b3e4-080027620cdd",
        "balances": [
            {
                "account_id": "e4eaaaf2-d142-11e1-b3e4-080027620cdd",
                "currency_code": "BTC",
                "change": "0.50000000",
                "available": "10.0",
                "locked": "4.1",
                "sequence": 5,
                "time": "2019-04-01T13:39:17.155Z",
            },
            {
                "account_id": "e4eaaaf2-d142-11e1-b3e4-080027620cdd",
                "currency_code": "EUR",
                "change": "-1000.00",
                "available": "6543.21",
                "locked": "0",
                "sequence": 7,
                "time": "2019-04-01T13:39:17.155Z",
            },
        ],
    }


@pytest.fixture
def instrument_payload() -> Dict[str, Any]:
    return {
        "state": "ACTIVE",
        "base": {"code": "BTC", "precision": 8},
        "quote": {"code": "EUR", "precision": 2},
        "amount_precision": 4,
        "market_precision": 2,
        "min_size": "10.0",
    }


@pytest.fixture
def order_book_payload() -> Dict[str, Any]:
    return {
        "instrument_code": "BTC_EUR",
        "time": "2019-08-08T13:10:11.118Z",
        "bids": [
            {"price": "8863.14", "amount": "0.2", "number_of_orders": 1},
            {"price": "8860.00", "amount": "1.5", "number_of_orders": 3},
        ],
        "asks": [
            {"price": "8865.71", "amount": "0.06", "number_of_orders": 2},
        ],
    }


@pytest.fixture
def order_book_level_one_payload() -> Dict[str, Any]:
    return {
        "instrument_code": "BTC_EUR",
        "time": "2019-08-08T13:10:11.118Z",
        "bids": {"value": {"price": "8863.14", "amount": "0.2", "number_of_orders": 1}},
        "asks": {"value": {"price": "8865.71", "amount": "0.06", "number_of_orders": 2}},
    }


@pytest.fixture
def candlestick_payload() -> Dict[str, Any]:
    return {
        "last_sequence": 12345,
        "instrument_code": "BTC_EUR",
        "granularity": {"unit": "MINUTES", "period": 5},
        "high": "8790.00",
        "low": "8766.61",
        "open": "8780.00",
        "close": "8768.93",
        "volume": "13.36004",
        "time": "2019-08-21T10:05:00Z",
    }


@pytest.fixture
def fee_group_payload() -> Dict[str, Any]:
    return {
        "fee_group_id": "default",
        "display_text": "The standard fee plan.",
        "fee_tiers": [
            {"fee_group_id": "default", "volume": "0.0", "maker_fee": "0.1", "taker_fee": "0.2"},
            {"fee_group_id": "default", "volume": "100.0", "maker_fee": "0.09", "taker_fee": "0.19"},
            {"fee_group_id": "default", "volume": "250.0", "maker_fee": "0.08", "taker_fee": "0.18"},
        ],
        "fee_discount_rate": "25.0",
        "minimum_price_value": "0.12",
    }


@pytest.fixture
def market_tick_payload() -> Dict[str, Any]:
    return {
        "instrument_code": "BTC_EUR",
        "sequence": 602562,
        "state": "ACTIVE",
        "is_frozen": 0,
        "quote_volume": "123456.78",
        "base_volume": "14.01",
        "last_price": "8865.71",
        "best_bid": "8863.14",
        "best_ask": "8865.71",
        "price_change": "-12.40",
        "price_change_percentage": "-0.14",
        "high": "8990.00",
        "low": "8780.30",
    }


@pytest.fixture
def price_tick_payload() -> Dict[str, Any]:
    return {
        "instrument_code": "BTC_EUR",
        "price": "8865.71",
        "amount": "0.1",
        "volume": "886.571",
        "sequence": 48670,
        "taker_side": "SELL",
        "time": "2019-08-21T10:05:00.123456789Z",
        "trade_timestamp": 1566381900123,
    }


@pytest.fixture
def account_fees_payload(fee_group_payload) -> Dict[str, Any]:
    return {
        "account_id": "ed524d00-820a-11e9-8f1e-69602df16d85",
        "running_trading_volume": "0.0",
        "fee_group_id": "default",
        "fee_tiers": fee_group_payload["fee_tiers"],
        "active_fee_tier": fee_group_payload["fee_tiers"][0],
        "collect_fees_in_best": False,
        "fee_discount_rate": "25.0",
        "minimum_price_value": "0.12",
    }


@pytest.fixture
def deposit_address_payload() -> Dict[str, Any]:
    """XRP deposit address, which needs a destination tag."""
    return {
        "address": "rBxjCeLf3uTfoaHFg2kFy8z5MNGb2ZzuAv",
        "destinationTag": "1234567",
        "enabled": True,
        "can_create_more": False,
        "is_smart_contract": False,
    }


@pytest.fixture
def fiat_deposit_payload() -> Dict[str, Any]:
    return {
        "iban": "AT611904300234573201",
        "bic": "GIBAATWWXXX",
        "bank": "Example Bank AG",
        "address": "Am Belvedere 1, 1100 Vienna",
        "receiver": "Bitpanda GmbH",
        "receiver_address": "Stella-Klein-Loew-Weg 17, 1020 Vienna",
        "unique_payment_number": "BP0123456789",
    }


@pytest.fixture
def withdraw_result_payload() -> Dict[str, Any]:
    return {
        "amount": "250.0",
        "recipient": "rBxjCeLf3uTfoaHFg2kFy8z5MNGb2ZzuAv",
        "fee": "0.25",
        "destinationTag": "1234567",
    }


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Config with a token and a test base URL."""
    return ConnectionConfig(
        api_token=TEST_TOKEN,
        base_url="https://test-api.example.com/public",
        timeout=10.0,
    )


@pytest.fixture
def public_config() -> ConnectionConfig:
    """Config without a token."""
    return ConnectionConfig(base_url="https://test-api.example.com/public")


@pytest.fixture
def client(connection_config) -> BitpandaClient:
    """Create a fresh BitpandaClient for testing."""
    return BitpandaClient(connection_config)


# Mock transport fixtures
@pytest.fixture
def make_response():
    """Factory for mock aiohttp responses with a fixed body."""
    def _make(
        status: int = 200,
        text: str = "",
        reason: str = "OK",
        body: Optional[bytes] = None,
        charset: Optional[str] = None,
    ) -> Mock:
        response = Mock(spec=aiohttp.ClientResponse)
        response.status = status
        response.reason = reason
        response.charset = charset
        response.read = AsyncMock(return_value=text.encode("utf-8") if body is None else body)
        return response
    return _make


@pytest.fixture
def make_session():
    """Factory for mock aiohttp sessions whose request() yields a response."""
    def _make(response: Mock) -> MagicMock:
        session = MagicMock()
        session.request.return_value.__aenter__.return_value = response
        session.request.return_value.__aexit__.return_value = False
        return session
    return _make
