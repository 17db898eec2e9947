# -*- coding: utf-8 -*-
"""
Tests for BitpandaClient orchestration.
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, patch

from bitpanda_client.client import BitpandaClient, create_bitpanda_client
from bitpanda_client.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from bitpanda_client.http_client import ApiError, TransportError
from bitpanda_client.models import (
    ConnectionConfig,
    CreateOrder,
    ErrorResponse,
    Instrument,
    InstrumentCode,
    OrderBookLevel,
    OrderSide,
    OrderType,
    TradingVolume,
)


class TestBitpandaClientInit:
    """Test initialization of BitpandaClient."""

    def test_valid_init_with_config(self, connection_config):
        client = BitpandaClient(connection_config)
        assert client.config == connection_config
        assert not client._closed
        assert client._session_manager is not None
        assert client._http_client is not None
        assert client._api_methods is not None

    def test_from_env(self):
        """Test client creation from environment variables."""
        with patch.dict('os.environ', {
            'BITPANDA_API_TOKEN': 'env-token',
            'BITPANDA_BASE_URL': 'https://sandbox.example.com/public/',
            'BITPANDA_TIMEOUT': '5',
        }):
            client = BitpandaClient.from_env()

        assert client.config.api_token == 'env-token'
        assert client.config.base_url == 'https://sandbox.example.com/public'
        assert client.config.timeout == 5.0

    def test_from_env_missing_variables(self):
        """Test that an empty environment gives a public client with defaults."""
        with patch.dict('os.environ', {}, clear=True):
            client = BitpandaClient.from_env()

        assert client.config.api_token is None
        assert not client.config.authenticated
        assert client.config.base_url == DEFAULT_BASE_URL
        assert client.config.timeout == DEFAULT_TIMEOUT

    def test_create_bitpanda_client_function(self):
        client = create_bitpanda_client(
            api_token="test_token",
            base_url="https://test.api.com",
            timeout=15.0,
        )

        assert client.config.api_token == "test_token"
        assert client.config.base_url == "https://test.api.com"
        assert client.config.timeout == 15.0

    @pytest.mark.asyncio
    async def test_create_bitpanda_client_trailing_slash(self, make_response, make_session):
        """Test that a trailing slash on the base URL does not double up."""
        client = create_bitpanda_client(base_url="https://test.api.com/public/")
        session = make_session(make_response(text='{"iso": "2021-01-01T00:00:00Z", "epoch_millis": 1}'))

        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = session
            await client.get_time()

        assert client.config.base_url == "https://test.api.com/public"
        assert session.request.call_args.kwargs["url"] == "https://test.api.com/public/v1/time"


class TestConnectionConfig:
    """Test configuration validation."""

    def test_token_hidden_from_repr(self, connection_config):
        assert connection_config.api_token not in repr(connection_config)

    @pytest.mark.parametrize("token", ["", "   ", "abc def"])
    def test_invalid_token(self, token):
        with pytest.raises(ValueError):
            ConnectionConfig(api_token=token)

    def test_invalid_base_url(self):
        with pytest.raises(ValueError, match="Base URL"):
            ConnectionConfig(base_url="api.exchange.bitpanda.com")

    @pytest.mark.parametrize("base_url", [
        "https://api.exchange.bitpanda.com/public/",
        "https://api.exchange.bitpanda.com/public//",
    ])
    def test_base_url_trailing_slashes_removed(self, base_url):
        config = ConnectionConfig(base_url=base_url)
        assert config.base_url == "https://api.exchange.bitpanda.com/public"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="Timeout"):
            ConnectionConfig(timeout=0)


class TestOperations:
    """Test delegation to API methods."""

    @pytest.mark.asyncio
    async def test_get_trading_volume(self, client):
        volume = TradingVolume(volume=Decimal("5.2"))
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_trading_volume') as mock_api:
                mock_api.return_value = volume

                result = await client.get_trading_volume()

                assert result == volume
                mock_session.assert_called_once()
                mock_api.assert_called_once_with(mock_session.return_value)

    @pytest.mark.asyncio
    async def test_get_order_book_passes_level(self, client):
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_order_book') as mock_api:
                await client.get_order_book("BTC_EUR", OrderBookLevel.TWO)

                mock_api.assert_called_once_with(
                    mock_session.return_value, "BTC_EUR", OrderBookLevel.TWO
                )

    @pytest.mark.asyncio
    async def test_create_order(self, client, order_payload):
        order = CreateOrder(
            instrument_code=InstrumentCode.BTC_EUR,
            type=OrderType.LIMIT,
            side=OrderSide.BUY,
            amount=Decimal("0.5"),
            price=Decimal("30000.00"),
        )
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'create_order') as mock_api:
                await client.create_order(order)

                mock_api.assert_called_once_with(mock_session.return_value, order)

    @pytest.mark.asyncio
    async def test_get_trades_passes_cursor(self, client):
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_trades') as mock_api:
                await client.get_trades(max_page_size=10, cursor="next")

                kwargs = mock_api.call_args.kwargs
                assert kwargs["max_page_size"] == 10
                assert kwargs["cursor"] == "next"
                assert kwargs["from_time"] is None

    @pytest.mark.asyncio
    async def test_errors_propagate(self, client):
        """Test that API errors reach the caller unchanged."""
        error = ApiError(
            "API error 422: INSUFFICIENT_FUNDS",
            status_code=422,
            error_response=ErrorResponse("INSUFFICIENT_FUNDS"),
        )
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'cancel_order') as mock_api:
                mock_api.side_effect = error

                with pytest.raises(ApiError) as exc_info:
                    await client.cancel_order("abc")

                assert exc_info.value is error
                assert mock_api.call_count == 1


class TestInstrumentCache:
    """Test the instrument cache."""

    @pytest.mark.asyncio
    async def test_warmup_and_cached_lookup(self, client, instrument_payload):
        instrument = Instrument.from_dict(instrument_payload)
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_instruments') as mock_api:
                mock_api.return_value = [instrument]

                assert await client.warmup_cache() == 1
                assert await client.get_instrument("BTC_EUR") is instrument
                assert await client.get_instrument(InstrumentCode.BTC_EUR) is instrument
                mock_api.assert_called_once()

    @pytest.mark.asyncio
    async def test_miss_fetches_instruments(self, client, instrument_payload):
        instrument = Instrument.from_dict(instrument_payload)
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_instruments') as mock_api:
                mock_api.return_value = [instrument]

                assert await client.get_instrument("ETH_EUR") is None
                assert mock_api.call_count == 1


class TestLifecycle:
    """Test health check and closing."""

    @pytest.mark.asyncio
    async def test_health_check_success(self, client):
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_time'):
                assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self, client):
        with patch.object(client._session_manager, 'create_session') as mock_session:
            mock_session.return_value = AsyncMock()

            with patch.object(client._api_methods, 'get_time') as mock_api:
                mock_api.side_effect = TransportError("Connection refused")
                assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_closed_client_rejects_calls(self, client):
        await client.close()

        with pytest.raises(RuntimeError, match="Client is closed"):
            await client.get_time()

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, connection_config):
        client = BitpandaClient(connection_config)
        with patch.object(client._session_manager, 'close_session') as mock_close:
            async with client as entered:
                assert entered is client

        mock_close.assert_called_once()
        assert client._closed

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, client):
        with patch.object(client._session_manager, 'close_session') as mock_close:
            await client.close()
            await client.close()

        mock_close.assert_called_once()
