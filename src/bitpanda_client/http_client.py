"""
HTTP client for Bitpanda API.

Executes requests, attaches the bearer token and maps failures onto three
error kinds: transport failures, API errors and decoding errors. Requests
are sent once; there is no retry or backoff.
"""

import asyncio
import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import aiohttp
from aiohttp import ClientResponse, ClientSession

from .models.config import ConnectionConfig
from .models.errors import ErrorResponse
from .utils import encode_query_params

logger = logging.getLogger(__name__)

JsonPayload = Union[Dict[str, Any], list, None]


class HttpClient:
    """HTTP client specialized for Bitpanda API interactions."""

    def __init__(self, config: ConnectionConfig):
        """Initialize HTTP client with configuration."""
        self._config = config

    async def request(
        self,
        session: ClientSession,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        authenticated: bool = False,
    ) -> JsonPayload:
        """Execute HTTP request and return the decoded JSON body."""
        url = f"{self._config.base_url}{endpoint}"
        headers = self._prepare_headers(authenticated)

        request_kwargs: Dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": headers,
        }
        if params:
            request_kwargs["params"] = encode_query_params(params)
        if json_body is not None:
            request_kwargs["json"] = json_body

        logger.debug(f"{method} {endpoint} params={request_kwargs.get('params')}")

        try:
            async with session.request(**request_kwargs) as response:
                body = await response.read()
                if response.status >= 400:
                    response_text = self._body_text(response, body, errors="replace")
                    raise self._api_error(response, response_text)
                return self._decode_body(response, body)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out: {method} {endpoint}", cause=e) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {method} {endpoint}: {e}", cause=e) from e

    def _prepare_headers(self, authenticated: bool) -> Dict[str, str]:
        """Prepare request headers."""
        headers = {"Accept": "application/json"}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"
        elif authenticated:
            logger.warning("Account endpoint called without an API token")
        return headers

    @staticmethod
    def _body_text(response: ClientResponse, body: bytes, errors: str = "strict") -> str:
        """Decode the raw body with the response charset, UTF-8 by default."""
        try:
            return body.decode(response.charset or "utf-8", errors=errors)
        except LookupError:
            return body.decode("utf-8", errors=errors)

    def _decode_body(self, response: ClientResponse, body: bytes) -> JsonPayload:
        """Decode a successful response body."""
        if not body:
            return None

        try:
            response_text = self._body_text(response, body)
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Undecodable response body (Status {response.status}): {e}",
                status_code=response.status,
            ) from e

        try:
            return json.loads(response_text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise DecodeError(
                f"Invalid JSON response (Status {response.status}): {response_text[:200]}",
                status_code=response.status,
            ) from e

    def _api_error(self, response: ClientResponse, response_text: str) -> "ApiError":
        """Build an ApiError from a non-2xx response."""
        try:
            response_data = json.loads(response_text) if response_text else None
        except json.JSONDecodeError:
            response_data = None

        if isinstance(response_data, dict) and "error" in response_data:
            error_response = ErrorResponse.from_dict(response_data, response)
        else:
            error_response = ErrorResponse(
                error=response_text[:200] or (response.reason or "") or f"HTTP {response.status}",
                response=response,
            )

        logger.warning(f"API error {response.status}: {error_response.error}")

        return ApiError(
            f"API error {response.status}: {error_response.error}",
            status_code=response.status,
            response_data=response_data,
            error_response=error_response,
        )


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: JsonPayload = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class TransportError(HttpClientError):
    """Connection refused, timeout or TLS failure before a response arrived."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ApiError(HttpClientError):
    """Non-2xx response carrying the exchange's ``error`` message."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_response: ErrorResponse,
        response_data: JsonPayload = None,
    ):
        super().__init__(message, status_code=status_code, response_data=response_data)
        self.error_response = error_response

    @property
    def error(self) -> str:
        return self.error_response.error

    @property
    def response(self) -> Optional[ClientResponse]:
        return self.error_response.response


class DecodeError(HttpClientError):
    """Response body is not JSON or does not match the expected shape."""
    pass
