"""
Session management for Bitpanda client.

One aiohttp session is shared by all requests of a client. aiohttp allows
concurrent requests on a session, but a session is bound to the event loop
it was created on, so a client reused from another loop (for example across
two ``asyncio.run`` calls) gets a fresh session.
"""

import asyncio
import logging
from typing import Dict, Optional

import aiohttp

from .constants import USER_AGENT
from .models.config import ConnectionConfig

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, reuses and closes the shared HTTP session."""

    def __init__(self, config: ConnectionConfig):
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        """Current session, or None if none is open."""
        return self._session

    def _default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    async def create_session(self) -> aiohttp.ClientSession:
        """Return the session for the running loop, creating it if needed."""
        loop = asyncio.get_running_loop()

        if self._session is not None and not self._session.closed:
            if self._loop is loop:
                return self._session
            # a session cannot be closed from a foreign loop
            logger.warning("Event loop changed, replacing HTTP session")

        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            headers=self._default_headers(),
        )
        self._loop = loop
        logger.debug(f"Created HTTP session for {self._config.base_url}")
        return self._session

    async def close_session(self) -> None:
        """Close the session if it belongs to the running loop, then forget it."""
        session, loop = self._session, self._loop
        self._session = None
        self._loop = None

        if session is None or session.closed:
            return
        if loop is asyncio.get_running_loop():
            await session.close()
            logger.debug("Closed HTTP session")
        else:
            logger.warning("HTTP session belongs to another event loop and was not closed")
