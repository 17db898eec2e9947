"""
Configuration models for Bitpanda client.

Immutable configuration structures validated on construction.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from ..utils import validate_url


@dataclass(frozen=True)
class ConnectionConfig:
    """Configuration for Bitpanda client connection.

    ``api_token`` is only needed for account endpoints; public market data
    works without it.
    """
    api_token: Optional[str] = field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_api_token()
        self._validate_base_url()
        self._validate_timeout()

    @property
    def authenticated(self) -> bool:
        return self.api_token is not None

    def _validate_api_token(self):
        """Validate API token format."""
        if self.api_token is None:
            return

        if not self.api_token.strip():
            raise ValueError("API token cannot be blank")

        if any(char.isspace() for char in self.api_token):
            raise ValueError("API token must not contain whitespace")

    def _validate_base_url(self):
        if not validate_url(self.base_url):
            raise ValueError("Base URL must be a valid HTTP/HTTPS URL")
        # endpoints start with "/"
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def _validate_timeout(self):
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
