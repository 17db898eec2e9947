"""
Error payload model for Bitpanda client.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from aiohttp import ClientResponse


@dataclass(frozen=True)
class ErrorResponse:
    """Structured error body returned with a non-2xx status.

    ``response`` is the originating HTTP response; it is not part of the
    wire format.
    """
    error: str
    response: Optional[ClientResponse] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        response: Optional[ClientResponse] = None,
    ) -> "ErrorResponse":
        return cls(error=str(data["error"]), response=response)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}
