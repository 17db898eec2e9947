"""
Sequence checking for Bitpanda records.

Balances, orders and trades carry a sequence number that increases per
account/instrument stream. The tracker reports gaps and reordering to the
consumer; it never drops or reorders records itself.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .models.account import Balance
from .models.orders import Order, Trade

logger = logging.getLogger(__name__)


class SequenceStatus(Enum):
    """Outcome of observing one sequence number."""
    FIRST = "first"
    IN_ORDER = "in_order"
    GAP = "gap"
    DUPLICATE = "duplicate"
    OUT_OF_ORDER = "out_of_order"


@dataclass(frozen=True)
class SequenceCheck:
    """Result of a single observation.

    Attributes:
        stream: Stream key the sequence belongs to
        status: Classification of the received sequence
        expected: Next sequence the stream expected (None on first sight)
        received: Sequence that was observed
    """
    stream: str
    status: SequenceStatus
    expected: Optional[int]
    received: int

    @property
    def missed(self) -> int:
        """Number of sequence numbers skipped by a gap."""
        if self.status is not SequenceStatus.GAP or self.expected is None:
            return 0
        return self.received - self.expected

    @property
    def ok(self) -> bool:
        return self.status in (SequenceStatus.FIRST, SequenceStatus.IN_ORDER)


class SequenceTracker:
    """Tracks the last sequence seen per stream."""

    def __init__(self):
        self._last: Dict[str, int] = {}

    def observe(self, stream: str, sequence: int) -> SequenceCheck:
        """Record ``sequence`` for ``stream`` and classify it."""
        last = self._last.get(stream)

        if last is None:
            self._last[stream] = sequence
            return SequenceCheck(stream, SequenceStatus.FIRST, None, sequence)

        expected = last + 1
        if sequence == expected:
            status = SequenceStatus.IN_ORDER
        elif sequence > expected:
            status = SequenceStatus.GAP
            logger.warning(
                f"Sequence gap on {stream}: expected {expected}, got {sequence}"
            )
        elif sequence == last:
            status = SequenceStatus.DUPLICATE
        else:
            status = SequenceStatus.OUT_OF_ORDER
            logger.warning(
                f"Out-of-order sequence on {stream}: {sequence} after {last}"
            )

        # stale records never move the stream backwards
        if sequence > last:
            self._last[stream] = sequence

        return SequenceCheck(stream, status, expected, sequence)

    def observe_balance(self, balance: Balance) -> SequenceCheck:
        # one counter per account, shared by all currencies
        stream = f"balance:{balance.account_id}"
        return self.observe(stream, balance.sequence)

    def observe_order(self, order: Order) -> Optional[SequenceCheck]:
        if order.sequence is None:
            return None
        stream = f"order:{order.account_id}:{order.instrument_code.value}"
        return self.observe(stream, order.sequence)

    def observe_trade(self, trade: Trade) -> Optional[SequenceCheck]:
        if trade.sequence is None:
            return None
        stream = f"trade:{trade.account_id}:{trade.instrument_code.value}"
        return self.observe(stream, trade.sequence)

    def last(self, stream: str) -> Optional[int]:
        """Highest sequence seen on ``stream``."""
        return self._last.get(stream)

    def reset(self, stream: Optional[str] = None) -> None:
        """Forget one stream, or all streams."""
        if stream is None:
            self._last.clear()
        else:
            self._last.pop(stream, None)
