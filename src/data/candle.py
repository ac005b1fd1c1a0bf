"""
Candle data types.

OHLCCandle is the single immutable record that flows from a data source
into the TimeSeriesStore. Timestamps are UTC epoch milliseconds so that
ordering, bisection and bucketing stay integer arithmetic.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class OHLCCandle:
    """
    One time-bucketed price summary.

    Attributes:
        timestamp: Bucket start as UTC epoch milliseconds
        open: First traded price in the bucket
        high: Highest traded price
        low: Lowest traded price
        close: Last traded price
        volume: Traded volume (0 when the source has none)
        open_interest: Optional open interest for derivatives
    """
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    open_interest: Optional[float] = None

    @property
    def is_positive(self) -> bool:
        """Close at or above open."""
        return self.close >= self.open

    @property
    def datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000.0, tz=timezone.utc)


@dataclass
class HistoricalBatch:
    """Result of one historical load: candles oldest first plus a continuation flag."""
    candles: List[OHLCCandle]
    has_more: bool


class CandleDuration(Enum):
    """Supported candle bucket sizes."""
    ONE_SECOND = "1s"
    FIVE_SECONDS = "5s"
    THIRTY_SECONDS = "30s"
    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1d"
    ONE_WEEK = "1w"
    ONE_MONTH = "1M"

    @property
    def milliseconds(self) -> int:
        return _DURATION_MS[self]

    def bucket_start(self, timestamp_ms: int) -> int:
        """Align a timestamp to the start of its bucket."""
        duration = self.milliseconds
        return (timestamp_ms // duration) * duration


_SECOND = 1000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

_DURATION_MS = {
    CandleDuration.ONE_SECOND: _SECOND,
    CandleDuration.FIVE_SECONDS: 5 * _SECOND,
    CandleDuration.THIRTY_SECONDS: 30 * _SECOND,
    CandleDuration.ONE_MINUTE: _MINUTE,
    CandleDuration.FIVE_MINUTES: 5 * _MINUTE,
    CandleDuration.FIFTEEN_MINUTES: 15 * _MINUTE,
    CandleDuration.THIRTY_MINUTES: 30 * _MINUTE,
    CandleDuration.ONE_HOUR: _HOUR,
    CandleDuration.FOUR_HOURS: 4 * _HOUR,
    CandleDuration.ONE_DAY: _DAY,
    CandleDuration.ONE_WEEK: 7 * _DAY,
    CandleDuration.ONE_MONTH: 30 * _DAY,  # approximate
}
