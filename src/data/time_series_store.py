"""
Time Series Store Module

Ordered, deduplicated candle storage with change classification.

Key Features:
- Strictly ascending, unique timestamps at all times
- Same-timestamp write on the last candle is an in-place update
- Bisect-based sorted insertion for out-of-order writes
- Bulk prepend of history and full reset
- Single change callback receiving the change kind
"""

import bisect
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional

from .candle import OHLCCandle

logger = logging.getLogger(__name__)


class ChangeType(Enum):
    """Kind of mutation the store just applied."""
    UPDATE = "update"
    APPEND = "append"
    PREPEND = "prepend"
    RESET = "reset"


ChangeCallback = Callable[[ChangeType], None]


class TimeSeriesStore:
    """
    Candle list kept in ascending timestamp order.

    get_all() and get_timestamps() return the live internal lists; callers
    must treat them as read-only for the duration of a change cycle.
    """

    def __init__(self, candles: Optional[Iterable[OHLCCandle]] = None):
        self._candles: List[OHLCCandle] = []
        self._timestamps: List[int] = []
        self._on_change: Optional[ChangeCallback] = None
        if candles:
            self._replace(self._dedupe_sorted(candles))

    def set_on_change(self, callback: Optional[ChangeCallback]) -> None:
        """Register the single change listener (replaces any previous one)."""
        self._on_change = callback

    def add(self, candle: OHLCCandle) -> ChangeType:
        """
        Write one candle.

        Args:
            candle: Candle to store

        Returns:
            UPDATE when the candle replaced the last entry, APPEND when it
            extended the series, RESET when it was written into the middle
            of the series (studies must then recompute from scratch).
        """
        if not self._candles:
            self._candles.append(candle)
            self._timestamps.append(candle.timestamp)
            change = ChangeType.APPEND
        elif candle.timestamp == self._timestamps[-1]:
            self._candles[-1] = candle
            change = ChangeType.UPDATE
        elif candle.timestamp > self._timestamps[-1]:
            self._candles.append(candle)
            self._timestamps.append(candle.timestamp)
            change = ChangeType.APPEND
        else:
            # Indices after pos shift, so incremental study state is stale: report RESET, not APPEND.
            pos = bisect.bisect_left(self._timestamps, candle.timestamp)
            if self._timestamps[pos] == candle.timestamp:
                self._candles[pos] = candle
            else:
                self._candles.insert(pos, candle)
                self._timestamps.insert(pos, candle.timestamp)
            logger.debug(f"Out-of-order candle written at index {pos}")
            change = ChangeType.RESET

        self._emit(change)
        return change

    def prepend(self, candles: Iterable[OHLCCandle]) -> int:
        """
        Merge older candles into the series.

        Existing candles win over incoming ones with the same timestamp.

        Returns:
            Number of candles actually added
        """
        incoming = [c for c in self._dedupe_sorted(candles)
                    if not self._contains(c.timestamp)]
        if not incoming:
            return 0

        merged = sorted(incoming + self._candles, key=lambda c: c.timestamp)
        self._replace(merged)
        self._emit(ChangeType.PREPEND)
        return len(incoming)

    def reset(self, candles: Iterable[OHLCCandle]) -> None:
        """Replace the whole series. Later duplicates win."""
        self._replace(self._dedupe_sorted(candles))
        self._emit(ChangeType.RESET)

    def get_all(self) -> List[OHLCCandle]:
        return self._candles

    def get_timestamps(self) -> List[int]:
        return self._timestamps

    def get(self, index: int) -> OHLCCandle:
        return self._candles[index]

    def last(self) -> Optional[OHLCCandle]:
        return self._candles[-1] if self._candles else None

    def index_of(self, timestamp: int) -> int:
        """Index of the candle with this timestamp, or -1."""
        pos = bisect.bisect_left(self._timestamps, timestamp)
        if pos < len(self._timestamps) and self._timestamps[pos] == timestamp:
            return pos
        return -1

    def __len__(self) -> int:
        return len(self._candles)

    def _contains(self, timestamp: int) -> bool:
        return self.index_of(timestamp) >= 0

    def _replace(self, candles: List[OHLCCandle]) -> None:
        # Mutate in place so references handed out by get_all() stay live
        self._candles[:] = candles
        self._timestamps[:] = [c.timestamp for c in candles]

    def _emit(self, change: ChangeType) -> None:
        if self._on_change is not None:
            self._on_change(change)

    @staticmethod
    def _dedupe_sorted(candles: Iterable[OHLCCandle]) -> List[OHLCCandle]:
        by_timestamp = {}
        for candle in candles:
            by_timestamp[candle.timestamp] = candle
        return [by_timestamp[ts] for ts in sorted(by_timestamp)]
