"""
Data source contract consumed by the chart.

The chart awaits load_historical() for the initial dataset and again when
the user pans close to the oldest loaded candle. Realtime candles are pushed
through the callback registered with on_realtime_update(); starting and
stopping the feed is the host's business.
"""

from abc import ABC, abstractmethod
from typing import Callable

from .candle import HistoricalBatch, OHLCCandle

RealtimeCallback = Callable[[OHLCCandle], None]


class DataManager(ABC):
    """Abstract candle source injected into Chart."""

    @abstractmethod
    async def load_historical(self) -> HistoricalBatch:
        """
        Load the next batch of history.

        The first call returns the most recent history; every later call
        returns the batch immediately older than everything returned so far.

        Returns:
            HistoricalBatch with candles oldest first
        """

    @abstractmethod
    def on_realtime_update(self, callback: RealtimeCallback) -> None:
        """Register the sink for realtime candles (replaces any previous one)."""
