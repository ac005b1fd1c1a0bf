"""
DataManager serving candles from a CSV file.

The whole file is loaded once with pandas; history is then handed to the
chart newest batch first, mirroring how a paginated market-data API
behaves. Realtime updates can be replayed with push().
"""

import logging
from typing import List, Optional

from .candle import HistoricalBatch, OHLCCandle
from .data_manager import DataManager, RealtimeCallback
from .ohlc_loader import dataframe_to_candles, load_ohlc

logger = logging.getLogger(__name__)


class CsvDataManager(DataManager):
    """
    Paginated history over a CSV candle file.

    Args:
        filepath: CSV path understood by load_ohlc()
        batch_size: Candles per load_historical() call
        initial_count: Size of the first batch (defaults to batch_size)
    """

    def __init__(self, filepath: str, batch_size: int = 500, initial_count: Optional[int] = None):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.filepath = filepath
        self.batch_size = batch_size
        self.initial_count = initial_count or batch_size
        self._candles: Optional[List[OHLCCandle]] = None
        self._served_from: Optional[int] = None
        self._callback: Optional[RealtimeCallback] = None

    def _ensure_loaded(self) -> List[OHLCCandle]:
        if self._candles is None:
            self._candles = dataframe_to_candles(load_ohlc(self.filepath))
            self._served_from = len(self._candles)
        return self._candles

    async def load_historical(self) -> HistoricalBatch:
        candles = self._ensure_loaded()
        size = self.initial_count if self._served_from == len(candles) else self.batch_size
        end = self._served_from
        start = max(0, end - size)
        self._served_from = start
        batch = candles[start:end]
        logger.debug(f"Serving candles [{start}, {end}) from {self.filepath}")
        return HistoricalBatch(candles=batch, has_more=start > 0)

    def on_realtime_update(self, callback: RealtimeCallback) -> None:
        self._callback = callback

    def push(self, candle: OHLCCandle) -> None:
        """Forward a candle to the chart as if it arrived from a live feed."""
        if self._callback is not None:
            self._callback(candle)
