"""
Windowed Study Module

Strategy base for studies whose value depends on the trailing
`window_size` candles (moving averages, oscillators, bands).

Key Features:
- Update and append compute one value from the trailing window
- Fewer candles than the window yields no value, not an error
- Prepend and reset recompute the whole series because window
  partitioning shifts
- Optional vectorized full recompute hook for numpy implementations
"""

import math
from abc import abstractmethod
from typing import List, Optional, Sequence, Tuple

from src.core.errors import StudyConfigError
from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate

from .base import ComputedDataPoint, Study, TPoint, TValue, y_domain_update


class WindowedStudy(Study[TValue, TPoint]):
    """
    Trailing-window study.

    Args:
        study_id: Stable identifier
        name: Display name
        window_size: Candles needed for one value
        shape_batch: Batch the study renders into
    """

    def __init__(self, study_id: str, name: str, window_size: int, shape_batch):
        if window_size < 1:
            raise StudyConfigError(f"{study_id}: window size must be at least 1, got {window_size}")
        super().__init__(study_id, name, shape_batch)
        self.window_size = window_size
        self.y_min = math.inf
        self.y_max = -math.inf

    @abstractmethod
    def calculate_value(self, window: Sequence[OHLCCandle], index: int) -> Optional[TValue]:
        """
        Value for the candle at `index` given its trailing window.

        Args:
            window: The last `window_size` candles ending at `index`
            index: Store index of the newest candle in the window
        """

    def extract_price_bounds(self, value: TValue) -> Optional[Tuple[float, float]]:
        """(low, high) on the shared price scale; None for studies on a private scale."""
        return None

    def compute_series(self, candles: Sequence[OHLCCandle]) -> List[Optional[TValue]]:
        """
        Values for indices window_size-1 .. n-1 in one pass.

        The default walks the windows one by one; subclasses override this
        with vectorized math when it is available.
        """
        return [
            self.calculate_value(candles[i - self.window_size + 1:i + 1], i)
            for i in range(self.window_size - 1, len(candles))
        ]

    def y_domain(self) -> Optional[ScaleDomainUpdate]:
        return y_domain_update(self.y_min, self.y_max)

    def _recompute_domain(self) -> None:
        self.y_min, self.y_max = math.inf, -math.inf
        for point in self.computed_data:
            bounds = self.extract_price_bounds(point.value)
            if bounds is not None:
                self.y_min = min(self.y_min, bounds[0])
                self.y_max = max(self.y_max, bounds[1])

    def _write_last(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        n = len(candles)
        if n < self.window_size:
            return None

        index = n - 1
        candle = candles[index]
        replacing = bool(self.computed_data) and self.computed_data[-1].timestamp == candle.timestamp
        if not replacing and (self.computed_data[-1].index != index - 1 if self.computed_data
                              else n > self.window_size):
            # a gap between the series and the store: rebuild
            return self.reset_candles(candles)

        if replacing:
            # calculate_value may read the previous point, so drop the stale one first
            old = self.computed_data.pop()
        else:
            old = None
        value = self.calculate_value(candles[n - self.window_size:], index)
        self._invalidate()
        if value is None:
            return None
        self.computed_data.append(ComputedDataPoint(candle.timestamp, value, index))

        previous = (self.y_min, self.y_max)
        old_bounds = self.extract_price_bounds(old.value) if old is not None else None
        if old_bounds is not None and (old_bounds[0] <= self.y_min or old_bounds[1] >= self.y_max):
            self._recompute_domain()
        else:
            bounds = self.extract_price_bounds(value)
            if bounds is not None:
                self.y_min = min(self.y_min, bounds[0])
                self.y_max = max(self.y_max, bounds[1])
        return self.y_domain() if (self.y_min, self.y_max) != previous else None

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return self._write_last(candles)

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return self._write_last(candles)

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return self.reset_candles(candles)

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        offset = self.window_size - 1
        self.computed_data = [
            ComputedDataPoint(candles[offset + j].timestamp, value, offset + j)
            for j, value in enumerate(self.compute_series(candles))
            if value is not None
        ]
        self._recompute_domain()
        self._invalidate()
        if self.shape_batch is not None:
            self.shape_batch.clear()
        return self.y_domain()
