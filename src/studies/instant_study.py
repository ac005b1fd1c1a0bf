"""
Instant Study Module

Strategy base for studies that derive exactly one value from each candle
(candles, volume bars).

Key Features:
- O(1) update and append of the last value
- Incremental value-domain tracking with a full rescan only when an old
  extreme is replaced
- Prepend and reset recompute the full series
"""

import math
from abc import abstractmethod
from typing import Optional, Sequence, Tuple

from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate

from .base import ComputedDataPoint, Study, TPoint, TValue, y_domain_update

PriceBounds = Tuple[float, float]


class InstantStudy(Study[TValue, TPoint]):
    """Per-candle study with incremental value-domain tracking."""

    def __init__(self, study_id: str, name: str, shape_batch):
        super().__init__(study_id, name, shape_batch)
        self.y_min = math.inf
        self.y_max = -math.inf

    @abstractmethod
    def calculate_value(self, candle: OHLCCandle) -> TValue:
        """Value for a single candle."""

    @abstractmethod
    def extract_price_bounds(self, value: TValue) -> Optional[PriceBounds]:
        """(low, high) this value occupies on the shared price scale, or None."""

    def y_domain(self) -> Optional[ScaleDomainUpdate]:
        return y_domain_update(self.y_min, self.y_max)

    def update_price_domain(self, new_bounds: Optional[PriceBounds],
                            old_bounds: Optional[PriceBounds] = None) -> bool:
        """
        Fold a new value's bounds into the tracked domain.

        Args:
            new_bounds: Bounds of the value just written
            old_bounds: Bounds of the value it replaced, if any

        Returns:
            True when the tracked domain changed
        """
        previous = (self.y_min, self.y_max)
        if old_bounds is not None and (old_bounds[0] <= self.y_min or old_bounds[1] >= self.y_max):
            self.recompute_price_domain()
            return (self.y_min, self.y_max) != previous

        if new_bounds is not None:
            self.y_min = min(self.y_min, new_bounds[0])
            self.y_max = max(self.y_max, new_bounds[1])
        return (self.y_min, self.y_max) != previous

    def recompute_price_domain(self) -> None:
        self.y_min, self.y_max = math.inf, -math.inf
        for point in self.computed_data:
            bounds = self.extract_price_bounds(point.value)
            if bounds is not None:
                self.y_min = min(self.y_min, bounds[0])
                self.y_max = max(self.y_max, bounds[1])

    def _write_last(self, candles: Sequence[OHLCCandle]) -> bool:
        """Update or append the value for the newest candle; True if the domain moved."""
        candle = candles[-1]
        index = len(candles) - 1
        value = self.calculate_value(candle)
        point = ComputedDataPoint(candle.timestamp, value, index)
        self._invalidate()

        if self.computed_data and self.computed_data[-1].timestamp == candle.timestamp:
            old_bounds = self.extract_price_bounds(self.computed_data[-1].value)
            self.computed_data[-1] = point
            return self.update_price_domain(self.extract_price_bounds(value), old_bounds)

        self.computed_data.append(point)
        return self.update_price_domain(self.extract_price_bounds(value))

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        if not candles:
            return None
        if not self.computed_data:
            return self.reset_candles(candles)
        return self.y_domain() if self._write_last(candles) else None

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        if not candles:
            return None
        if len(self.computed_data) != len(candles) - 1:
            # out of step with the store (missed event or mid-series write)
            return self.reset_candles(candles)
        return self.y_domain() if self._write_last(candles) else None

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return self.reset_candles(candles)

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        self.computed_data = [
            ComputedDataPoint(candle.timestamp, self.calculate_value(candle), i)
            for i, candle in enumerate(candles)
        ]
        self.recompute_price_domain()
        self._invalidate()
        if self.shape_batch is not None:
            self.shape_batch.clear()
        return self.y_domain()
