"""
Exponential moving average of closes.

The first value is seeded with the SMA of the first window; each later value
is (close - previous EMA) * 2 / (period + 1) + previous EMA. The previous EMA
is read from the computed series, so repeated realtime updates of the last
candle always start from the settled value of the candle before it.
"""

from typing import List, Optional, Sequence, Tuple

from src.data.candle import OHLCCandle
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import PolylineShapeBatch
from src.shapes.primitives import Point

from .base import ComputedDataPoint
from .sma_study import closes_of
from .windowed_study import WindowedStudy


class EMAStudy(WindowedStudy[float, Point]):

    def __init__(self, period: int = 12, color: str = '#ff6b6b', line_width: float = 1.5):
        super().__init__('ema', f"EMA({period})", period, PolylineShapeBatch(color, line_width))
        self.color = color
        self.multiplier = 2.0 / (period + 1)

    @property
    def period(self) -> int:
        return self.window_size

    def calculate_value(self, window: Sequence[OHLCCandle], index: int) -> Optional[float]:
        if len(window) < self.window_size:
            return None
        previous = self.value_at(index - 1)
        if previous is None:
            return float(closes_of(window).mean())
        return (window[-1].close - previous) * self.multiplier + previous

    def compute_series(self, candles: Sequence[OHLCCandle]) -> List[Optional[float]]:
        if len(candles) < self.window_size:
            return []
        closes = closes_of(candles)
        ema = float(closes[:self.window_size].mean())
        values = [ema]
        for close in closes[self.window_size:]:
            ema = (float(close) - ema) * self.multiplier + ema
            values.append(ema)
        return values

    def extract_price_bounds(self, value: float) -> Optional[Tuple[float, float]]:
        return value, value

    def value_to_point(self, data: ComputedDataPoint[float], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[Point]:
        return Point(scales.time_scale.scaled_value_from_index(data.index), y_scale.scaled_value(data.value))
