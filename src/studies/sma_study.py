"""Simple moving average of closes."""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.data.candle import OHLCCandle
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import PolylineShapeBatch
from src.shapes.primitives import Point

from .base import ComputedDataPoint
from .windowed_study import WindowedStudy


def closes_of(candles: Sequence[OHLCCandle]) -> np.ndarray:
    return np.fromiter((c.close for c in candles), dtype=np.float64, count=len(candles))


class SMAStudy(WindowedStudy[float, Point]):
    """Arithmetic mean of the last `period` closes."""

    def __init__(self, period: int = 20, color: str = '#4285f4', line_width: float = 1.5):
        super().__init__('sma', f"SMA({period})", period, PolylineShapeBatch(color, line_width))
        self.color = color

    @property
    def period(self) -> int:
        return self.window_size

    def calculate_value(self, window: Sequence[OHLCCandle], index: int) -> Optional[float]:
        if len(window) < self.window_size:
            return None
        return float(closes_of(window).mean())

    def compute_series(self, candles: Sequence[OHLCCandle]) -> List[Optional[float]]:
        if len(candles) < self.window_size:
            return []
        windows = np.lib.stride_tricks.sliding_window_view(closes_of(candles), self.window_size)
        return [float(v) for v in windows.mean(axis=1)]

    def extract_price_bounds(self, value: float) -> Optional[Tuple[float, float]]:
        return value, value

    def value_to_point(self, data: ComputedDataPoint[float], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[Point]:
        return Point(scales.time_scale.scaled_value_from_index(data.index), y_scale.scaled_value(data.value))
