"""
Relative Strength Index Module

Momentum oscillator on a fixed 0..100 scale, drawn in its own sub-pane.

RSI = 100 - 100 / (1 + avg_gain / avg_loss), averaged over the close-to-close
changes of the window. A window with no losses is exactly 100.
"""

from typing import List, Optional, Sequence

import numpy as np

from src.core.geometry import Bounds
from src.data.candle import OHLCCandle
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import PolylineShapeBatch
from src.shapes.primitives import Point

from .base import ComputedDataPoint
from .sma_study import closes_of
from .windowed_study import WindowedStudy


def rsi_from_closes(closes: np.ndarray) -> float:
    """RSI of a close series using the simple average of its changes."""
    changes = np.diff(closes)
    if changes.size == 0:
        return 100.0
    avg_gain = float(np.clip(changes, 0, None).sum()) / changes.size
    avg_loss = float(np.clip(-changes, 0, None).sum()) / changes.size
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


class RSIStudy(WindowedStudy[float, Point]):
    """
    RSI over `period` changes (a window of period + 1 candles).

    Args:
        period: Number of close-to-close changes averaged
        color: Line colour
    """

    def __init__(self, period: int = 14, color: str = '#9c27b0', line_width: float = 2.0):
        super().__init__('rsi', f"RSI({period})", period + 1, PolylineShapeBatch(color, line_width))
        self.period = period
        self.color = color
        self._y_scale = NumericScale(0.0, 100.0, 0.0, 100.0, inverted=True)

    def get_y_scale(self) -> NumericScale:
        return self._y_scale

    def update_scale_bounds(self, bounds: Bounds) -> None:
        self._y_scale.update_range(bounds.y, bounds.bottom)

    def calculate_value(self, window: Sequence[OHLCCandle], index: int) -> Optional[float]:
        if len(window) < self.window_size:
            return None
        return rsi_from_closes(closes_of(window))

    def compute_series(self, candles: Sequence[OHLCCandle]) -> List[Optional[float]]:
        if len(candles) < self.window_size:
            return []
        windows = np.lib.stride_tricks.sliding_window_view(closes_of(candles), self.window_size)
        return [rsi_from_closes(w) for w in windows]

    def value_to_point(self, data: ComputedDataPoint[float], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[Point]:
        return Point(scales.time_scale.scaled_value_from_index(data.index), y_scale.scaled_value(data.value))
