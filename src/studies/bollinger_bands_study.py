"""
Bollinger Bands Module

SMA middle band with upper and lower bands at `multiplier` population
standard deviations of the window closes, rendered as a filled band.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.data.candle import OHLCCandle
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import BandFillShapeBatch, BandPoint

from .base import ComputedDataPoint
from .sma_study import closes_of
from .windowed_study import WindowedStudy


@dataclass(frozen=True)
class BollingerBandsValue:
    upper: float
    middle: float
    lower: float


class BollingerBandsStudy(WindowedStudy[BollingerBandsValue, BandPoint]):

    def __init__(self, period: int = 20, multiplier: float = 2.0, color: str = '#2196f3',
                 fill_opacity: float = 0.1, show_borders: bool = True):
        super().__init__('bollinger', f"BB({period}, {multiplier:g})", period,
                         BandFillShapeBatch(color, fill_opacity=fill_opacity, border_width=1.0,
                                            show_borders=show_borders))
        self.multiplier = multiplier
        self.color = color

    @property
    def period(self) -> int:
        return self.window_size

    def _band(self, middle: float, stddev: float) -> BollingerBandsValue:
        offset = self.multiplier * stddev
        return BollingerBandsValue(middle + offset, middle, middle - offset)

    def calculate_value(self, window: Sequence[OHLCCandle], index: int) -> Optional[BollingerBandsValue]:
        if len(window) < self.window_size:
            return None
        closes = closes_of(window)
        return self._band(float(closes.mean()), float(closes.std()))

    def compute_series(self, candles: Sequence[OHLCCandle]) -> List[Optional[BollingerBandsValue]]:
        if len(candles) < self.window_size:
            return []
        windows = np.lib.stride_tricks.sliding_window_view(closes_of(candles), self.window_size)
        means = windows.mean(axis=1)
        stds = windows.std(axis=1)
        return [self._band(float(m), float(s)) for m, s in zip(means, stds)]

    def extract_price_bounds(self, value: BollingerBandsValue) -> Optional[Tuple[float, float]]:
        return value.lower, value.upper

    def value_to_point(self, data: ComputedDataPoint[BollingerBandsValue], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[BandPoint]:
        value = data.value
        return BandPoint(
            x=scales.time_scale.scaled_value_from_index(data.index),
            upper=y_scale.scaled_value(value.upper),
            middle=y_scale.scaled_value(value.middle),
            lower=y_scale.scaled_value(value.lower),
        )
