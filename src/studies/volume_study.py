"""
Volume Study Module

Volume bars on a private 0..max(volume) scale, normally placed in its own
sub-pane. Never reports bounds to the shared price scale.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.geometry import Bounds
from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import BarPoint, BarShapeBatch

from .base import ComputedDataPoint
from .instant_study import InstantStudy, PriceBounds

BAR_WIDTH_RATIO = 0.7


@dataclass(frozen=True)
class VolumeData:
    volume: float
    is_positive: bool


class VolumeStudy(InstantStudy[VolumeData, BarPoint]):
    """Volume histogram with its own inverted scale."""

    def __init__(self, theme: Optional[Theme] = None):
        colors = (theme or Theme.dark()).colors
        super().__init__('volume', 'Volume',
                         BarShapeBatch(colors.candle_positive, colors.candle_negative))
        self._y_scale = NumericScale(0.0, 1.0, 0.0, 100.0, inverted=True)
        self.max_volume = 0.0

    def get_y_scale(self) -> NumericScale:
        return self._y_scale

    def update_scale_bounds(self, bounds: Bounds) -> None:
        self._y_scale.update_range(bounds.y, bounds.bottom)

    def update_theme(self, theme: Theme) -> None:
        self.shape_batch.positive_color = theme.colors.candle_positive
        self.shape_batch.negative_color = theme.colors.candle_negative

    def calculate_value(self, candle: OHLCCandle) -> VolumeData:
        return VolumeData(candle.volume, candle.close >= candle.open)

    def extract_price_bounds(self, value: VolumeData) -> Optional[PriceBounds]:
        return None

    def _refresh_volume_domain(self) -> None:
        self.max_volume = max((p.value.volume for p in self.computed_data), default=0.0)
        self._y_scale.update_domain(0.0, self.max_volume if self.max_volume > 0 else 1.0)

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        previous = self.computed_data[-1].value.volume if self.computed_data else None
        super().update_last_candle(candles)
        if self.computed_data and previous is not None:
            latest = self.computed_data[-1].value.volume
            if latest > self.max_volume:
                self.max_volume = latest
                self._y_scale.update_domain(0.0, latest)
            elif latest < previous == self.max_volume:
                # the peak itself shrank
                self._refresh_volume_domain()
        return None

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        super().append_new_candle(candles)
        if self.computed_data and self.computed_data[-1].value.volume > self.max_volume:
            self.max_volume = self.computed_data[-1].value.volume
            self._y_scale.update_domain(0.0, self.max_volume)
        return None

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        super().prepend_historical_candles(candles)
        return None

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        super().reset_candles(candles)
        self._refresh_volume_domain()
        return None

    def value_to_point(self, data: ComputedDataPoint[VolumeData], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[BarPoint]:
        time_scale = scales.time_scale
        width = time_scale.box_width() * BAR_WIDTH_RATIO
        center = time_scale.scaled_value_from_index(data.index)
        y0 = y_scale.scaled_value(0.0)
        y1 = y_scale.scaled_value(data.value.volume)
        return BarPoint(
            x=center - width / 2,
            y=min(y0, y1),
            width=width,
            height=abs(y1 - y0),
            is_positive=data.value.is_positive,
        )
