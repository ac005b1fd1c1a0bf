"""
Candle Study Module

The main pane's mandatory study: one candlestick per candle on the shared
price scale.

Key Features:
- (low, high) price bounds per candle
- Body width at 70% of the candle slot
- Wicks split above and below the body
- Theme-driven positive and negative colours
"""

from dataclasses import dataclass
from typing import Optional

from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import CandleBody, CandlePoint, CandleShapeBatch, WickSegment

from .base import ComputedDataPoint
from .instant_study import InstantStudy, PriceBounds

BODY_WIDTH_RATIO = 0.7
MIN_BODY_HEIGHT = 1.0


@dataclass(frozen=True)
class CandleData:
    open: float
    high: float
    low: float
    close: float


class CandleStudy(InstantStudy[CandleData, CandlePoint]):
    """Candlestick renderer for the main pane."""

    def __init__(self, theme: Optional[Theme] = None):
        colors = (theme or Theme.dark()).colors
        super().__init__('candle', 'Candles',
                         CandleShapeBatch(colors.candle_positive, colors.candle_negative))

    def update_theme(self, theme: Theme) -> None:
        self.shape_batch.positive_color = theme.colors.candle_positive
        self.shape_batch.negative_color = theme.colors.candle_negative

    def calculate_value(self, candle: OHLCCandle) -> CandleData:
        return CandleData(candle.open, candle.high, candle.low, candle.close)

    def extract_price_bounds(self, value: CandleData) -> Optional[PriceBounds]:
        return value.low, value.high

    def value_to_point(self, data: ComputedDataPoint[CandleData], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[CandlePoint]:
        time_scale = scales.time_scale
        value = data.value
        x = time_scale.scaled_value_from_index(data.index)
        width = time_scale.box_width() * BODY_WIDTH_RATIO

        y_open = y_scale.scaled_value(value.open)
        y_close = y_scale.scaled_value(value.close)
        y_high = y_scale.scaled_value(value.high)
        y_low = y_scale.scaled_value(value.low)

        body_top = min(y_open, y_close)
        body_bottom = max(y_open, y_close)
        return CandlePoint(
            x=x,
            upper_wick=WickSegment(y_high, body_top),
            lower_wick=WickSegment(body_bottom, y_low),
            body=CandleBody(body_top, max(MIN_BODY_HEIGHT, body_bottom - body_top), width),
            is_positive=value.close >= value.open,
        )
