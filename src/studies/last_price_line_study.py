"""
Last Price Line Study Module

Dotted horizontal line at the latest close plus a boxed price tag drawn
over the price axis.

Key Features:
- Tracks the newest close on every lifecycle event
- Never affects the shared price domain
- Line is clipped to the pane; tag is drawn in the unclipped infrastructure layer
- Hidden when the price is outside the visible price domain (edges inclusive)
"""

import math
from typing import Optional, Sequence, Tuple

from src.core.geometry import Bounds
from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.primitives import BoxedTextShape, LineShape, Point, TextAlign, TextBaseline

from .base import ComputedDataPoint, Study

LINE_DASH = (5.0, 5.0)
LABEL_GAP = 2.0


class LastPriceLineStudy(Study[float, None]):
    """Marker for the most recent close."""

    def __init__(self, color: str = '#2962FF', decimals: int = 1,
                 text_color: str = '#FFFFFF', font_size: float = 11.0):
        super().__init__('lastPriceLine', 'Last Price')
        self.color = color
        self.decimals = decimals
        self.text_color = text_color
        self.font_size = font_size
        self.last_price: Optional[float] = None
        self._cached_line: Optional[LineShape] = None
        self._cached_label: Optional[BoxedTextShape] = None
        self._cache_key: Optional[Tuple] = None

    def _track(self, candles: Sequence[OHLCCandle]) -> None:
        self.last_price = candles[-1].close if candles else None

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        self._track(candles)
        return None

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        self._track(candles)
        return None

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        self._track(candles)
        return None

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        self._track(candles)
        return None

    def update_scales(self, time_changed: bool, price_changed: bool) -> None:
        if time_changed or price_changed:
            self._cache_key = None

    def value_to_point(self, data: ComputedDataPoint[float], scales: CommonScaleManager,
                       y_scale: NumericScale) -> None:
        return None

    def is_price_visible(self, y_scale: NumericScale) -> bool:
        if self.last_price is None:
            return False
        domain = y_scale.get_domain()
        return not (self.last_price < domain.min or self.last_price > domain.max)

    def _refresh_shapes(self, y_scale: NumericScale, bounds: Bounds) -> None:
        key = (self.last_price, bounds, y_scale.version, id(y_scale))
        if key == self._cache_key:
            return
        y = y_scale.scaled_value(self.last_price)
        if not math.isfinite(y):
            self._cached_line = self._cached_label = None
        else:
            self._cached_line = LineShape(Point(bounds.x, y), Point(bounds.right, y),
                                          self.color, 1.0, LINE_DASH)
            self._cached_label = BoxedTextShape(
                position=Point(bounds.right + LABEL_GAP, y),
                text=f"{self.last_price:.{self.decimals}f}",
                color=self.text_color,
                font_size=self.font_size,
                align=TextAlign.LEFT,
                baseline=TextBaseline.MIDDLE,
                background_color=self.color,
                padding=3.0,
            )
        self._cache_key = key

    def render_to(self, compositor, scales: CommonScaleManager, bounds: Bounds) -> None:
        y_scale = self.resolve_y_scale(scales)
        if not self.enabled or not self.is_price_visible(y_scale):
            return
        self._refresh_shapes(y_scale, bounds)
        if self._cached_line is not None:
            compositor.render_shapes([self._cached_line])

    def render_infrastructure_to(self, compositor, scales: CommonScaleManager, bounds: Bounds) -> None:
        y_scale = self.resolve_y_scale(scales)
        if not self.enabled or not self.is_price_visible(y_scale):
            return
        self._refresh_shapes(y_scale, bounds)
        if self._cached_label is not None:
            compositor.render_shapes([self._cached_label])
