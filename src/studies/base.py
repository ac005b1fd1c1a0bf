"""
Study Base Module

Common contract for every technical study plus the batch-render cache
shared by the instant and windowed strategies.

Key Features:
- Lifecycle hooks mirroring store changes (update, append, prepend, reset)
- Optional private Y scale for sub-pane studies
- Render cache keyed by small integers (data revision and scale versions)
- Visible-window point rebuild with a 2-candle buffer on either side
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, List, Optional, Sequence, Tuple, TypeVar

from src.core.geometry import Bounds
from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.scale.base import DomainRange, ScaleDomainUpdate
from src.scale.common_scale_manager import CommonScaleManager
from src.scale.numeric_scale import NumericScale
from src.shapes.batches import ShapeBatch

if TYPE_CHECKING:
    from src.shapes.compositor import Compositor

TValue = TypeVar('TValue')
TPoint = TypeVar('TPoint')

RENDER_BUFFER = 2

RenderKey = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ComputedDataPoint(Generic[TValue]):
    """
    One study output for one candle.

    Attributes:
        timestamp: Timestamp of the source candle
        value: Computed value
        index: Position of the source candle in the store
    """
    timestamp: int
    value: TValue
    index: int


class Study(ABC, Generic[TValue, TPoint]):
    """
    Pluggable indicator.

    Every lifecycle method receives the store's live candle list and returns
    a ScaleDomainUpdate when the study's output extended its value range.
    """

    def __init__(self, study_id: str, name: str, shape_batch: Optional[ShapeBatch] = None):
        self.id = study_id
        self.name = name
        self.enabled = True
        self.shape_batch = shape_batch
        self.computed_data: List[ComputedDataPoint[TValue]] = []
        self._revision = 0
        self._last_render_key: Optional[RenderKey] = None
        self._shared_y_scale: Optional[NumericScale] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, points={len(self.computed_data)})"

    # Lifecycle

    @abstractmethod
    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        """The last candle changed in place (realtime tick)."""

    @abstractmethod
    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        """A new candle was added at the end."""

    @abstractmethod
    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        """Older candles were merged in at the front."""

    @abstractmethod
    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        """The whole dataset was replaced."""

    def update_scales(self, time_changed: bool, price_changed: bool) -> None:
        """Drop the render cache after a scale change the versions cannot see."""
        if time_changed or price_changed:
            self._last_render_key = None

    def update_scale_bounds(self, bounds: Bounds) -> None:
        """Receive the pane's pixel bounds (studies with a private scale resize it)."""

    def update_theme(self, theme: Theme) -> None:
        """Pick up theme colours. Studies with fixed colours ignore this."""

    # Scales

    def get_y_scale(self) -> Optional[NumericScale]:
        """Private value scale, or None when the study draws on a shared scale."""
        return None

    def use_y_scale(self, scale: Optional[NumericScale]) -> None:
        """Draw on another study's scale (secondary studies in a sub-pane)."""
        self._shared_y_scale = scale
        self._last_render_key = None

    def resolve_y_scale(self, scales: CommonScaleManager) -> NumericScale:
        return self.get_y_scale() or self._shared_y_scale or scales.price_scale

    # Rendering

    def render_to(self, compositor: "Compositor", scales: CommonScaleManager, bounds: Bounds) -> None:
        """Rebuild the shape batch if the render key changed, then draw it."""
        if not self.enabled or self.shape_batch is None or not self.computed_data:
            return

        y_scale = self.resolve_y_scale(scales)
        key = (self._revision, scales.time_scale.version, y_scale.version, id(y_scale))
        if key != self._last_render_key:
            if not self._rebuild_batch(scales, y_scale):
                return
            self._last_render_key = key

        compositor.render(self.shape_batch)

    def render_infrastructure_to(self, compositor: "Compositor", scales: CommonScaleManager,
                                 bounds: Bounds) -> None:
        """Draw unclipped decorations (price tags over the axis area)."""

    @abstractmethod
    def value_to_point(self, data: ComputedDataPoint[TValue], scales: CommonScaleManager,
                       y_scale: NumericScale) -> Optional[TPoint]:
        """Pixel geometry for one computed value, or None to skip it."""

    def _rebuild_batch(self, scales: CommonScaleManager, y_scale: NumericScale) -> bool:
        start, end = scales.get_visible_indices()
        if not (math.isfinite(start) and math.isfinite(end)):
            return False

        first = self.computed_data[0].index
        last = self.computed_data[-1].index
        render_start = max(first, math.floor(start - RENDER_BUFFER))
        render_end = min(last, math.ceil(end + RENDER_BUFFER))

        points = []
        for index in range(render_start, render_end + 1):
            point = self.value_to_point(self.computed_data[index - first], scales, y_scale)
            if point is not None:
                points.append(point)
        self.shape_batch.reset(points)
        return True

    def _invalidate(self) -> None:
        self._revision += 1

    # Queries

    def get_computed_values(self) -> List[TValue]:
        return [point.value for point in self.computed_data]

    def value_at(self, index: int) -> Optional[TValue]:
        """Computed value for the candle at `index`, if any."""
        if not self.computed_data:
            return None
        offset = index - self.computed_data[0].index
        if 0 <= offset < len(self.computed_data):
            return self.computed_data[offset].value
        return None


def y_domain_update(y_min: float, y_max: float) -> Optional[ScaleDomainUpdate]:
    """ScaleDomainUpdate for a finite value range, else None."""
    if math.isfinite(y_min) and math.isfinite(y_max):
        return ScaleDomainUpdate(y_domain=DomainRange(y_min, y_max))
    return None
