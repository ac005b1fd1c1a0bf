"""
Common Scale Manager Module

Single owner of the time scale and price scale shared by every pane.

Key Features:
- Creates the ordinal time scale and the inverted price scale
- Visible-window queries (indices, right-edge check, candle count)
- Explicit mutation entry points so no pane holds a second owning reference
- Combined version tuple for render-cache keys
"""

import math
from typing import Sequence, Tuple

from .numeric_scale import NumericScale
from .ordinal_time_scale import OrdinalTimeScale

RIGHT_EDGE_TOLERANCE = 1e-6


class CommonScaleManager:
    """
    Owns the shared scales.

    Args:
        x_range: Horizontal pixel range of the plot area
        y_range: Vertical pixel range of the main pane
        price_tick_count: Tick count used for nice expansion of prices
    """

    def __init__(self,
                 x_range: Tuple[float, float],
                 y_range: Tuple[float, float],
                 price_tick_count: int = 8):
        self.time_scale = OrdinalTimeScale([], x_range[0], x_range[1])
        self.price_scale = NumericScale(0.0, 1.0, y_range[0], y_range[1],
                                        inverted=True, tick_count=price_tick_count)

    # Queries

    def get_visible_indices(self) -> Tuple[float, float]:
        return self.time_scale.start_index, self.time_scale.end_index

    def get_visible_range(self) -> float:
        """End index minus start index."""
        return self.time_scale.end_index - self.time_scale.start_index

    def get_domain_length(self) -> int:
        return len(self.time_scale)

    def get_box_width(self) -> float:
        return self.time_scale.box_width()

    def is_right_edge_visible(self) -> bool:
        """True when the newest candle is inside the visible window."""
        n = len(self.time_scale)
        end = self.time_scale.end_index
        if n == 0 or not math.isfinite(end):
            return True
        return end >= n - 1 - RIGHT_EDGE_TOLERANCE

    def versions(self) -> Tuple[int, int]:
        return self.time_scale.version, self.price_scale.version

    # Mutations

    def update_full_domain(self, timestamps: Sequence[int]) -> None:
        self.time_scale.update_full_domain(timestamps)

    def update_visible_indices(self, start_index: float, end_index: float) -> None:
        self.time_scale.update_visible_domain_indices(start_index, end_index)

    def shift_visible_indices(self, delta: float) -> None:
        start, end = self.get_visible_indices()
        self.time_scale.update_visible_domain_indices(start + delta, end + delta)

    def update_price_domain(self, price_min: float, price_max: float) -> None:
        self.price_scale.update_domain(price_min, price_max)

    def update_time_range(self, range_min: float, range_max: float) -> None:
        self.time_scale.update_range(range_min, range_max)

    def update_price_range(self, range_min: float, range_max: float) -> None:
        self.price_scale.update_range(range_min, range_max)
