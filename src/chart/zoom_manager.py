"""
Zoom Manager Module

Right-anchored zoom and bounded pan over the shared time scale's visible
window.

Key Features:
- Zoom keeps the newest visible candle fixed and changes how many are shown
- Visible range bounded by min/max visible candles
- Pan clamps at both ends of the dataset without changing the visible span
- Capability queries for enabling navigation controls
- Optional change callback fired only when the window actually moved
"""

import logging
from typing import Callable, Optional, Tuple

from src.core.config import ZoomConfig
from src.scale.common_scale_manager import CommonScaleManager

logger = logging.getLogger(__name__)

ZoomChangeCallback = Callable[[float, float], None]


class ZoomManager:
    """
    Navigation over the visible index window.

    The visible range is end_index - start_index; min/max limits apply to
    that range.
    """

    def __init__(self, scales: CommonScaleManager, config: Optional[ZoomConfig] = None,
                 on_change: Optional[ZoomChangeCallback] = None):
        self.scales = scales
        self.config = config or ZoomConfig()
        self.on_change = on_change

    @property
    def min_visible_candles(self) -> float:
        return self.config.min_visible_candles

    @property
    def max_visible_candles(self) -> float:
        return self.config.max_visible_candles

    def _apply(self, start: float, end: float) -> bool:
        old_start, old_end = self.scales.get_visible_indices()
        if start == old_start and end == old_end:
            return False
        self.scales.update_visible_indices(start, end)
        logger.debug(f"Visible window [{old_start:.2f}, {old_end:.2f}] -> [{start:.2f}, {end:.2f}]")
        if self.on_change is not None:
            self.on_change(start, end)
        return True

    def zoom_in(self, factor: Optional[float] = None) -> bool:
        """Show fewer candles, keeping end_index fixed. Returns True if the window changed."""
        factor = factor or self.config.zoom_factor
        if self.scales.get_domain_length() == 0:
            return False
        start, end = self.scales.get_visible_indices()
        visible_range = end - start
        new_range = min(visible_range, max(self.min_visible_candles, visible_range / factor))
        return self._apply(max(0.0, end - new_range), end)

    def zoom_out(self, factor: Optional[float] = None) -> bool:
        """Show more candles, keeping end_index fixed. Returns True if the window changed."""
        factor = factor or self.config.zoom_factor
        if self.scales.get_domain_length() == 0:
            return False
        start, end = self.scales.get_visible_indices()
        visible_range = end - start
        new_range = min(self.max_visible_candles, visible_range * factor)
        return self._apply(max(0.0, end - new_range), end)

    def pan(self, delta_candles: float) -> bool:
        """
        Shift the window by `delta_candles` (negative moves back in time).

        At either end of the dataset the window is clamped with its span
        preserved.

        Returns:
            True if the window moved
        """
        n = self.scales.get_domain_length()
        if n == 0 or delta_candles == 0:
            return False
        start, end = self.scales.get_visible_indices()
        visible_range = end - start
        new_start, new_end = start + delta_candles, end + delta_candles

        if new_start < 0:
            new_start, new_end = 0.0, visible_range
        if new_end > n - 1:
            new_end = float(n - 1)
            new_start = max(0.0, new_end - visible_range)
        return self._apply(new_start, new_end)

    def reset_zoom(self) -> bool:
        """Show the whole dataset."""
        n = self.scales.get_domain_length()
        if n == 0:
            return False
        return self._apply(0.0, float(n - 1))

    def get_zoom_level(self) -> float:
        """Visible candles as a percentage of all candles."""
        n = self.scales.get_domain_length()
        if n == 0:
            return 100.0
        start, end = self.scales.get_visible_indices()
        return (end - start + 1) / n * 100

    def can_zoom_in(self) -> bool:
        return self.scales.get_domain_length() > 0 and self.scales.get_visible_range() > self.min_visible_candles

    def can_zoom_out(self) -> bool:
        start, _ = self.scales.get_visible_indices()
        return (self.scales.get_domain_length() > 0
                and self.scales.get_visible_range() < self.max_visible_candles
                and start > 0)

    def can_pan_left(self) -> bool:
        start, _ = self.scales.get_visible_indices()
        return self.scales.get_domain_length() > 0 and start > 0

    def can_pan_right(self) -> bool:
        _, end = self.scales.get_visible_indices()
        n = self.scales.get_domain_length()
        return n > 0 and end < n - 1

    def get_visible_indices(self) -> Tuple[float, float]:
        return self.scales.get_visible_indices()
