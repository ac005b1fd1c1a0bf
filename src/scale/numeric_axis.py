"""Value axis over a NumericScale with compact K/M/B labels."""

from typing import List, Optional

from src.core.geometry import AxisPosition
from src.core.theme import Theme

from .axis import Axis, AxisOptions, TickInfo
from .numeric_scale import NumericScale


def format_tick_label(value: float) -> str:
    """
    Compact price label.

    >>> format_tick_label(1_250_000)
    '1.2M'
    >>> format_tick_label(0.01234)
    '0.0123'
    """
    abs_value = abs(value)
    if abs_value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B"
    if abs_value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if abs_value >= 1_000:
        return f"{value / 1_000:.1f}K"
    if abs_value >= 100:
        return f"{round(value)}"
    if abs_value < 1 and value != 0:
        return f"{value:.4f}"
    return f"{value:.2f}"


class NumericAxis(Axis[float]):
    """Axis with ticks at the scale's nice tick spacing."""

    def __init__(self,
                 scale: NumericScale,
                 position: AxisPosition = AxisPosition.RIGHT,
                 tick_count: int = 8,
                 theme: Optional[Theme] = None,
                 options: Optional[AxisOptions] = None):
        super().__init__(position, theme, options)
        self.scale = scale
        self.tick_count = tick_count
        if scale.tick_count != tick_count:
            scale.set_tick_count(tick_count)

    def generate_ticks(self) -> List[TickInfo[float]]:
        return [
            TickInfo(value, self.scale.scaled_value(value), format_tick_label(value))
            for value in self.scale.get_ticks()
        ]
