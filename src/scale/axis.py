"""
Axis Module

Base class turning a scale's ticks into grid lines, an axis line and tick
labels for one pane edge.

Key Features:
- Grid lines perpendicular to the axis
- Axis line on the configured pane edge
- Labels offset by tick length plus label gap, aligned by edge
- Labels outside the pane bounds and NaN tick positions are skipped
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Generic, List, Optional, Tuple, TypeVar

from src.core.geometry import AxisPosition, Bounds
from src.core.theme import Theme
from src.shapes.primitives import LineShape, Point, TextAlign, TextBaseline, TextShape

T = TypeVar('T')


@dataclass(frozen=True)
class AxisOptions:
    tick_length: float = 6.0
    tick_label_offset: float = 8.0
    show_grid: bool = True
    show_labels: bool = True

    def copy_with(self, **kwargs) -> "AxisOptions":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TickInfo(Generic[T]):
    value: T
    scaled_position: float
    label: Optional[str] = None


_ALIGNMENT = {
    AxisPosition.BOTTOM: (TextAlign.CENTER, TextBaseline.TOP),
    AxisPosition.TOP: (TextAlign.CENTER, TextBaseline.BOTTOM),
    AxisPosition.LEFT: (TextAlign.RIGHT, TextBaseline.MIDDLE),
    AxisPosition.RIGHT: (TextAlign.LEFT, TextBaseline.MIDDLE),
}


class Axis(ABC, Generic[T]):
    """
    Shape generator for one axis.

    Args:
        position: Pane edge the axis sits on
        theme: Theme supplying grid, tick and label colours
        options: Tick and visibility options
    """

    def __init__(self, position: AxisPosition, theme: Optional[Theme] = None,
                 options: Optional[AxisOptions] = None):
        self.position = position
        self.theme = theme or Theme.dark()
        self.options = options or AxisOptions()

    @abstractmethod
    def generate_ticks(self) -> List[TickInfo[T]]:
        """Ticks for the current scale state, in pixel order."""

    def update_theme(self, theme: Theme) -> None:
        self.theme = theme

    def update_options(self, **kwargs) -> None:
        self.options = self.options.copy_with(**kwargs)

    @property
    def is_horizontal(self) -> bool:
        return self.position.is_horizontal

    def _finite_ticks(self) -> List[TickInfo[T]]:
        return [t for t in self.generate_ticks() if math.isfinite(t.scaled_position)]

    def generate_grid_shapes(self, bounds: Bounds) -> List[LineShape]:
        if not self.options.show_grid:
            return []
        color = self.theme.colors.grid_color
        shapes = []
        for tick in self._finite_ticks():
            pos = tick.scaled_position
            if self.is_horizontal:
                shapes.append(LineShape(Point(pos, bounds.y), Point(pos, bounds.bottom), color, 1.0))
            else:
                shapes.append(LineShape(Point(bounds.x, pos), Point(bounds.right, pos), color, 1.0))
        return shapes

    def generate_axis_line_shape(self, bounds: Bounds) -> LineShape:
        color = self.theme.colors.tick_color
        if self.position == AxisPosition.BOTTOM:
            start, end = Point(bounds.x, bounds.bottom), Point(bounds.right, bounds.bottom)
        elif self.position == AxisPosition.TOP:
            start, end = Point(bounds.x, bounds.y), Point(bounds.right, bounds.y)
        elif self.position == AxisPosition.LEFT:
            start, end = Point(bounds.x, bounds.y), Point(bounds.x, bounds.bottom)
        else:
            start, end = Point(bounds.right, bounds.y), Point(bounds.right, bounds.bottom)
        return LineShape(start, end, color, 1.0)

    def generate_label_shapes(self, bounds: Bounds) -> List[TextShape]:
        if not self.options.show_labels:
            return []

        align, baseline = _ALIGNMENT[self.position]
        low, high = self._extent(bounds)
        colors = self.theme.colors
        typography = self.theme.typography
        shapes = []
        for tick in self._finite_ticks():
            if tick.label is None:
                continue
            if tick.scaled_position < low or tick.scaled_position > high:
                continue
            shapes.append(TextShape(
                position=self._label_position(tick.scaled_position, bounds),
                text=tick.label,
                color=colors.tick_label_color,
                font_size=typography.axis_font_size,
                font_family=typography.font_family,
                align=align,
                baseline=baseline,
            ))
        return shapes

    def _extent(self, bounds: Bounds) -> Tuple[float, float]:
        if self.is_horizontal:
            return bounds.x, bounds.right
        return bounds.y, bounds.bottom

    def _label_position(self, scaled_position: float, bounds: Bounds) -> Point:
        offset = self.options.tick_length + self.options.tick_label_offset
        if self.position == AxisPosition.BOTTOM:
            return Point(scaled_position, bounds.bottom + offset)
        if self.position == AxisPosition.TOP:
            return Point(scaled_position, bounds.y - offset)
        if self.position == AxisPosition.LEFT:
            return Point(bounds.x - offset, scaled_position)
        return Point(bounds.right + offset, scaled_position)
