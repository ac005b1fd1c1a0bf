"""
Chart Geometry Module

Pixel-space value types used by layout, scales and axes.

Key Features:
- Chart size and padding with the default 60px gutter on every side
- Rectangular bounds with edge helpers
- Axis placement enum
- Plot-area range helpers derived from size and padding
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class AxisPosition(Enum):
    """Edge of a pane an axis is attached to."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def is_horizontal(self) -> bool:
        return self in (AxisPosition.TOP, AxisPosition.BOTTOM)


@dataclass(frozen=True)
class ChartSize:
    """Total drawable surface in logical pixels."""
    width: float
    height: float


@dataclass(frozen=True)
class ChartPadding:
    """Gutter between the surface edge and the chart area (axis labels live here)."""
    top: float = 60.0
    right: float = 60.0
    bottom: float = 60.0
    left: float = 60.0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in pixel space (y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Check whether a pixel lies inside the rectangle (edges inclusive)."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    @classmethod
    def empty(cls) -> "Bounds":
        return cls(0.0, 0.0, 0.0, 0.0)


def calc_x_range(size: ChartSize, padding: ChartPadding) -> Tuple[float, float]:
    """Horizontal pixel range of the chart area."""
    return padding.left, size.width - padding.right


def calc_y_range(size: ChartSize, padding: ChartPadding) -> Tuple[float, float]:
    """Vertical pixel range of the chart area."""
    return padding.top, size.height - padding.bottom
