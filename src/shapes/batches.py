"""
Shape Batches Module

Pixel-space collections owned by a single study and handed to the
compositor as a unit.

Key Features:
- Common update / append / reset contract on every batch
- Candle geometry (body rectangle plus upper and lower wick segments)
- Volume-style bars
- Polylines with colour, width and dash pattern
- Band fills with upper / middle / lower traces
"""

from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Tuple, TypeVar

from .primitives import Point

TPoint = TypeVar('TPoint')


class ShapeBatch(Generic[TPoint]):
    """
    Ordered list of render points plus the style shared by all of them.

    Subclasses set `batch_type` so compositors can dispatch without
    isinstance checks.
    """

    batch_type = 'base'

    def __init__(self):
        self.points: List[TPoint] = []

    def update(self, point: TPoint) -> None:
        """Replace the last point (append when empty)."""
        if self.points:
            self.points[-1] = point
        else:
            self.points.append(point)

    def append(self, point: TPoint) -> None:
        self.points.append(point)

    def reset(self, points: Iterable[TPoint]) -> None:
        self.points = list(points)

    def clear(self) -> None:
        self.points = []

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)


@dataclass(frozen=True)
class WickSegment:
    """Vertical wick between two pixel y values (y1 above y2 on screen)."""
    y1: float
    y2: float


@dataclass(frozen=True)
class CandleBody:
    y: float
    height: float
    width: float


@dataclass(frozen=True)
class CandlePoint:
    """
    Geometry of one candle.

    Attributes:
        x: Horizontal centre of the candle
        upper_wick: From the high down to the top of the body
        lower_wick: From the bottom of the body down to the low
        body: Body rectangle (y is the top edge)
        is_positive: Close at or above open
    """
    x: float
    upper_wick: WickSegment
    lower_wick: WickSegment
    body: CandleBody
    is_positive: bool


class CandleShapeBatch(ShapeBatch[CandlePoint]):
    batch_type = 'candle'

    def __init__(self, positive_color: str = '#26A69A', negative_color: str = '#EF5350'):
        super().__init__()
        self.positive_color = positive_color
        self.negative_color = negative_color


@dataclass(frozen=True)
class BarPoint:
    """Filled rectangle whose top-left corner is (x, y)."""
    x: float
    y: float
    width: float
    height: float
    is_positive: bool


class BarShapeBatch(ShapeBatch[BarPoint]):
    batch_type = 'bar'

    def __init__(self, positive_color: str = '#26A69A', negative_color: str = '#EF5350',
                 opacity: float = 0.5):
        super().__init__()
        self.positive_color = positive_color
        self.negative_color = negative_color
        self.opacity = opacity


class PolylineShapeBatch(ShapeBatch[Point]):
    batch_type = 'polyline'

    def __init__(self, color: str, line_width: float = 1.5,
                 line_dash: Optional[Tuple[float, ...]] = None):
        super().__init__()
        self.color = color
        self.line_width = line_width
        self.line_dash = line_dash


@dataclass(frozen=True)
class BandPoint:
    """One x position with the three band traces."""
    x: float
    upper: float
    middle: float
    lower: float


class BandFillShapeBatch(ShapeBatch[BandPoint]):
    """Filled band between upper and lower traces with an optional middle line."""

    batch_type = 'bandfill'

    def __init__(self, color: str, fill_opacity: float = 0.1, border_width: float = 1.0,
                 show_borders: bool = True, middle_color: Optional[str] = None):
        super().__init__()
        self.color = color
        self.fill_opacity = fill_opacity
        self.border_width = border_width
        self.show_borders = show_borders
        self.middle_color = middle_color or color

    @property
    def upper_points(self) -> List[Point]:
        return [Point(p.x, p.upper) for p in self.points]

    @property
    def middle_points(self) -> List[Point]:
        return [Point(p.x, p.middle) for p in self.points]

    @property
    def lower_points(self) -> List[Point]:
        return [Point(p.x, p.lower) for p in self.points]
