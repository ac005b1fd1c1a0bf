"""
Shape primitives in pixel space.

Axes and infrastructure studies emit these one-off shapes; bulk series go
through the batches in batches.py instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class TextAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextBaseline(Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class LineShape:
    """Straight segment. line_dash is an on/off pattern in pixels, None for solid."""
    start: Point
    end: Point
    color: str
    line_width: float = 1.0
    line_dash: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class TextShape:
    """Text anchored at `position` according to align and baseline."""
    position: Point
    text: str
    color: str
    font_size: float = 11.0
    font_family: str = 'DejaVu Sans'
    align: TextAlign = TextAlign.LEFT
    baseline: TextBaseline = TextBaseline.MIDDLE


@dataclass(frozen=True)
class BoxedTextShape(TextShape):
    """Text drawn over a filled rectangle (price tags)."""
    background_color: str = '#2962FF'
    padding: float = 3.0


Shape = Union[LineShape, TextShape, BoxedTextShape]
