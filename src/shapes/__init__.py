"""Pixel-space shapes, shape batches and the Compositor interface."""

from .primitives import (
    BoxedTextShape,
    LineShape,
    Point,
    Shape,
    TextAlign,
    TextBaseline,
    TextShape,
)
from .batches import (
    BandFillShapeBatch,
    BandPoint,
    BarPoint,
    BarShapeBatch,
    CandleBody,
    CandlePoint,
    CandleShapeBatch,
    PolylineShapeBatch,
    ShapeBatch,
    WickSegment,
)
from .compositor import Compositor

__all__ = [
    "BoxedTextShape",
    "LineShape",
    "Point",
    "Shape",
    "TextAlign",
    "TextBaseline",
    "TextShape",
    "BandFillShapeBatch",
    "BandPoint",
    "BarPoint",
    "BarShapeBatch",
    "CandleBody",
    "CandlePoint",
    "CandleShapeBatch",
    "PolylineShapeBatch",
    "ShapeBatch",
    "WickSegment",
    "Compositor",
]
