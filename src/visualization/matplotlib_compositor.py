"""
Matplotlib Compositor Module

Reference rendering backend drawing chart frames onto a matplotlib figure
whose data coordinates are screen pixels (origin top-left, y down).

Key Features:
- Off-screen Agg canvas, no pyplot state
- Candles as wick LineCollections plus body PolyCollections
- Volume bars, indicator polylines and filled bands
- Grid, axis and label primitives including boxed price tags
- Clip regions applied as clip rectangles on every artist
- save() to PNG/SVG/PDF by file extension
"""

import logging
from typing import List, Optional, Sequence

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle

from src.core.geometry import Bounds
from src.core.theme import Theme
from src.shapes.batches import (
    BandFillShapeBatch,
    BarShapeBatch,
    CandleShapeBatch,
    PolylineShapeBatch,
    ShapeBatch,
)
from src.shapes.compositor import Compositor
from src.shapes.primitives import BoxedTextShape, LineShape, Shape, TextBaseline, TextShape

logger = logging.getLogger(__name__)

_VERTICAL_ALIGNMENT = {
    TextBaseline.TOP: 'top',
    TextBaseline.MIDDLE: 'center',
    TextBaseline.BOTTOM: 'bottom',
}


class MatplotlibCompositor(Compositor):
    """
    Compositor backed by a matplotlib Figure.

    Args:
        dpi: Figure resolution; one logical pixel maps to one device pixel
        theme: Theme used for the background and border colours
    """

    def __init__(self, dpi: int = 100, theme: Optional[Theme] = None):
        self.dpi = dpi
        self.theme = theme or Theme.dark()
        self.width = 0.0
        self.height = 0.0
        self.figure: Optional[Figure] = None
        self.ax = None
        self._clip: Optional[Rectangle] = None
        self.batches_rendered = 0
        self.shapes_rendered = 0

    # Setup

    def setup_high_dpi(self, width: float, height: float) -> None:
        self.width, self.height = float(width), float(height)
        self.figure = Figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        FigureCanvasAgg(self.figure)
        self.ax = self.figure.add_axes((0, 0, 1, 1))
        self.clear()
        logger.debug(f"Matplotlib surface {width:.0f}x{height:.0f} @ {self.dpi} dpi")

    def update_theme(self, theme: Theme) -> None:
        self.theme = theme

    def _require_surface(self) -> None:
        if self.ax is None:
            raise RuntimeError("setup_high_dpi() must be called before drawing")

    def _pt(self, pixels: float) -> float:
        """Logical pixels to points (matplotlib sizes line widths and fonts in points)."""
        return pixels * 72.0 / self.dpi

    def _clipped(self, artist):
        if self._clip is not None:
            artist.set_clip_path(self._clip)
        return artist

    def clear(self) -> None:
        self._require_surface()
        ax = self.ax
        ax.clear()
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.set_axis_off()
        self.figure.set_facecolor(self.theme.colors.background)
        ax.set_facecolor(self.theme.colors.background)
        self._clip = None

    # Clip regions

    def set_clip_region(self, bounds: Bounds) -> None:
        self._require_surface()
        self._clip = Rectangle((bounds.x, bounds.y), bounds.width, bounds.height,
                               transform=self.ax.transData, fill=False, visible=False)

    def clear_clip_region(self) -> None:
        self._clip = None

    def draw_border(self, bounds: Bounds) -> None:
        self._require_surface()
        self.ax.add_patch(Rectangle((bounds.x, bounds.y), bounds.width, bounds.height,
                                    fill=False, edgecolor=self.theme.colors.border_color,
                                    linewidth=self._pt(1.0)))

    # Batches

    def render(self, batch: ShapeBatch) -> None:
        self._require_surface()
        if len(batch) == 0:
            return
        if isinstance(batch, CandleShapeBatch):
            self._render_candles(batch)
        elif isinstance(batch, BarShapeBatch):
            self._render_bars(batch)
        elif isinstance(batch, BandFillShapeBatch):
            self._render_band(batch)
        elif isinstance(batch, PolylineShapeBatch):
            self._render_polyline(batch)
        else:
            raise TypeError(f"Unsupported batch type: {batch.batch_type}")
        self.batches_rendered += 1

    def _render_candles(self, batch: CandleShapeBatch) -> None:
        wicks, wick_colors, bodies, body_colors = [], [], [], []
        for p in batch:
            color = batch.positive_color if p.is_positive else batch.negative_color
            wicks.append([(p.x, p.upper_wick.y1), (p.x, p.upper_wick.y2)])
            wicks.append([(p.x, p.lower_wick.y1), (p.x, p.lower_wick.y2)])
            wick_colors.extend([color, color])
            left = p.x - p.body.width / 2
            right = p.x + p.body.width / 2
            top, bottom = p.body.y, p.body.y + p.body.height
            bodies.append([(left, top), (right, top), (right, bottom), (left, bottom)])
            body_colors.append(color)

        self.ax.add_collection(self._clipped(
            LineCollection(wicks, colors=wick_colors, linewidths=self._pt(1.0))))
        self.ax.add_collection(self._clipped(
            PolyCollection(bodies, facecolors=body_colors, edgecolors=body_colors,
                           linewidths=0)))

    def _render_bars(self, batch: BarShapeBatch) -> None:
        rects = []
        colors = []
        for p in batch:
            rects.append([(p.x, p.y), (p.x + p.width, p.y),
                          (p.x + p.width, p.y + p.height), (p.x, p.y + p.height)])
            colors.append(batch.positive_color if p.is_positive else batch.negative_color)
        self.ax.add_collection(self._clipped(
            PolyCollection(rects, facecolors=colors, linewidths=0, alpha=batch.opacity)))

    def _render_polyline(self, batch: PolylineShapeBatch) -> None:
        line = Line2D([p.x for p in batch], [p.y for p in batch],
                      color=batch.color, linewidth=self._pt(batch.line_width))
        if batch.line_dash:
            line.set_dashes([self._pt(d) for d in batch.line_dash])
        self.ax.add_line(self._clipped(line))

    def _render_band(self, batch: BandFillShapeBatch) -> None:
        xs = [p.x for p in batch]
        fill = self.ax.fill_between(xs, [p.upper for p in batch], [p.lower for p in batch],
                                    color=batch.color, alpha=batch.fill_opacity, linewidth=0)
        self._clipped(fill)
        traces = [(batch.middle_points, batch.middle_color)]
        if batch.show_borders:
            traces += [(batch.upper_points, batch.color), (batch.lower_points, batch.color)]
        for points, color in traces:
            line = Line2D([p.x for p in points], [p.y for p in points],
                          color=color, linewidth=self._pt(batch.border_width))
            self.ax.add_line(self._clipped(line))

    # Loose shapes

    def render_shapes(self, shapes: Sequence[Shape]) -> None:
        self._require_surface()
        for shape in shapes:
            if isinstance(shape, LineShape):
                self._draw_line(shape)
            elif isinstance(shape, TextShape):
                self._draw_text(shape)
            else:
                raise TypeError(f"Unsupported shape: {type(shape).__name__}")
            self.shapes_rendered += 1

    def _draw_line(self, shape: LineShape) -> None:
        line = Line2D([shape.start.x, shape.end.x], [shape.start.y, shape.end.y],
                      color=shape.color, linewidth=self._pt(shape.line_width))
        if shape.line_dash:
            line.set_dashes([self._pt(d) for d in shape.line_dash])
        self.ax.add_line(self._clipped(line))

    def _draw_text(self, shape: TextShape) -> None:
        kwargs = dict(
            color=shape.color,
            fontsize=self._pt(shape.font_size),
            family=shape.font_family,
            ha=shape.align.value,
            va=_VERTICAL_ALIGNMENT[shape.baseline],
            clip_on=self._clip is not None,
        )
        if isinstance(shape, BoxedTextShape):
            kwargs['bbox'] = dict(boxstyle='square', facecolor=shape.background_color,
                                  edgecolor='none', pad=shape.padding / shape.font_size)
        text = self.ax.text(shape.position.x, shape.position.y, shape.text, **kwargs)
        self._clipped(text)

    # Output

    def artists(self) -> List:
        """Every artist currently on the surface."""
        self._require_surface()
        return list(self.ax.get_children())

    def save(self, path: str) -> None:
        """Write the current frame to `path` (format from the extension)."""
        self._require_surface()
        self.figure.savefig(path, dpi=self.dpi, facecolor=self.figure.get_facecolor())
        logger.info(f"Chart saved to {path}")
