"""
Compositor contract.

The engine never rasterizes anything itself. Every frame is expressed as
calls on a Compositor injected into the chart; implementations decide how
batches and shapes become pixels.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from src.core.geometry import Bounds

from .batches import ShapeBatch
from .primitives import Shape


class Compositor(ABC):
    """Rendering backend consumed by MultiPaneRenderer and the studies."""

    @abstractmethod
    def setup_high_dpi(self, width: float, height: float) -> None:
        """Size the drawing surface in logical pixels."""

    @abstractmethod
    def clear(self) -> None:
        """Erase the whole surface."""

    @abstractmethod
    def render(self, batch: ShapeBatch) -> None:
        """Draw one shape batch."""

    @abstractmethod
    def render_shapes(self, shapes: Sequence[Shape]) -> None:
        """Draw loose primitives (grid lines, labels, tags)."""

    @abstractmethod
    def set_clip_region(self, bounds: Bounds) -> None:
        """Restrict subsequent drawing to `bounds`."""

    @abstractmethod
    def clear_clip_region(self) -> None:
        """Remove the active clip region."""

    @abstractmethod
    def draw_border(self, bounds: Bounds) -> None:
        """Stroke a rectangle around `bounds`."""

    def update_theme(self, theme) -> None:
        """Pick up a new theme (background colour). Optional for backends."""
