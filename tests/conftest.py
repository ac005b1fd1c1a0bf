"""
Shared test fixtures and helpers for chart engine tests.
"""

from typing import List, Optional, Sequence

import pytest

from src.core.geometry import Bounds
from src.data.candle import OHLCCandle
from src.shapes.batches import ShapeBatch
from src.shapes.compositor import Compositor
from src.shapes.primitives import Shape

BASE_TIMESTAMP = 1_700_000_000_000
MINUTE_MS = 60_000


def make_candle(
    index: int,
    close: float,
    open_: Optional[float] = None,
    high: Optional[float] = None,
    low: Optional[float] = None,
    volume: float = 1000.0,
    timestamp: Optional[int] = None,
) -> OHLCCandle:
    """Helper to create OHLCCandle objects for testing.

    Args:
        index: Position in the series (drives the default timestamp)
        close: Closing price
        open_: Opening price (defaults to close)
        high: High price (defaults to max(open, close) + 1)
        low: Low price (defaults to min(open, close) - 1)
        volume: Traded volume
        timestamp: Epoch ms (defaults to BASE_TIMESTAMP + index minutes)

    Returns:
        OHLCCandle for use in store, scale and study tests
    """
    open_ = close if open_ is None else open_
    return OHLCCandle(
        timestamp=BASE_TIMESTAMP + index * MINUTE_MS if timestamp is None else timestamp,
        open=open_,
        high=max(open_, close) + 1 if high is None else high,
        low=min(open_, close) - 1 if low is None else low,
        close=close,
        volume=volume,
    )


def make_candles(closes: Sequence[float], start_index: int = 0) -> List[OHLCCandle]:
    """One candle per close, one minute apart."""
    return [make_candle(start_index + i, c) for i, c in enumerate(closes)]


class RecordingCompositor(Compositor):
    """Compositor that records every call as (name, payload) tuples."""

    def __init__(self):
        self.calls = []

    def setup_high_dpi(self, width: float, height: float) -> None:
        self.calls.append(('setup_high_dpi', (width, height)))

    def clear(self) -> None:
        self.calls.append(('clear', None))

    def render(self, batch: ShapeBatch) -> None:
        self.calls.append(('render', batch))

    def render_shapes(self, shapes: Sequence[Shape]) -> None:
        self.calls.append(('render_shapes', list(shapes)))

    def set_clip_region(self, bounds: Bounds) -> None:
        self.calls.append(('set_clip_region', bounds))

    def clear_clip_region(self) -> None:
        self.calls.append(('clear_clip_region', None))

    def draw_border(self, bounds: Bounds) -> None:
        self.calls.append(('draw_border', bounds))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def rendered_batches(self) -> List[ShapeBatch]:
        return [payload for name, payload in self.calls if name == 'render']

    def reset(self) -> None:
        self.calls.clear()


@pytest.fixture
def compositor():
    return RecordingCompositor()


@pytest.fixture
def candles():
    """60 one-minute candles trending up with a dip in the middle."""
    closes = [100 + i * 0.5 - (5 if 25 <= i < 35 else 0) for i in range(60)]
    return make_candles(closes)
