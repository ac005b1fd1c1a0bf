"""
Ordinal Time Scale Module

Maps candle timestamps to x pixels by position in the series rather than
by elapsed time, so closed sessions and weekends take no horizontal space.

Key Features:
- Fractional visible window [start_index, end_index] for smooth zoom and pan
- Binary search restricted to the visible window plus a 2-candle buffer
- O(1) index-to-pixel fast path for render loops
- Pixel inversion rounded and clamped to a real candle
- NaN results for empty or degenerate windows instead of exceptions
"""

import bisect
import math
from typing import List, Optional, Sequence

from src.core.errors import EmptyDomainError

from .base import Scale

SEARCH_BUFFER = 2


class OrdinalTimeScale(Scale):
    """
    Index-based time scale.

    Args:
        full_domain: Ascending candle timestamps (epoch ms)
        range_min: Left pixel of the plot area
        range_max: Right pixel of the plot area
        start_index: First visible index (may be fractional)
        end_index: Last visible index (defaults to the last candle)
    """

    def __init__(self,
                 full_domain: Sequence[int],
                 range_min: float,
                 range_max: float,
                 start_index: float = 0.0,
                 end_index: Optional[float] = None):
        super().__init__(range_min, range_max)
        self._domain: List[int] = list(full_domain)
        self._start_index = float(start_index)
        self._end_index = float(end_index) if end_index is not None else float(len(self._domain) - 1)
        self._step = 0.0
        self._recompute_step()

    # Geometry

    def _recompute_step(self) -> None:
        visible_count = self._end_index - self._start_index + 1
        self._step = (self._range_max - self._range_min) / max(1.0, visible_count)

    def _on_range_changed(self) -> None:
        self._recompute_step()

    def box_width(self) -> float:
        """Horizontal pixels allotted to one candle."""
        return self._step

    @property
    def start_index(self) -> float:
        return self._start_index

    @property
    def end_index(self) -> float:
        return self._end_index

    def visible_count(self) -> float:
        return self._end_index - self._start_index + 1

    def __len__(self) -> int:
        return len(self._domain)

    # Mapping

    def scaled_value(self, timestamp: float) -> float:
        """
        Pixel x of the candle centre for `timestamp`.

        Timestamps missing from the series snap to the nearest candle inside
        the searched window (ties go to the earlier candle).

        Returns:
            Pixel x, or NaN when the domain is empty or the window is degenerate
        """
        n = len(self._domain)
        if n == 0 or not (math.isfinite(self._start_index) and math.isfinite(self._end_index)):
            return float('nan')

        lo = max(0, math.floor(self._start_index - SEARCH_BUFFER))
        hi = min(n - 1, math.ceil(self._end_index + SEARCH_BUFFER))
        if lo > hi:
            return float('nan')

        pos = bisect.bisect_left(self._domain, timestamp, lo, hi + 1)
        if pos <= hi and self._domain[pos] == timestamp:
            index = pos
        elif pos <= lo:
            index = lo
        elif pos > hi:
            index = hi
        else:
            before, after = self._domain[pos - 1], self._domain[pos]
            index = pos - 1 if timestamp - before <= after - timestamp else pos

        return self.scaled_value_from_index(index)

    def scaled_value_from_index(self, index: float) -> float:
        """Pixel x of the candle centre at `index` without searching."""
        return self._range_min + self._step / 2 + (index - self._start_index) * self._step

    def invert_to_index(self, pixel: float) -> int:
        """
        Nearest candle index under a pixel.

        Raises:
            EmptyDomainError: The scale has no timestamps
        """
        n = len(self._domain)
        if n == 0:
            raise EmptyDomainError("Cannot invert a pixel on an empty time scale")
        relative = (pixel - self._range_min - self._step / 2) / self._step if self._step else 0.0
        index = math.floor(relative + self._start_index + 0.5)
        return min(max(index, 0), n - 1)

    def invert(self, pixel: float) -> int:
        """
        Timestamp of the candle under a pixel.

        Raises:
            EmptyDomainError: The scale has no timestamps
        """
        return self._domain[self.invert_to_index(pixel)]

    # Window and domain mutation

    def update_visible_domain_indices(self, start_index: float, end_index: float) -> None:
        """Set the visible window, clamped to the domain (fractions allowed)."""
        n = len(self._domain)
        self._start_index = max(0.0, float(start_index))
        self._end_index = min(float(n - 1), float(end_index))
        self._recompute_step()
        self._touch()

    def update_full_domain(self, timestamps: Sequence[int]) -> None:
        """Replace the timestamp list in place and clamp the window end."""
        self._domain[:] = timestamps
        self._end_index = min(self._end_index, float(len(self._domain) - 1))
        self._recompute_step()
        self._touch()

    def get_full_domain(self) -> List[int]:
        return self._domain

    def get_visible_domain(self) -> List[int]:
        """Timestamps of every candle at least partly inside the window."""
        if not (math.isfinite(self._start_index) and math.isfinite(self._end_index)):
            return []
        start = max(0, math.floor(self._start_index))
        end = min(len(self._domain) - 1, math.ceil(self._end_index))
        if end < start:
            return []
        return self._domain[start:end + 1]

    def is_index_visible(self, index: float) -> bool:
        return self._start_index <= index <= self._end_index
