"""
Numeric Scale Module

Linear value-to-pixel mapping used for prices and indicator values.

Key Features:
- Optional inversion (screen y grows downward)
- Nice-number domain expansion ({1, 2, 5, 10} x 10^k tick spacing)
- In-place domain and range updates that bump the scale version
- Tick value generation for axes
"""

import math
from typing import List, NamedTuple

from .base import Scale

MAX_TICKS = 1000


class NumericDomain(NamedTuple):
    """Current domain after nice expansion."""
    min: float
    max: float
    tick_spacing: float


def nice_num(value_range: float, round_result: bool) -> float:
    """
    Pick a "nice" number close to `value_range`.

    Args:
        value_range: Raw span to approximate
        round_result: Round to the nearest nice value instead of taking the ceiling

    Returns:
        A value from {1, 2, 5, 10} x 10^k (1.0 for non-positive or NaN input)
    """
    if not value_range > 0 or not math.isfinite(value_range):
        return 1.0

    exponent = math.floor(math.log10(value_range))
    fraction = value_range / 10 ** exponent

    if round_result:
        if fraction < 1.5:
            nice_fraction = 1
        elif fraction < 3:
            nice_fraction = 2
        elif fraction < 7:
            nice_fraction = 5
        else:
            nice_fraction = 10
    else:
        if fraction <= 1:
            nice_fraction = 1
        elif fraction <= 2:
            nice_fraction = 2
        elif fraction <= 5:
            nice_fraction = 5
        else:
            nice_fraction = 10

    return nice_fraction * 10 ** exponent


class NumericScale(Scale):
    """
    Linear scale over a nice-expanded numeric domain.

    Args:
        domain_min: Lowest value to show
        domain_max: Highest value to show
        range_min: Pixel for the low end (top end when inverted)
        range_max: Pixel for the high end (bottom end when inverted)
        inverted: Map higher values to smaller pixels
        tick_count: Desired number of ticks for nice expansion
        nice: Expand the domain to tick multiples
    """

    def __init__(self,
                 domain_min: float,
                 domain_max: float,
                 range_min: float,
                 range_max: float,
                 inverted: bool = False,
                 tick_count: int = 10,
                 nice: bool = True):
        super().__init__(range_min, range_max)
        self.inverted = inverted
        self.tick_count = max(2, tick_count)
        self.nice = nice
        self._domain_min = float(domain_min)
        self._domain_max = float(domain_max)
        self._tick_spacing = float('nan')
        self._apply_domain(domain_min, domain_max)

    def _apply_domain(self, domain_min: float, domain_max: float) -> None:
        if not (math.isfinite(domain_min) and math.isfinite(domain_max)):
            self._domain_min, self._domain_max = float(domain_min), float(domain_max)
            self._tick_spacing = float('nan')
            return
        if domain_min > domain_max:
            domain_min, domain_max = domain_max, domain_min
        if self.nice:
            self._scale_nice(domain_min, domain_max)
        else:
            self._domain_min, self._domain_max = float(domain_min), float(domain_max)
            self._tick_spacing = nice_num(
                nice_num(domain_max - domain_min, False) / (self.tick_count - 1), True)

    def _scale_nice(self, domain_min: float, domain_max: float) -> None:
        value_range = nice_num(domain_max - domain_min, False)
        spacing = nice_num(value_range / (self.tick_count - 1), True)
        nice_min = math.floor(domain_min / spacing) * spacing
        nice_max = math.ceil(domain_max / spacing) * spacing
        if nice_min == nice_max:
            # flat series: open one tick either side so the line sits mid-pane
            nice_min -= spacing
            nice_max += spacing
        self._domain_min = nice_min
        self._domain_max = nice_max
        self._tick_spacing = spacing

    def update_domain(self, domain_min: float, domain_max: float) -> None:
        self._apply_domain(domain_min, domain_max)
        self._touch()

    def set_inverted(self, inverted: bool) -> None:
        if inverted != self.inverted:
            self.inverted = inverted
            self._touch()

    def get_domain(self) -> NumericDomain:
        return NumericDomain(self._domain_min, self._domain_max, self._tick_spacing)

    def scaled_value(self, value: float) -> float:
        span = self._domain_max - self._domain_min
        if span == 0:
            return self._range_min
        ratio = (value - self._domain_min) / span
        pixel_span = self._range_max - self._range_min
        if self.inverted:
            return self._range_max - ratio * pixel_span
        return self._range_min + ratio * pixel_span

    def invert(self, pixel: float) -> float:
        pixel_span = self._range_max - self._range_min
        if pixel_span == 0:
            return self._domain_min
        ratio = (pixel - self._range_min) / pixel_span
        if self.inverted:
            ratio = 1 - ratio
        return self._domain_min + ratio * (self._domain_max - self._domain_min)

    def get_ticks(self) -> List[float]:
        """Tick values from the domain min to the domain max in tick_spacing steps."""
        spacing = self._tick_spacing
        if not (math.isfinite(spacing) and spacing > 0
                and math.isfinite(self._domain_min) and math.isfinite(self._domain_max)):
            return []
        count = int(math.floor((self._domain_max + spacing / 2 - self._domain_min) / spacing))
        if count > MAX_TICKS:
            return []
        return [self._domain_min + i * spacing for i in range(count + 1)]

    def set_tick_count(self, tick_count: int) -> None:
        """Change the desired tick count and re-expand the current domain."""
        self.tick_count = max(2, tick_count)
        self._apply_domain(self._domain_min, self._domain_max)
        self._touch()
