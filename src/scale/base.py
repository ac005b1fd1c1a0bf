"""
Scale contract and domain-update value types.

Every scale carries an integer `version` that increases on each mutation.
Render caches compare versions instead of re-deriving geometry, so a
mutation anywhere invalidates exactly the caches that read that scale.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class DomainRange:
    min: float
    max: float

    def merge(self, other: "DomainRange") -> "DomainRange":
        return DomainRange(min(self.min, other.min), max(self.max, other.max))

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.min) and math.isfinite(self.max)


def _merge_ranges(a: Optional[DomainRange], b: Optional[DomainRange]) -> Optional[DomainRange]:
    if a is None:
        return b
    if b is None:
        return a
    return a.merge(b)


@dataclass(frozen=True)
class ScaleDomainUpdate:
    """
    A study's report that its output extended the time or value domain.

    Attributes:
        x_domain: New time extent (epoch ms), if it changed
        y_domain: New value extent, if it changed
    """
    x_domain: Optional[DomainRange] = None
    y_domain: Optional[DomainRange] = None

    def merge(self, other: Optional["ScaleDomainUpdate"]) -> "ScaleDomainUpdate":
        """Combine two updates taking the min of mins and the max of maxes."""
        if other is None:
            return self
        return ScaleDomainUpdate(
            x_domain=_merge_ranges(self.x_domain, other.x_domain),
            y_domain=_merge_ranges(self.y_domain, other.y_domain),
        )

    @staticmethod
    def merge_all(updates: Iterable[Optional["ScaleDomainUpdate"]]) -> Optional["ScaleDomainUpdate"]:
        """Merge any number of optional updates; None when nothing was reported."""
        merged: Optional[ScaleDomainUpdate] = None
        for update in updates:
            if update is None:
                continue
            merged = update if merged is None else merged.merge(update)
        return merged


class Scale(ABC):
    """Bidirectional mapping between a domain value and a pixel coordinate."""

    def __init__(self, range_min: float, range_max: float):
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self.version = 0

    def _touch(self) -> None:
        self.version += 1

    @abstractmethod
    def scaled_value(self, value: float) -> float:
        """Map a domain value to a pixel."""

    @abstractmethod
    def invert(self, pixel: float) -> float:
        """Map a pixel back to a domain value."""

    def get_range(self) -> Tuple[float, float]:
        return self._range_min, self._range_max

    def update_range(self, range_min: float, range_max: float) -> None:
        self._range_min = float(range_min)
        self._range_max = float(range_max)
        self._on_range_changed()
        self._touch()

    def _on_range_changed(self) -> None:
        pass
