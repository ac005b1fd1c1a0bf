"""
Core definitions shared by every layer of the chart engine.

Geometry value types, the error taxonomy and theme palettes live here so
that scales, studies, panes and the orchestrator can depend on them
without depending on each other.
"""

from .geometry import (
    AxisPosition,
    Bounds,
    ChartPadding,
    ChartSize,
    calc_x_range,
    calc_y_range,
)
from .errors import (
    ChartEngineError,
    DataSourceError,
    EmptyDomainError,
    LayoutError,
    StudyConfigError,
)
from .theme import ChartColors, Theme, Typography
from .config import ChartConfig, ZoomConfig

__all__ = [
    "AxisPosition",
    "Bounds",
    "ChartPadding",
    "ChartSize",
    "calc_x_range",
    "calc_y_range",
    "ChartEngineError",
    "DataSourceError",
    "EmptyDomainError",
    "LayoutError",
    "StudyConfigError",
    "ChartColors",
    "Theme",
    "Typography",
    "ChartConfig",
    "ZoomConfig",
]
