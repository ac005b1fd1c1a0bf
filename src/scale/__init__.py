"""
Scale system: value-to-pixel mappings and the axes drawn from them.

Key Components:
- NumericScale: linear value scale with nice-number domains
- OrdinalTimeScale: index-based time scale with a fractional visible window
- CommonScaleManager: single owner of the shared time and price scales
- NumericAxis / TimeAxis: grid, axis-line and label shape generators
"""

from .base import DomainRange, Scale, ScaleDomainUpdate
from .numeric_scale import NumericDomain, NumericScale, nice_num
from .ordinal_time_scale import OrdinalTimeScale
from .common_scale_manager import CommonScaleManager
from .axis import Axis, AxisOptions, TickInfo
from .numeric_axis import NumericAxis, format_tick_label
from .time_axis import IST_OFFSET_MS, PivotLevel, TimeAxis, choose_pivot_level

__all__ = [
    "DomainRange",
    "Scale",
    "ScaleDomainUpdate",
    "NumericDomain",
    "NumericScale",
    "nice_num",
    "OrdinalTimeScale",
    "CommonScaleManager",
    "Axis",
    "AxisOptions",
    "TickInfo",
    "NumericAxis",
    "format_tick_label",
    "IST_OFFSET_MS",
    "PivotLevel",
    "TimeAxis",
    "choose_pivot_level",
]
