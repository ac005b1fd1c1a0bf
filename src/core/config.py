"""
Chart Configuration Module

Dataclass configuration for the chart and its navigation.

Key Features:
- ChartConfig: surface size, padding, theme and behaviour constants
- ZoomConfig: visible-candle limits and default zoom factor
- Validation in __post_init__ so bad values fail at construction
"""

from dataclasses import dataclass, field

from .geometry import ChartPadding, ChartSize
from .theme import Theme


@dataclass
class ZoomConfig:
    """
    Zoom and pan limits.

    Attributes:
        min_visible_candles: Smallest visible range (end - start) zoom-in may reach
        max_visible_candles: Largest visible range zoom-out may reach
        zoom_factor: Factor used when zoom_in/zoom_out are called without one
    """
    min_visible_candles: float = 10
    max_visible_candles: float = 2500
    zoom_factor: float = 1.2

    def __post_init__(self):
        if self.min_visible_candles <= 0:
            raise ValueError(f"min_visible_candles must be positive, got {self.min_visible_candles}")
        if self.max_visible_candles < self.min_visible_candles:
            raise ValueError("max_visible_candles must be >= min_visible_candles")
        if self.zoom_factor <= 1:
            raise ValueError(f"zoom_factor must be greater than 1, got {self.zoom_factor}")


@dataclass
class ChartConfig:
    """
    Everything the chart needs besides its collaborators.

    Attributes:
        size: Drawable surface in logical pixels
        padding: Gutter around the chart area for axis labels
        theme: Colours and fonts
        zoom: Zoom limits
        initial_visible_candles: Candles shown after initialize()
        load_more_threshold: Pan within this many candles of the oldest one loads more history
        pane_spacing: Vertical gap between panes in pixels
        price_padding_ratio: Fraction of the visible high-low range added above and below
        main_tick_count: Desired tick count on the main price axis
        sub_pane_tick_count: Desired tick count on sub-pane axes
        timezone_offset_ms: Offset applied to time-axis labels
    """
    size: ChartSize = field(default_factory=lambda: ChartSize(1200, 800))
    padding: ChartPadding = field(default_factory=ChartPadding)
    theme: Theme = field(default_factory=Theme.dark)
    zoom: ZoomConfig = field(default_factory=ZoomConfig)
    initial_visible_candles: int = 120
    load_more_threshold: int = 20
    pane_spacing: float = 16.0
    price_padding_ratio: float = 0.02
    main_tick_count: int = 8
    sub_pane_tick_count: int = 6
    timezone_offset_ms: int = 19_800_000

    def __post_init__(self):
        if self.size.width <= 0 or self.size.height <= 0:
            raise ValueError(f"Chart size must be positive, got {self.size}")
        if self.initial_visible_candles < 1:
            raise ValueError("initial_visible_candles must be at least 1")
        if self.load_more_threshold < 0:
            raise ValueError("load_more_threshold must not be negative")
        if self.price_padding_ratio < 0:
            raise ValueError("price_padding_ratio must not be negative")
