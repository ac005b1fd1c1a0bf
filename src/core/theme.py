"""
Theme Module

Colour and typography settings consumed by studies, axes and the renderer.

Key Features:
- ChartColors with one slot per visual element
- Typography for axis and label fonts
- Theme.dark() and Theme.light() palettes
"""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class ChartColors:
    """Colour slots used across the chart (hex strings, '#RRGGBB')."""
    background: str = '#131722'
    chart_area: str = '#131722'
    grid_color: str = '#2A2E39'
    tick_color: str = '#787B86'
    tick_label_color: str = '#B2B5BE'
    title_color: str = '#D1D4DC'
    text_color: str = '#D1D4DC'
    candle_positive: str = '#26A69A'
    candle_negative: str = '#EF5350'
    last_price_line: str = '#2962FF'
    hover_color: str = '#9598A1'
    selection_color: str = '#2962FF'
    border_color: str = '#363A45'
    divider_color: str = '#2A2E39'


@dataclass(frozen=True)
class Typography:
    """Font settings for axis ticks and labels."""
    font_family: str = 'DejaVu Sans'
    axis_font_size: float = 11.0
    label_font_size: float = 11.0
    title_font_size: float = 14.0


@dataclass(frozen=True)
class Theme:
    """Complete visual theme."""
    name: str = 'dark'
    colors: ChartColors = field(default_factory=ChartColors)
    typography: Typography = field(default_factory=Typography)

    @classmethod
    def dark(cls) -> "Theme":
        return cls()

    @classmethod
    def light(cls) -> "Theme":
        return cls(
            name='light',
            colors=ChartColors(
                background='#FFFFFF',
                chart_area='#FFFFFF',
                grid_color='#F0F3FA',
                tick_color='#9598A1',
                tick_label_color='#131722',
                title_color='#131722',
                text_color='#131722',
                hover_color='#787B86',
                border_color='#D1D4DC',
                divider_color='#E0E3EB',
            ),
        )

    def with_colors(self, **kwargs) -> "Theme":
        """Create a copy with some colour slots replaced."""
        return replace(self, colors=replace(self.colors, **kwargs))
