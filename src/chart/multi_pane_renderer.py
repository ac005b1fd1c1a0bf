"""
Multi-Pane Renderer Module

Lays panes out vertically inside the padded chart area and draws one
frame through the injected compositor.

Key Features:
- Main pane takes the height left over after sub-pane fractions
- Fixed spacing between panes; layout recomputed only on structural change
- Shared time scale range follows the chart area width
- Layered frame: grid, clipped pane content, infrastructure, border,
  axis lines, axis labels
- Render timing through the performance tracker
"""

import logging
from typing import Dict, Optional

from src.core.errors import LayoutError
from src.core.geometry import AxisPosition, Bounds
from src.core.theme import Theme
from src.layout.context import ChartContext
from src.layout.pane import Pane
from src.layout.pane_manager import PaneManager
from src.logging.performance_tracker import PerformanceTracker
from src.scale.time_axis import TimeAxis
from src.shapes.compositor import Compositor

logger = logging.getLogger(__name__)


class MultiPaneRenderer:
    """
    Frame layout and layer ordering.

    Args:
        context: Shared chart context (size, padding, scales)
        pane_manager: Source of the main pane and sub-panes
        compositor: Rendering backend
        tracker: Optional performance tracker for render timing
    """

    def __init__(self,
                 context: ChartContext,
                 pane_manager: PaneManager,
                 compositor: Compositor,
                 tracker: Optional[PerformanceTracker] = None):
        self.context = context
        self.pane_manager = pane_manager
        self.compositor = compositor
        self.tracker = tracker or PerformanceTracker(enabled=False)
        self.time_axis = TimeAxis(context.scales.time_scale, AxisPosition.BOTTOM,
                                  theme=context.theme,
                                  timezone_offset_ms=context.config.timezone_offset_ms)
        self.frames_rendered = 0

        self.compositor.setup_high_dpi(context.size.width, context.size.height)
        self.recalculate_layout()

    @property
    def pane_spacing(self) -> float:
        return self.context.config.pane_spacing

    def chart_area(self) -> Bounds:
        """Chart size minus padding."""
        size, padding = self.context.size, self.context.padding
        return Bounds(
            x=padding.left,
            y=padding.top,
            width=size.width - padding.left - padding.right,
            height=size.height - padding.top - padding.bottom,
        )

    def recalculate_layout(self) -> None:
        """
        Assign bounds to every pane and update the scale ranges.

        Raises:
            LayoutError: Sub-pane fractions leave no height for the main pane
        """
        area = self.chart_area()
        sub_panes = self.pane_manager.sub_panes
        available = area.height - len(sub_panes) * self.pane_spacing
        main_fraction = 1.0 - sum(p.height_percent for p in sub_panes)
        if main_fraction <= 0:
            raise LayoutError(
                f"Sub-panes take {1.0 - main_fraction:.0%} of the chart height; "
                f"main pane height must stay positive")

        y = area.y
        main_height = available * main_fraction
        self.pane_manager.main_pane.update_bounds(Bounds(area.x, y, area.width, main_height))
        y += main_height + self.pane_spacing

        for pane in sub_panes:
            height = available * pane.height_percent
            pane.update_bounds(Bounds(area.x, y, area.width, height))
            y += height + self.pane_spacing

        self.context.scales.update_time_range(area.x, area.right)
        self.pane_manager.update_scales(True, True)
        logger.info(f"Layout: {len(sub_panes) + 1} panes in "
                    f"{area.width:.0f}x{area.height:.0f} chart area "
                    f"(main {main_height:.0f}px)")

    def get_pane_bounds(self) -> Dict[str, Bounds]:
        return {pane.id: pane.bounds for pane in self.pane_manager.panes}

    def update_theme(self, theme: Theme) -> None:
        self.time_axis.update_theme(theme)

    def render(self) -> None:
        """Draw one complete frame."""
        self.tracker.start('render')
        compositor = self.compositor
        panes = self.pane_manager.panes
        last_bounds = panes[-1].bounds

        compositor.clear()

        # Grid
        for pane in panes:
            if pane.price_axis is not None:
                compositor.render_shapes(pane.price_axis.generate_grid_shapes(pane.bounds))
        for pane in panes:
            compositor.render_shapes(self.time_axis.generate_grid_shapes(pane.bounds))

        # Pane content, clipped to each pane
        for pane in panes:
            self._render_pane_with_clip(pane)

        # Study infrastructure may overhang the price axis, so no clip
        for pane in panes:
            pane.render_infrastructure_to(compositor)

        compositor.draw_border(self.chart_area())

        # Axis lines
        for pane in panes:
            if pane.price_axis is not None:
                compositor.render_shapes([pane.price_axis.generate_axis_line_shape(pane.bounds)])
        compositor.render_shapes([self.time_axis.generate_axis_line_shape(last_bounds)])

        # Axis labels
        for pane in panes:
            if pane.price_axis is not None:
                compositor.render_shapes(pane.price_axis.generate_label_shapes(pane.bounds))
        compositor.render_shapes(self.time_axis.generate_label_shapes(last_bounds))

        self.frames_rendered += 1
        self.tracker.end('render', f"frame={self.frames_rendered}")

    def _render_pane_with_clip(self, pane: Pane) -> None:
        self.compositor.set_clip_region(pane.bounds)
        try:
            pane.render_to(self.compositor)
        finally:
            self.compositor.clear_clip_region()
