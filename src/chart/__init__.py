"""
Chart orchestration.

Key Components:
- Chart: public facade wiring data, panes, navigation and rendering
- ChartController: reacts to store changes and refits the price scale
- MultiPaneRenderer: pane layout and layered frame drawing
- ZoomManager: right-anchored zoom and clamped pan
- RenderBatcher: one render per tick
"""

from .render_batcher import RenderBatcher, asyncio_scheduler
from .zoom_manager import ZoomManager
from .chart_controller import ChartController
from .multi_pane_renderer import MultiPaneRenderer
from .chart import Chart

__all__ = [
    "RenderBatcher",
    "asyncio_scheduler",
    "ZoomManager",
    "ChartController",
    "MultiPaneRenderer",
    "Chart",
]
