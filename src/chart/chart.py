"""
Chart Module

Public entry point of the engine: wires the store, scales, panes,
controller, renderer and navigation together around an injected data
manager and compositor.

Key Features:
- Async initialize() loading the first history batch and showing the newest candles
- Overlay studies on the main pane and indicator sub-panes
- Zoom, pan and reset with automatic price refit
- History paging when a pan gets close to the oldest loaded candle
- Theme, resize and padding changes with layout recomputation
- Renders coalesced through the render batcher
"""

import asyncio
import dataclasses
import logging
import math
from typing import List, Optional, Sequence, Tuple

from src.core.config import ChartConfig
from src.core.geometry import ChartPadding, ChartSize
from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.data.data_manager import DataManager
from src.data.time_series_store import TimeSeriesStore
from src.layout.context import ChartContext
from src.layout.main_pane import MainPane
from src.layout.pane_manager import PaneManager
from src.layout.sub_pane import SubPane
from src.logging.performance_tracker import PerformanceTracker
from src.shapes.compositor import Compositor
from src.studies.base import Study
from src.studies.candle_study import CandleStudy

from .chart_controller import ChartController
from .multi_pane_renderer import MultiPaneRenderer
from .render_batcher import RenderBatcher, Scheduler
from .zoom_manager import ZoomManager

logger = logging.getLogger(__name__)


class Chart:
    """
    A candlestick chart with optional overlays and sub-panes.

    Args:
        candle_study: Study drawing the candles on the main pane
        data_manager: Source of history batches and realtime candles
        compositor: Rendering backend
        config: Chart configuration (defaults to ChartConfig())
        scheduler: Render scheduler passed to the RenderBatcher
        tracker: Performance tracker shared by controller and renderer
    """

    def __init__(self,
                 candle_study: CandleStudy,
                 data_manager: DataManager,
                 compositor: Compositor,
                 config: Optional[ChartConfig] = None,
                 scheduler: Optional[Scheduler] = None,
                 tracker: Optional[PerformanceTracker] = None):
        self.context = ChartContext.create(config or ChartConfig())
        self.data_manager = data_manager
        self.compositor = compositor
        self.tracker = tracker or PerformanceTracker(enabled=False)

        self.store = TimeSeriesStore()
        self.pane_manager = PaneManager(self.context, MainPane(self.context, candle_study))
        self.zoom_manager = ZoomManager(self.context.scales, self.context.config.zoom)
        self.renderer = MultiPaneRenderer(self.context, self.pane_manager, compositor, self.tracker)
        self.render_batcher = RenderBatcher(scheduler)
        self.controller = ChartController(self.store, self.context.scales, self.pane_manager,
                                          self.render_batcher, self.context.config, self.tracker)
        self.render_batcher.set_on_render(self.renderer.render)

        self.has_more_historical = True
        self.is_loading_more = False
        self.initialized = False
        self._load_task: Optional[asyncio.Task] = None

        self.data_manager.on_realtime_update(self._handle_realtime_update)

    @property
    def config(self) -> ChartConfig:
        return self.context.config

    @property
    def scales(self):
        return self.context.scales

    # Lifecycle

    async def initialize(self) -> None:
        """Load the first history batch and show the newest candles."""
        batch = await self.data_manager.load_historical()
        self.has_more_historical = batch.has_more
        self.controller.load_initial_data(batch.candles)

        total = len(self.store)
        if total > 0:
            start = min(max(total - self.config.initial_visible_candles, 0), total - 1)
            self.scales.update_visible_indices(start, total - 1)
            self.controller.recalculate_price_scales_from_visible_candles()
        self.initialized = True
        logger.info(f"Chart initialized with {total} candles (has_more={batch.has_more})")

    def destroy(self) -> None:
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self.controller.destroy()
        logger.debug("Chart destroyed")

    def _handle_realtime_update(self, candle: OHLCCandle) -> None:
        self.controller.handle_realtime_update(candle)

    # Studies and panes

    def add_overlay_study(self, study: Study) -> None:
        self.pane_manager.main_pane.add_overlay_study(study)
        study.reset_candles(self.store.get_all())
        self.controller.recalculate_price_scales_from_visible_candles()
        self.render_batcher.request_render()

    def create_sub_pane(self, pane_id: str, primary_study: Study, height_percent: float,
                        other_studies: Optional[Sequence[Study]] = None) -> SubPane:
        """
        Add an indicator pane below the existing ones.

        Raises:
            StudyConfigError: The primary study has no value scale
            LayoutError: Bad height or the main pane would have no height left
        """
        pane = self.pane_manager.add_sub_pane(pane_id, primary_study, height_percent, other_studies)
        try:
            self.renderer.recalculate_layout()
        except Exception:
            self.pane_manager.remove_sub_pane(pane_id)
            for study in pane.other_studies:
                study.use_y_scale(None)
            self.renderer.recalculate_layout()
            raise
        pane.reset_candles(self.store.get_all())
        self.controller.recalculate_price_scales_from_visible_candles()
        self.render_batcher.request_render()
        return pane

    # Appearance

    def update_theme(self, theme: Theme) -> None:
        self.context.config = dataclasses.replace(self.config, theme=theme)
        self.pane_manager.update_theme(theme)
        self.renderer.update_theme(theme)
        self.compositor.update_theme(theme)
        self.render_batcher.request_render()

    def resize(self, size: ChartSize) -> None:
        self.context.config = dataclasses.replace(self.config, size=size)
        self.compositor.setup_high_dpi(size.width, size.height)
        self.renderer.recalculate_layout()
        self.render_batcher.request_render()

    def update_padding(self, padding: ChartPadding) -> None:
        self.context.config = dataclasses.replace(self.config, padding=padding)
        self.renderer.recalculate_layout()
        self.render_batcher.request_render()

    # Navigation

    def zoom_in(self, factor: Optional[float] = None) -> bool:
        changed = self.zoom_manager.zoom_in(factor)
        self.controller.recalculate_price_scales_from_visible_candles()
        return changed

    def zoom_out(self, factor: Optional[float] = None) -> bool:
        changed = self.zoom_manager.zoom_out(factor)
        self.controller.recalculate_price_scales_from_visible_candles()
        return changed

    def pan(self, delta_candles: float) -> bool:
        changed = self.zoom_manager.pan(delta_candles)
        self.controller.recalculate_price_scales_from_visible_candles()
        self._check_and_load_more()
        return changed

    def reset_zoom(self) -> bool:
        changed = self.zoom_manager.reset_zoom()
        self.controller.recalculate_price_scales_from_visible_candles()
        return changed

    def get_zoom_level(self) -> float:
        return self.zoom_manager.get_zoom_level()

    def can_zoom_in(self) -> bool:
        return self.zoom_manager.can_zoom_in()

    def can_zoom_out(self) -> bool:
        return self.zoom_manager.can_zoom_out()

    def can_pan_left(self) -> bool:
        return self.zoom_manager.can_pan_left()

    def can_pan_right(self) -> bool:
        return self.zoom_manager.can_pan_right()

    def get_visible_indices(self) -> Tuple[int, int]:
        """Visible window widened to whole candles; (0, 0) for a degenerate window."""
        start, end = self.scales.get_visible_indices()
        if not (math.isfinite(start) and math.isfinite(end)):
            return 0, 0
        return math.floor(start), math.ceil(end)

    def get_box_width(self) -> float:
        return self.scales.get_box_width()

    def get_candles(self) -> List[OHLCCandle]:
        return self.store.get_all()

    # History paging

    def should_load_more(self) -> bool:
        if self.is_loading_more or not self.has_more_historical:
            return False
        start, _ = self.get_visible_indices()
        return start < self.config.load_more_threshold

    def _check_and_load_more(self) -> None:
        if self._load_task is not None and not self._load_task.done():
            return
        if not self.should_load_more():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Near oldest candle but no event loop; await load_more_history() to page")
            return
        self._load_task = loop.create_task(self.load_more_history())

    async def wait_for_history_load(self) -> int:
        """Await the load started by pan(), if any. Returns candles added."""
        task, self._load_task = self._load_task, None
        if task is None:
            return 0
        return await task

    async def load_more_history(self) -> int:
        """
        Fetch the next older batch and merge it into the store.

        A failing data manager is logged and leaves the chart usable; the
        next pan near the oldest candle retries.

        Returns:
            Number of candles added
        """
        if self.is_loading_more:
            return 0
        self.is_loading_more = True
        try:
            batch = await self.data_manager.load_historical()
            self.has_more_historical = batch.has_more
            added = self.controller.load_more_historical(batch.candles) if batch.candles else 0
            logger.info(f"Loaded {added} older candles (has_more={batch.has_more})")
            return added
        except Exception as e:
            logger.warning(f"Loading more history failed: {e}")
            return 0
        finally:
            self.is_loading_more = False

    # Rendering

    def request_render(self) -> None:
        self.render_batcher.request_render()

    def render_now(self) -> None:
        """Run any pending render immediately, or draw a frame if none is pending."""
        if not self.render_batcher.flush():
            self.renderer.render()
