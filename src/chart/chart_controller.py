"""
Chart Controller Module

Reacts to time series store changes: keeps the shared time scale in step
with the data, forwards lifecycle events to panes, follows the newest
candle and refits the price scale to the visible window.

Key Features:
- Append follows the live edge only when it was visible before the append
- Prepend shifts the visible window so the view does not jump
- Last-candle updates refit prices only when that candle is on screen
- Price refit from the visible slice with configurable padding
- Every decision routed through the render batcher (one render per tick)
"""

import logging
import math
from typing import Iterable, Optional

from src.core.config import ChartConfig
from src.data.candle import OHLCCandle
from src.data.time_series_store import ChangeType, TimeSeriesStore
from src.layout.pane_manager import PaneManager
from src.logging.performance_tracker import PerformanceTracker
from src.scale.common_scale_manager import CommonScaleManager

from .render_batcher import RenderBatcher

logger = logging.getLogger(__name__)

# Fraction of the price used as padding when every visible candle is flat
FLAT_PRICE_PADDING = 0.01


class ChartController:
    """
    Glue between the store, the shared scales and the panes.

    Args:
        store: Candle store; the controller registers itself as its listener
        scales: Shared scale owner
        pane_manager: Panes receiving lifecycle events
        render_batcher: Coalescing render scheduler
        config: Chart configuration (price padding ratio)
        tracker: Optional performance tracker for update timing
    """

    def __init__(self,
                 store: TimeSeriesStore,
                 scales: CommonScaleManager,
                 pane_manager: PaneManager,
                 render_batcher: RenderBatcher,
                 config: Optional[ChartConfig] = None,
                 tracker: Optional[PerformanceTracker] = None):
        self.store = store
        self.scales = scales
        self.pane_manager = pane_manager
        self.render_batcher = render_batcher
        self.config = config or ChartConfig()
        self.tracker = tracker or PerformanceTracker(enabled=False)
        self.store.set_on_change(self._handle_data_change)

    # Data entry points

    def load_initial_data(self, candles: Iterable[OHLCCandle]) -> None:
        self.store.reset(candles)

    def handle_realtime_update(self, candle: OHLCCandle) -> ChangeType:
        return self.store.add(candle)

    def load_more_historical(self, candles: Iterable[OHLCCandle]) -> int:
        return self.store.prepend(candles)

    # Change handling

    def _handle_data_change(self, change: ChangeType) -> None:
        self.tracker.start('update')
        if change is ChangeType.APPEND:
            self._on_append()
        elif change is ChangeType.PREPEND:
            self._on_prepend()
        elif change is ChangeType.UPDATE:
            self._on_update()
        else:
            self._on_reset()
        self.tracker.end('update')

    def _on_append(self) -> None:
        candles = self.store.get_all()
        old_length = self.scales.get_domain_length()
        # Scales still describe the series as it was before this candle
        was_at_right_edge = self.scales.is_right_edge_visible()

        self.scales.update_full_domain(self.store.get_timestamps())
        self.pane_manager.append_new_candle(candles)

        if old_length == 0:
            self.scales.update_visible_indices(0, len(candles) - 1)
            self.recalculate_price_scales_from_visible_candles()
        elif was_at_right_edge:
            self.scales.shift_visible_indices(1)
            logger.debug(f"Append at live edge; window now {self.scales.get_visible_indices()}")
            self.recalculate_price_scales_from_visible_candles()
        else:
            logger.debug("Append outside the visible window; price scale untouched")
            self.pane_manager.update_scales(True, False)
            self.render_batcher.request_render()

    def _on_prepend(self) -> None:
        candles = self.store.get_all()
        old_length = self.scales.get_domain_length()
        added = len(candles) - old_length

        self.scales.update_full_domain(self.store.get_timestamps())
        self.scales.shift_visible_indices(added)
        logger.debug(f"Prepended {added} candles; window shifted to {self.scales.get_visible_indices()}")

        self.pane_manager.prepend_historical_candles(candles)
        self.recalculate_price_scales_from_visible_candles()

    def _on_update(self) -> None:
        candles = self.store.get_all()
        last_index = len(candles) - 1
        start, end = self.scales.get_visible_indices()
        last_visible = start <= last_index <= end

        # Always forwarded: the last price line tracks the price off screen too
        self.pane_manager.update_last_candle(candles)

        if last_visible:
            self.recalculate_price_scales_from_visible_candles()
        else:
            logger.debug(f"Update of off-screen candle {last_index}; render only")
            self.pane_manager.update_scales(False, False)
            self.render_batcher.request_render()

    def _on_reset(self) -> None:
        candles = self.store.get_all()
        self.scales.update_full_domain(self.store.get_timestamps())
        start, end = self.scales.get_visible_indices()
        if candles and (end < start or not (math.isfinite(start) and math.isfinite(end))):
            self.scales.update_visible_indices(0, len(candles) - 1)
        else:
            self.scales.update_visible_indices(start, end)

        self.pane_manager.reset_candles(candles)
        logger.debug(f"Reset with {len(candles)} candles")
        self.recalculate_price_scales_from_visible_candles()

    # Price refit

    def recalculate_price_scales_from_visible_candles(self) -> None:
        """
        Fit the price domain to the high/low of the visible candles.

        Fractional indices are widened (floor/ceil) and clamped to the
        series. Non-finite indices leave the scales untouched.
        """
        candles = self.store.get_all()
        if not candles:
            return

        start, end = self.scales.get_visible_indices()
        if not (math.isfinite(start) and math.isfinite(end)):
            logger.warning(f"Skipping price refit for non-finite window ({start}, {end})")
            return

        last_index = len(candles) - 1
        first = min(max(math.floor(start), 0), last_index)
        last = min(max(math.ceil(end), first), last_index)
        visible = candles[first:last + 1]
        if not visible:
            return

        self.tracker.start('recalculation')
        price_min = min(c.low for c in visible)
        price_max = max(c.high for c in visible)
        spread = price_max - price_min
        if spread > 0:
            padding = spread * self.config.price_padding_ratio
        else:
            padding = abs(price_max) * FLAT_PRICE_PADDING or 1.0

        self.scales.update_price_domain(price_min - padding, price_max + padding)
        self.pane_manager.update_scales(True, True)
        self.tracker.end('recalculation')

        self.render_batcher.request_render()

    def destroy(self) -> None:
        self.store.set_on_change(None)
        self.render_batcher.destroy()
