"""
Pane Manager Module

Holds the main pane and the ordered sub-panes, and fans lifecycle events
out to all of them.

Key Features:
- Sub-pane creation with unique ids
- Per-pane merged ScaleDomainUpdate results keyed by pane id
- Scale-change and theme broadcasts
"""

import logging
from typing import Dict, List, Optional, Sequence

from src.core.errors import LayoutError
from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate
from src.studies.base import Study

from .context import ChartContext
from .main_pane import MAIN_PANE_ID, MainPane
from .pane import Pane
from .sub_pane import SubPane

logger = logging.getLogger(__name__)

PaneUpdates = Dict[str, Optional[ScaleDomainUpdate]]


class PaneManager:
    """Owns every pane of one chart."""

    def __init__(self, context: ChartContext, main_pane: MainPane):
        self.context = context
        self.main_pane = main_pane
        self.sub_panes: List[SubPane] = []

    @property
    def panes(self) -> List[Pane]:
        return [self.main_pane] + self.sub_panes

    def add_sub_pane(self, pane_id: str, primary_study: Study, height_percent: float,
                     other_studies: Optional[Sequence[Study]] = None) -> SubPane:
        if pane_id == MAIN_PANE_ID or any(p.id == pane_id for p in self.sub_panes):
            raise LayoutError(f"Pane id '{pane_id}' is already in use")
        pane = SubPane(self.context, pane_id, primary_study, height_percent, other_studies)
        self.sub_panes.append(pane)
        logger.info(f"Sub-pane '{pane_id}' added with {len(pane.studies)} studies "
                    f"({height_percent:.0%} height)")
        return pane

    def remove_sub_pane(self, pane_id: str) -> bool:
        for i, pane in enumerate(self.sub_panes):
            if pane.id == pane_id:
                del self.sub_panes[i]
                return True
        return False

    def get_pane(self, pane_id: str) -> Optional[Pane]:
        for pane in self.panes:
            if pane.id == pane_id:
                return pane
        return None

    def _collect(self, method: str, candles: Sequence[OHLCCandle]) -> PaneUpdates:
        updates: PaneUpdates = {MAIN_PANE_ID: getattr(self.main_pane, method)(candles)}
        for i, pane in enumerate(self.sub_panes):
            updates[f"subpane-{i}"] = getattr(pane, method)(candles)
        return updates

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> PaneUpdates:
        return self._collect('update_last_candle', candles)

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> PaneUpdates:
        return self._collect('append_new_candle', candles)

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> PaneUpdates:
        return self._collect('prepend_historical_candles', candles)

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> PaneUpdates:
        return self._collect('reset_candles', candles)

    def update_scales(self, time_changed: bool, price_changed: bool) -> None:
        for pane in self.panes:
            pane.update_scales(time_changed, price_changed)

    def update_theme(self, theme: Theme) -> None:
        for pane in self.panes:
            pane.update_theme(theme)

    def all_studies(self) -> List[Study]:
        return [study for pane in self.panes for study in pane.studies]
