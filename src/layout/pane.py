"""
Pane base: broadcasts lifecycle events to a list of studies and merges
their domain updates (min of mins, max of maxes).
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.core.geometry import Bounds
from src.core.theme import Theme
from src.data.candle import OHLCCandle
from src.scale.base import ScaleDomainUpdate
from src.scale.numeric_axis import NumericAxis
from src.scale.numeric_scale import NumericScale
from src.studies.base import Study

from .context import ChartContext

logger = logging.getLogger(__name__)


class Pane(ABC):
    """Horizontal strip of the chart holding one or more studies."""

    def __init__(self, context: ChartContext, pane_id: str):
        self.context = context
        self.id = pane_id
        self.bounds = Bounds.empty()
        self.price_axis: Optional[NumericAxis] = None

    @property
    @abstractmethod
    def studies(self) -> List[Study]:
        """Studies in draw order."""

    @abstractmethod
    def get_y_scale(self) -> NumericScale:
        """Value scale the pane axis is drawn from."""

    def update_last_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return ScaleDomainUpdate.merge_all(s.update_last_candle(candles) for s in self.studies)

    def append_new_candle(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return ScaleDomainUpdate.merge_all(s.append_new_candle(candles) for s in self.studies)

    def prepend_historical_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return ScaleDomainUpdate.merge_all(s.prepend_historical_candles(candles) for s in self.studies)

    def reset_candles(self, candles: Sequence[OHLCCandle]) -> Optional[ScaleDomainUpdate]:
        return ScaleDomainUpdate.merge_all(s.reset_candles(candles) for s in self.studies)

    def update_scales(self, time_changed: bool, price_changed: bool) -> None:
        for study in self.studies:
            study.update_scales(time_changed, price_changed)

    def update_theme(self, theme: Theme) -> None:
        for study in self.studies:
            study.update_theme(theme)
        if self.price_axis is not None:
            self.price_axis.update_theme(theme)

    def render_to(self, compositor) -> None:
        scales = self.context.scales
        for study in self.studies:
            study.render_to(compositor, scales, self.bounds)

    def render_infrastructure_to(self, compositor) -> None:
        scales = self.context.scales
        for study in self.studies:
            study.render_infrastructure_to(compositor, scales, self.bounds)

    def get_study(self, study_id: str) -> Optional[Study]:
        for study in self.studies:
            if study.id == study_id:
                return study
        return None
