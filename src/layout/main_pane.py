"""
Main price pane: exactly one candle study plus overlays that share the
common price scale.
"""

import logging
from typing import List, Optional, Sequence

from src.core.errors import StudyConfigError
from src.core.geometry import AxisPosition, Bounds
from src.scale.numeric_axis import NumericAxis
from src.scale.numeric_scale import NumericScale
from src.studies.base import Study
from src.studies.candle_study import CandleStudy

from .context import ChartContext
from .pane import Pane

logger = logging.getLogger(__name__)

MAIN_PANE_ID = 'main'


class MainPane(Pane):
    """The top pane, drawn on the shared price scale."""

    def __init__(self, context: ChartContext, candle_study: CandleStudy,
                 overlay_studies: Optional[Sequence[Study]] = None):
        super().__init__(context, MAIN_PANE_ID)
        self.candle_study = candle_study
        self.overlay_studies: List[Study] = []
        self.price_axis = NumericAxis(context.scales.price_scale, AxisPosition.RIGHT,
                                      context.config.main_tick_count, context.theme)
        for study in overlay_studies or []:
            self.add_overlay_study(study)

    @property
    def studies(self) -> List[Study]:
        return [self.candle_study] + self.overlay_studies

    def get_y_scale(self) -> NumericScale:
        return self.context.scales.price_scale

    def add_overlay_study(self, study: Study) -> None:
        if study.get_y_scale() is not None:
            raise StudyConfigError(
                f"Study '{study.id}' has its own value scale and belongs in a sub-pane")
        if self.get_study(study.id) is not None:
            raise StudyConfigError(f"Study '{study.id}' is already on the main pane")
        self.overlay_studies.append(study)
        logger.info(f"Overlay study added: {study.name}")

    def remove_overlay_study(self, study_id: str) -> bool:
        for i, study in enumerate(self.overlay_studies):
            if study.id == study_id:
                del self.overlay_studies[i]
                return True
        return False

    def update_bounds(self, bounds: Bounds) -> None:
        self.bounds = bounds
        self.context.scales.update_price_range(bounds.y, bounds.bottom)
        for study in self.studies:
            study.update_scale_bounds(bounds)
