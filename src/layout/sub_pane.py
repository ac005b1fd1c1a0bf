"""
Indicator sub-pane: one primary study with its own value scale plus
optional secondary studies drawn on that same scale.
"""

import logging
from typing import List, Optional, Sequence

from src.core.errors import LayoutError, StudyConfigError
from src.core.geometry import AxisPosition, Bounds
from src.scale.numeric_axis import NumericAxis
from src.scale.numeric_scale import NumericScale
from src.studies.base import Study

from .context import ChartContext
from .pane import Pane

logger = logging.getLogger(__name__)


class SubPane(Pane):
    """
    Args:
        context: Shared chart context
        pane_id: Unique pane identifier
        primary_study: Study that owns the pane's value scale
        height_percent: Fraction (0..1) of the available chart height
        other_studies: Studies drawn on the primary's scale
    """

    def __init__(self, context: ChartContext, pane_id: str, primary_study: Study,
                 height_percent: float, other_studies: Optional[Sequence[Study]] = None):
        super().__init__(context, pane_id)
        y_scale = primary_study.get_y_scale()
        if y_scale is None:
            raise StudyConfigError(
                f"Sub-pane '{pane_id}': primary study '{primary_study.id}' has no value scale")
        if not 0 < height_percent < 1:
            raise LayoutError(
                f"Sub-pane '{pane_id}': height_percent must be between 0 and 1, got {height_percent}")

        self.primary_study = primary_study
        self.height_percent = height_percent
        self.other_studies: List[Study] = list(other_studies or [])
        for study in self.other_studies:
            study.use_y_scale(y_scale)
        self.price_axis = NumericAxis(y_scale, AxisPosition.RIGHT,
                                      context.config.sub_pane_tick_count, context.theme)

    @property
    def studies(self) -> List[Study]:
        return [self.primary_study] + self.other_studies

    def get_y_scale(self) -> NumericScale:
        return self.primary_study.get_y_scale()

    def update_bounds(self, bounds: Bounds) -> None:
        self.bounds = bounds
        for study in self.studies:
            study.update_scale_bounds(bounds)
