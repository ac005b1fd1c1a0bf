"""Shared state handed to panes: configuration plus the common scales."""

from dataclasses import dataclass

from src.core.config import ChartConfig
from src.core.geometry import ChartPadding, ChartSize, calc_x_range, calc_y_range
from src.core.theme import Theme
from src.scale.common_scale_manager import CommonScaleManager


@dataclass
class ChartContext:
    config: ChartConfig
    scales: CommonScaleManager

    @classmethod
    def create(cls, config: ChartConfig) -> "ChartContext":
        scales = CommonScaleManager(
            calc_x_range(config.size, config.padding),
            calc_y_range(config.size, config.padding),
            price_tick_count=config.main_tick_count,
        )
        return cls(config=config, scales=scales)

    @property
    def size(self) -> ChartSize:
        return self.config.size

    @property
    def padding(self) -> ChartPadding:
        return self.config.padding

    @property
    def theme(self) -> Theme:
        return self.config.theme
