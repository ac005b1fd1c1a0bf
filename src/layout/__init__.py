"""Pane layout: shared context, main pane, sub-panes and their manager."""

from .context import ChartContext
from .pane import Pane
from .main_pane import MAIN_PANE_ID, MainPane
from .sub_pane import SubPane
from .pane_manager import PaneManager, PaneUpdates

__all__ = [
    "ChartContext",
    "Pane",
    "MAIN_PANE_ID",
    "MainPane",
    "SubPane",
    "PaneManager",
    "PaneUpdates",
]
