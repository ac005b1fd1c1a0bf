"""
Error types raised by the chart engine.

Only configuration mistakes and unanswerable queries are raised. Degenerate
numeric states (NaN or infinite scale positions) are skipped by the caller
and logged instead.
"""


class ChartEngineError(Exception):
    """Base class for all chart engine errors."""


class LayoutError(ChartEngineError, ValueError):
    """Pane heights or padding leave no room for the main pane."""


class EmptyDomainError(ChartEngineError, ValueError):
    """A pixel was inverted on a scale that has no domain values."""


class StudyConfigError(ChartEngineError, ValueError):
    """A study was configured with invalid parameters or placed in the wrong pane."""


class DataSourceError(ChartEngineError):
    """The data manager failed to deliver candles."""
