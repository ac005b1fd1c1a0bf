"""Timing instrumentation for update and render passes."""

from .performance_tracker import PerformanceTracker

__all__ = ["PerformanceTracker"]
