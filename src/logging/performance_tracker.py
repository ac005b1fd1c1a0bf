"""
Performance Tracker Module

Lightweight timing of chart update and render passes.

Key Features:
- Named start/end timers with millisecond durations
- measure() wrapper for timing a callable
- Per-label sample history with count, mean, p95 and max summaries
- Slow-operation logging at DEBUG above a configurable threshold
- Disabled trackers cost one attribute check per call
"""

import logging
import time
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, TypeVar

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar('T')

# One frame at 60 Hz
DEFAULT_SLOW_THRESHOLD_MS = 16.7


class PerformanceTracker:
    """
    Collects durations per label.

    Args:
        enabled: Record timings (when False every call is a no-op)
        slow_threshold_ms: Durations above this are logged at DEBUG
        max_samples: Samples kept per label (oldest dropped first)
    """

    def __init__(self,
                 enabled: bool = True,
                 slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
                 max_samples: int = 1000):
        self.enabled = enabled
        self.slow_threshold_ms = slow_threshold_ms
        self.max_samples = max_samples
        self._started: Dict[str, float] = {}
        self._samples: Dict[str, List[float]] = defaultdict(list)

    def start(self, label: str) -> None:
        if not self.enabled:
            return
        self._started[label] = time.perf_counter()

    def end(self, label: str, info: Optional[str] = None) -> float:
        """
        Stop the timer for `label`.

        Returns:
            Elapsed milliseconds, or 0.0 when disabled or never started
        """
        if not self.enabled:
            return 0.0
        started = self._started.pop(label, None)
        if started is None:
            return 0.0
        duration_ms = (time.perf_counter() - started) * 1000
        self._record(label, duration_ms, info)
        return duration_ms

    def measure(self, label: str, fn: Callable[[], T], info: Optional[str] = None) -> T:
        """Run `fn` and record how long it took."""
        if not self.enabled:
            return fn()
        started = time.perf_counter()
        result = fn()
        self._record(label, (time.perf_counter() - started) * 1000, info)
        return result

    def _record(self, label: str, duration_ms: float, info: Optional[str]) -> None:
        samples = self._samples[label]
        samples.append(duration_ms)
        if len(samples) > self.max_samples:
            del samples[0]
        if duration_ms > self.slow_threshold_ms:
            suffix = f" ({info})" if info else ""
            logger.debug(f"Slow {label}: {duration_ms:.1f}ms{suffix}")

    def summary(self) -> Dict[str, Dict[str, Any]]:
        """
        Statistics per label.

        Returns:
            {label: {'count', 'mean_ms', 'p95_ms', 'max_ms'}}
        """
        result = {}
        for label, samples in self._samples.items():
            if not samples:
                continue
            values = np.asarray(samples)
            result[label] = {
                'count': len(samples),
                'mean_ms': float(values.mean()),
                'p95_ms': float(np.percentile(values, 95)),
                'max_ms': float(values.max()),
            }
        return result

    def log_summary(self) -> None:
        for label, stats in self.summary().items():
            logger.info(f"{label}: n={stats['count']} mean={stats['mean_ms']:.2f}ms "
                        f"p95={stats['p95_ms']:.2f}ms max={stats['max_ms']:.2f}ms")

    def reset(self) -> None:
        self._started.clear()
        self._samples.clear()
