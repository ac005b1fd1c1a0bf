"""
Tests for PerformanceTracker timing and summaries.
"""

import logging

import pytest

from src.logging import PerformanceTracker


class TestTiming:

    def test_end_returns_elapsed_ms(self):
        tracker = PerformanceTracker()
        tracker.start('render')
        elapsed = tracker.end('render')
        assert elapsed >= 0
        assert tracker.summary()['render']['count'] == 1

    def test_end_without_start(self):
        tracker = PerformanceTracker()
        assert tracker.end('render') == 0.0
        assert tracker.summary() == {}

    def test_measure_returns_result(self):
        tracker = PerformanceTracker()
        assert tracker.measure('calc', lambda: 42) == 42
        assert tracker.summary()['calc']['count'] == 1

    def test_disabled_records_nothing(self):
        tracker = PerformanceTracker(enabled=False)
        tracker.start('render')
        assert tracker.end('render') == 0.0
        assert tracker.measure('calc', lambda: 'ok') == 'ok'
        assert tracker.summary() == {}


class TestSummary:

    def test_statistics(self):
        tracker = PerformanceTracker()
        for ms in [1.0, 2.0, 3.0, 4.0]:
            tracker._record('update', ms, None)

        stats = tracker.summary()['update']
        assert stats['count'] == 4
        assert stats['mean_ms'] == pytest.approx(2.5)
        assert stats['max_ms'] == 4.0
        assert 3.0 < stats['p95_ms'] <= 4.0

    def test_sample_history_is_bounded(self):
        tracker = PerformanceTracker(max_samples=3)
        for ms in [10.0, 1.0, 1.0, 1.0]:
            tracker._record('update', ms, None)
        assert tracker.summary()['update']['max_ms'] == 1.0

    def test_slow_samples_logged(self, caplog):
        tracker = PerformanceTracker(slow_threshold_ms=5.0)
        with caplog.at_level(logging.DEBUG, logger='src.logging.performance_tracker'):
            tracker._record('render', 20.0, 'frame=3')
            tracker._record('render', 1.0, None)
        assert len(caplog.records) == 1
        assert 'frame=3' in caplog.records[0].getMessage()

    def test_log_summary_and_reset(self, caplog):
        tracker = PerformanceTracker()
        tracker._record('render', 2.0, None)
        with caplog.at_level(logging.INFO, logger='src.logging.performance_tracker'):
            tracker.log_summary()
        assert 'render: n=1' in caplog.text

        tracker.reset()
        assert tracker.summary() == {}
