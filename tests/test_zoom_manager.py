"""
Tests for right-anchored zoom and clamped pan.
"""

from unittest.mock import Mock

import pytest

from src.chart.zoom_manager import ZoomManager
from src.core.config import ZoomConfig
from src.scale.common_scale_manager import CommonScaleManager


@pytest.fixture
def scales():
    manager = CommonScaleManager((0, 1000), (0, 500))
    manager.update_full_domain([i * 60_000 for i in range(100)])
    manager.update_visible_indices(80, 99)
    return manager


@pytest.fixture
def zoom(scales):
    return ZoomManager(scales)


class TestZoom:

    def test_zoom_in_keeps_end_fixed(self, zoom, scales):
        assert zoom.zoom_in(2)
        start, end = scales.get_visible_indices()
        assert end == 99
        assert start == pytest.approx(89, abs=0.5)

    def test_zoom_out_keeps_end_fixed(self, zoom, scales):
        scales.update_visible_indices(89, 99)
        assert zoom.zoom_out(2)
        assert scales.get_visible_indices() == (79, 99)

    def test_zoom_in_stops_at_min_visible(self, zoom, scales):
        scales.update_visible_indices(89, 99)
        assert not zoom.can_zoom_in()
        assert not zoom.zoom_in(2)
        assert scales.get_visible_indices() == (89, 99)

    def test_zoom_out_clamps_start_at_zero(self, zoom, scales):
        scales.update_visible_indices(10, 99)
        zoom.zoom_out(2)
        assert scales.get_visible_indices() == (0, 99)
        assert not zoom.can_zoom_out()

    def test_zoom_out_respects_max_visible(self, scales):
        zoom = ZoomManager(scales, ZoomConfig(min_visible_candles=5, max_visible_candles=50))
        zoom.zoom_out(10)
        assert scales.get_visible_indices() == (49, 99)

    def test_default_factor_from_config(self, scales):
        zoom = ZoomManager(scales, ZoomConfig(zoom_factor=1.5))
        scales.update_visible_indices(69, 99)
        zoom.zoom_in()
        assert scales.get_visible_indices() == (79, 99)

    def test_empty_domain_is_noop(self):
        zoom = ZoomManager(CommonScaleManager((0, 100), (0, 100)))
        assert not zoom.zoom_in()
        assert not zoom.zoom_out()
        assert not zoom.pan(5)
        assert zoom.get_zoom_level() == 100.0


class TestPan:

    def test_pan_back_in_time(self, zoom, scales):
        assert zoom.pan(-10)
        assert scales.get_visible_indices() == (70, 89)

    def test_pan_clamps_at_start_preserving_span(self, zoom, scales):
        zoom.pan(-100)
        start, end = scales.get_visible_indices()
        assert start == 0
        assert end - start == 19

    def test_pan_clamps_at_end(self, zoom, scales):
        scales.update_visible_indices(50, 69)
        zoom.pan(1000)
        assert scales.get_visible_indices() == (80, 99)

    def test_pan_past_live_edge_does_not_move(self, zoom, scales):
        assert not zoom.pan(5)
        assert not zoom.can_pan_right()
        assert zoom.can_pan_left()


class TestQueries:

    def test_zoom_level(self, zoom):
        assert zoom.get_zoom_level() == pytest.approx(20.0)

    def test_reset_zoom_shows_everything(self, zoom, scales):
        assert zoom.reset_zoom()
        assert scales.get_visible_indices() == (0, 99)
        assert zoom.get_zoom_level() == pytest.approx(100.0)

    def test_on_change_only_when_window_moves(self, scales):
        listener = Mock()
        zoom = ZoomManager(scales, on_change=listener)

        zoom.pan(5)
        listener.assert_not_called()

        zoom.zoom_in(2)
        listener.assert_called_once_with(89.0, 99.0)
