"""
Tests for pane layout and frame layer order.
"""

import pytest

from conftest import make_candles
from src.chart.multi_pane_renderer import MultiPaneRenderer
from src.core.config import ChartConfig
from src.core.errors import LayoutError
from src.core.geometry import Bounds
from src.layout import ChartContext, MainPane, PaneManager
from src.studies import CandleStudy, RSIStudy, VolumeStudy


@pytest.fixture
def context():
    return ChartContext.create(ChartConfig())


@pytest.fixture
def manager(context):
    return PaneManager(context, MainPane(context, CandleStudy()))


def load(context, manager, candles):
    context.scales.update_full_domain([c.timestamp for c in candles])
    context.scales.update_visible_indices(0, len(candles) - 1)
    manager.reset_candles(candles)
    context.scales.update_price_domain(min(c.low for c in candles), max(c.high for c in candles))


class TestLayout:

    def test_single_pane_fills_chart_area(self, context, manager, compositor):
        renderer = MultiPaneRenderer(context, manager, compositor)

        assert renderer.chart_area() == Bounds(60, 60, 1080, 680)
        assert manager.main_pane.bounds == Bounds(60, 60, 1080, 680)
        assert context.scales.time_scale.get_range() == (60, 1140)

    def test_sub_pane_below_main_with_spacing(self, context, manager, compositor):
        manager.add_sub_pane('rsi-pane', RSIStudy(), 0.2)
        renderer = MultiPaneRenderer(context, manager, compositor)

        bounds = renderer.get_pane_bounds()
        available = 680 - 16
        assert bounds['main'].height == pytest.approx(available * 0.8)
        assert bounds['rsi-pane'].height == pytest.approx(available * 0.2)
        assert bounds['rsi-pane'].y == pytest.approx(bounds['main'].bottom + 16)
        assert bounds['rsi-pane'].bottom == pytest.approx(740)

    def test_sub_panes_must_leave_room(self, context, manager, compositor):
        manager.add_sub_pane('volume-pane', VolumeStudy(), 0.5)
        manager.add_sub_pane('rsi-pane', RSIStudy(), 0.5)
        with pytest.raises(LayoutError):
            MultiPaneRenderer(context, manager, compositor)

    def test_setup_before_first_frame(self, context, manager, compositor):
        MultiPaneRenderer(context, manager, compositor)
        assert compositor.calls[0] == ('setup_high_dpi', (1200, 800))


class TestFrame:

    @pytest.fixture
    def renderer(self, context, manager, compositor, candles):
        manager.add_sub_pane('volume-pane', VolumeStudy(), 0.15)
        renderer = MultiPaneRenderer(context, manager, compositor)
        load(context, manager, candles)
        compositor.reset()
        return renderer

    def test_layer_order(self, renderer, compositor):
        renderer.render()
        names = compositor.names()

        assert names[0] == 'clear'
        first_clip = names.index('set_clip_region')
        assert all(n == 'render_shapes' for n in names[1:first_clip])
        assert names.count('set_clip_region') == 2
        assert names.count('clear_clip_region') == 2
        border = names.index('draw_border')
        assert border > len(names) - 1 - names[::-1].index('clear_clip_region')
        # axis lines then labels for two panes plus the time axis
        assert names[border + 1:] == ['render_shapes'] * 6

    def test_pane_content_inside_clip(self, renderer, compositor):
        renderer.render()
        names = compositor.names()
        start = names.index('set_clip_region')
        end = names.index('clear_clip_region')
        assert names[start + 1:end] == ['render']

    def test_time_labels_under_last_pane(self, renderer, compositor):
        renderer.render()
        _, labels = compositor.calls[-1]
        sub_bounds = renderer.get_pane_bounds()['volume-pane']
        assert labels
        assert all(label.position.y == pytest.approx(sub_bounds.bottom + 14) for label in labels)

    def test_frame_counter(self, renderer):
        renderer.render()
        renderer.render()
        assert renderer.frames_rendered == 2


def test_empty_chart_renders_frame(context, manager, compositor):
    renderer = MultiPaneRenderer(context, manager, compositor)
    compositor.reset()
    renderer.render()
    assert compositor.names()[0] == 'clear'
    assert 'draw_border' in compositor.names()
    assert compositor.rendered_batches() == []


def test_loaded_candles_reach_compositor(context, manager, compositor):
    renderer = MultiPaneRenderer(context, manager, compositor)
    load(context, manager, make_candles(range(100, 130)))
    compositor.reset()
    renderer.render()
    assert len(compositor.rendered_batches()) == 1
