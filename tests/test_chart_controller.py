"""
Tests for ChartController reactions to store changes.
"""

from unittest.mock import Mock

import pytest

from conftest import make_candle, make_candles
from src.chart.chart_controller import ChartController
from src.chart.render_batcher import RenderBatcher
from src.core.config import ChartConfig
from src.data.time_series_store import ChangeType, TimeSeriesStore
from src.layout import ChartContext, MainPane, PaneManager
from src.studies import CandleStudy


@pytest.fixture
def context():
    return ChartContext.create(ChartConfig())


@pytest.fixture
def scales(context):
    return context.scales


@pytest.fixture
def candle_study():
    return CandleStudy()


@pytest.fixture
def batcher():
    return Mock(spec=RenderBatcher)


@pytest.fixture
def store():
    return TimeSeriesStore()


@pytest.fixture
def controller(context, candle_study, store, batcher):
    manager = PaneManager(context, MainPane(context, candle_study))
    return ChartController(store, context.scales, manager, batcher, context.config)


@pytest.fixture
def loaded(controller, scales, batcher):
    """Controller with 50 candles, showing indices 30..49."""
    controller.load_initial_data(make_candles([100 + i for i in range(50)]))
    scales.update_visible_indices(30, 49)
    batcher.reset_mock()
    return controller


class TestInitialLoad:

    def test_shows_everything_and_requests_render(self, controller, scales, batcher):
        controller.load_initial_data(make_candles(range(100, 150)))

        assert scales.get_domain_length() == 50
        assert scales.get_visible_indices() == (0, 49)
        batcher.request_render.assert_called()

    def test_studies_receive_candles(self, controller, candle_study):
        controller.load_initial_data(make_candles([10, 12, 11]))
        assert len(candle_study.computed_data) == 3


class TestAppend:

    def test_follows_live_edge(self, loaded, scales):
        change = loaded.handle_realtime_update(make_candle(50, 200))

        assert change == ChangeType.APPEND
        assert scales.get_visible_indices() == (31, 50)

    def test_refits_price_for_new_high(self, loaded, scales):
        loaded.handle_realtime_update(make_candle(50, 500))
        assert scales.price_scale.get_domain().max >= 501

    def test_history_view_stays_put(self, loaded, scales, batcher):
        scales.update_visible_indices(10, 29)
        price_version = scales.price_scale.version

        loaded.handle_realtime_update(make_candle(50, 500))

        assert scales.get_visible_indices() == (10, 29)
        assert scales.price_scale.version == price_version
        batcher.request_render.assert_called_once()

    def test_first_candle_shows_it(self, controller, scales):
        controller.handle_realtime_update(make_candle(0, 10))
        assert scales.get_visible_indices() == (0, 0)


class TestPrepend:

    def test_window_shifts_by_added_count(self, controller, scales, store):
        controller.load_initial_data(make_candles(range(100, 150), start_index=10))
        scales.update_visible_indices(30, 49)
        anchored = scales.time_scale.get_full_domain()[30]

        added = controller.load_more_historical(make_candles(range(90, 100)))

        assert added == 10
        assert scales.get_visible_indices() == (40, 59)
        assert scales.time_scale.get_full_domain()[40] == anchored

    def test_overlap_only_counts_new_candles(self, controller, scales):
        controller.load_initial_data(make_candles(range(100, 150), start_index=5))
        scales.update_visible_indices(30, 49)

        added = controller.load_more_historical(make_candles(range(90, 100)))

        assert added == 5
        assert scales.get_visible_indices() == (35, 54)


class TestUpdate:

    def test_visible_update_refits(self, loaded, scales):
        change = loaded.handle_realtime_update(make_candle(49, 400))

        assert change == ChangeType.UPDATE
        assert scales.price_scale.get_domain().max >= 401

    def test_off_screen_update_renders_without_refit(self, loaded, scales, batcher, candle_study):
        scales.update_visible_indices(10, 29)
        price_version = scales.price_scale.version

        loaded.handle_realtime_update(make_candle(49, 400))

        assert scales.price_scale.version == price_version
        batcher.request_render.assert_called_once()
        assert candle_study.y_max == 401


class TestReset:

    def test_window_kept_when_still_valid(self, loaded, scales, store):
        store.reset(make_candles(range(100, 160)))
        assert scales.get_visible_indices() == (30, 49)

    def test_window_falls_back_to_everything(self, loaded, scales, store):
        store.reset(make_candles(range(100, 120)))
        assert scales.get_visible_indices() == (0, 19)


class TestPriceRefit:

    def test_padding_ratio(self, controller, scales):
        scales.price_scale.nice = False
        controller.load_initial_data(make_candles([10, 12, 11]))

        domain = scales.price_scale.get_domain()
        assert domain.min == pytest.approx(9 - 4 * 0.02)
        assert domain.max == pytest.approx(13 + 4 * 0.02)

    def test_only_visible_candles_count(self, controller, scales):
        scales.price_scale.nice = False
        controller.load_initial_data(make_candles([10, 50, 11, 12, 13]))
        scales.update_visible_indices(2, 4)

        controller.recalculate_price_scales_from_visible_candles()

        domain = scales.price_scale.get_domain()
        assert domain.max < 20

    def test_flat_prices_padded_by_one_percent(self, controller, scales):
        scales.price_scale.nice = False
        flat = [make_candle(i, 100, high=100, low=100) for i in range(5)]
        controller.load_initial_data(flat)

        domain = scales.price_scale.get_domain()
        assert (domain.min, domain.max) == pytest.approx((99, 101))

    def test_empty_store_is_noop(self, controller, scales, batcher):
        version = scales.price_scale.version
        controller.recalculate_price_scales_from_visible_candles()
        assert scales.price_scale.version == version
        batcher.request_render.assert_not_called()


def test_destroy_detaches(loaded, store, batcher, scales):
    loaded.destroy()
    batcher.destroy.assert_called_once()

    store.add(make_candle(50, 200))
    assert scales.get_domain_length() == 50
