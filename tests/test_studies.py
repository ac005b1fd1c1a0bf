"""
Tests for study lifecycles, indicator math and batch rendering.
"""

from unittest.mock import Mock

import numpy as np
import pytest

from conftest import make_candle, make_candles
from src.core.errors import StudyConfigError
from src.core.geometry import Bounds
from src.scale.common_scale_manager import CommonScaleManager
from src.studies import (
    BollingerBandsStudy,
    CandleStudy,
    EMAStudy,
    LastPriceLineStudy,
    RSIStudy,
    SMAStudy,
    VolumeStudy,
    rsi_from_closes,
)


def scales_for(candles, x_range=(0, 200), y_range=(0, 400)):
    scales = CommonScaleManager(x_range, y_range)
    scales.update_full_domain([c.timestamp for c in candles])
    scales.update_visible_indices(0, len(candles) - 1)
    lows = [c.low for c in candles]
    highs = [c.high for c in candles]
    scales.update_price_domain(min(lows), max(highs))
    return scales


class TestSMAStudy:

    def test_known_values(self):
        study = SMAStudy(period=3)
        study.reset_candles(make_candles([10, 12, 11, 13, 15]))

        assert study.get_computed_values() == pytest.approx([11, 12, 13])
        assert [p.index for p in study.computed_data] == [2, 3, 4]

    def test_series_length(self):
        study = SMAStudy(period=5)
        study.reset_candles(make_candles(range(20)))
        assert len(study.computed_data) == 20 - 5 + 1

    def test_too_few_candles(self):
        study = SMAStudy(period=5)
        assert study.reset_candles(make_candles([1, 2, 3])) is None
        assert study.computed_data == []

    def test_invalid_period(self):
        with pytest.raises(StudyConfigError):
            SMAStudy(period=0)

    def test_reset_reports_value_range(self):
        study = SMAStudy(period=3)
        update = study.reset_candles(make_candles([10, 12, 11, 13, 15]))
        assert (update.y_domain.min, update.y_domain.max) == pytest.approx((11, 13))

    def test_append_matches_full_recompute(self):
        closes = [10, 12, 11, 13, 15, 14, 18]
        incremental = SMAStudy(period=3)
        candles = make_candles(closes[:5])
        incremental.reset_candles(candles)
        for i in range(5, len(closes)):
            candles.append(make_candle(i, closes[i]))
            incremental.append_new_candle(candles)

        full = SMAStudy(period=3)
        full.reset_candles(make_candles(closes))

        assert incremental.get_computed_values() == pytest.approx(full.get_computed_values())

    def test_update_last_replaces_value(self):
        study = SMAStudy(period=3)
        candles = make_candles([10, 12, 11, 13, 15])
        study.reset_candles(candles)

        candles[-1] = make_candle(4, 21)
        study.update_last_candle(candles)

        assert len(study.computed_data) == 3
        assert study.computed_data[-1].value == pytest.approx(15)

    def test_update_beyond_old_max_reports_domain(self):
        study = SMAStudy(period=3)
        candles = make_candles([10, 12, 11, 13, 15])
        study.reset_candles(candles)

        candles[-1] = make_candle(4, 30)
        update = study.update_last_candle(candles)

        assert update is not None
        assert update.y_domain.max == pytest.approx(18)

    def test_prepend_recomputes(self):
        study = SMAStudy(period=3)
        study.reset_candles(make_candles([13, 15], start_index=3))
        assert study.computed_data == []

        study.prepend_historical_candles(make_candles([10, 12, 11, 13, 15]))
        assert study.get_computed_values() == pytest.approx([11, 12, 13])


class TestEMAStudy:

    def test_seeded_with_sma(self):
        study = EMAStudy(period=3)
        study.reset_candles(make_candles([10, 12, 11, 13, 15]))
        assert study.get_computed_values() == pytest.approx([11, 12, 13.5])

    def test_repeated_updates_use_previous_value(self):
        study = EMAStudy(period=3)
        candles = make_candles([10, 12, 11, 13, 15])
        study.reset_candles(candles)

        for _ in range(3):
            candles[-1] = make_candle(4, 17)
            study.update_last_candle(candles)

        assert study.computed_data[-1].value == pytest.approx(14.5)
        assert len(study.computed_data) == 3

    def test_append_matches_full_recompute(self):
        closes = [10, 12, 11, 13, 15, 14, 18]
        incremental = EMAStudy(period=3)
        candles = make_candles(closes[:4])
        incremental.reset_candles(candles)
        for i in range(4, len(closes)):
            candles.append(make_candle(i, closes[i]))
            incremental.append_new_candle(candles)

        full = EMAStudy(period=3)
        full.reset_candles(make_candles(closes))
        assert incremental.get_computed_values() == pytest.approx(full.get_computed_values())


class TestRSIStudy:

    def test_no_losses_is_exactly_100(self):
        study = RSIStudy(period=14)
        study.reset_candles(make_candles([100 + i for i in range(15)]))
        assert study.get_computed_values() == [100.0]

    def test_needs_period_plus_one_candles(self):
        study = RSIStudy(period=14)
        study.reset_candles(make_candles([100 + i for i in range(14)]))
        assert study.computed_data == []

    def test_equal_gains_and_losses(self):
        closes = np.array([10, 11, 10, 11, 10], dtype=float)
        assert rsi_from_closes(closes) == pytest.approx(50.0)

    def test_values_bounded(self):
        study = RSIStudy(period=5)
        study.reset_candles(make_candles([10, 12, 9, 14, 13, 11, 15, 10, 12]))
        assert all(0 <= v <= 100 for v in study.get_computed_values())

    def test_has_private_scale(self):
        study = RSIStudy()
        scale = study.get_y_scale()
        assert scale is not None
        assert scale.get_domain()[:2] == (0, 100)

    def test_scale_follows_pane_bounds(self):
        study = RSIStudy()
        study.update_scale_bounds(Bounds(0, 500, 100, 150))
        assert study.get_y_scale().get_range() == (500, 650)


class TestBollingerBandsStudy:

    def test_band_values(self):
        study = BollingerBandsStudy(period=3, multiplier=2.0)
        study.reset_candles(make_candles([10, 12, 11]))

        band = study.computed_data[0].value
        std = np.std([10, 12, 11])
        assert band.middle == pytest.approx(11)
        assert band.upper == pytest.approx(11 + 2 * std)
        assert band.lower == pytest.approx(11 - 2 * std)

    def test_domain_spans_outer_bands(self):
        study = BollingerBandsStudy(period=3)
        update = study.reset_candles(make_candles([10, 12, 11, 13, 15]))
        lowers = [v.lower for v in study.get_computed_values()]
        uppers = [v.upper for v in study.get_computed_values()]
        assert update.y_domain.min == pytest.approx(min(lowers))
        assert update.y_domain.max == pytest.approx(max(uppers))


class TestCandleStudy:

    def test_domain_tracks_highs_and_lows(self):
        study = CandleStudy()
        update = study.reset_candles(make_candles([10, 12, 11]))
        assert (update.y_domain.min, update.y_domain.max) == (9, 13)

    def test_update_inside_domain_reports_nothing(self):
        study = CandleStudy()
        candles = make_candles([10, 12, 11])
        study.reset_candles(candles)

        candles[-1] = make_candle(2, 11.5)
        assert study.update_last_candle(candles) is None

    def test_replacing_extreme_recomputes(self):
        study = CandleStudy()
        candles = make_candles([10, 12, 20])
        study.reset_candles(candles)
        assert study.y_max == 21

        candles[-1] = make_candle(2, 11)
        update = study.update_last_candle(candles)

        assert study.y_max == 13
        assert update.y_domain.max == 13

    def test_append(self):
        study = CandleStudy()
        candles = make_candles([10, 12])
        study.reset_candles(candles)
        candles.append(make_candle(2, 30))

        update = study.append_new_candle(candles)

        assert len(study.computed_data) == 3
        assert update.y_domain.max == 31

    def test_renders_visible_window_with_buffer(self, compositor):
        candles = make_candles(range(100, 150))
        scales = scales_for(candles)
        scales.update_visible_indices(20, 29)
        study = CandleStudy()
        study.reset_candles(candles)

        study.render_to(compositor, scales, Bounds(0, 0, 200, 400))

        batch = compositor.rendered_batches()[0]
        assert len(batch) == 10 + 2 * 2

    def test_render_cache_skips_rebuild(self, compositor):
        candles = make_candles(range(100, 120))
        scales = scales_for(candles)
        study = CandleStudy()
        study.reset_candles(candles)
        bounds = Bounds(0, 0, 200, 400)

        study.render_to(compositor, scales, bounds)
        points = study.shape_batch.points
        study.render_to(compositor, scales, bounds)
        assert study.shape_batch.points is points

        scales.update_price_domain(50, 200)
        study.render_to(compositor, scales, bounds)
        assert study.shape_batch.points is not points

    def test_body_geometry(self):
        candles = [make_candle(0, close=12, open_=10, high=14, low=8)]
        scales = CommonScaleManager((0, 100), (0, 100))
        scales.update_full_domain([candles[0].timestamp])
        scales.update_visible_indices(0, 0)
        scales.price_scale.nice = False
        scales.update_price_domain(0, 100)
        study = CandleStudy()
        study.reset_candles(candles)

        point = study.value_to_point(study.computed_data[0], scales, scales.price_scale)

        assert point.x == 50
        assert point.body.width == pytest.approx(70)
        assert point.body.y == pytest.approx(88)
        assert point.body.height == pytest.approx(2)
        assert (point.upper_wick.y1, point.upper_wick.y2) == pytest.approx((86, 88))
        assert point.is_positive


class TestVolumeStudy:

    def test_never_reports_price_domain(self):
        study = VolumeStudy()
        candles = make_candles([10, 12, 11])
        assert study.reset_candles(candles) is None
        candles.append(make_candle(3, 13, volume=5000))
        assert study.append_new_candle(candles) is None

    def test_private_scale_stretches_to_max_volume(self):
        study = VolumeStudy()
        candles = make_candles([10, 12, 11])
        study.reset_candles(candles)
        assert study.max_volume == 1000

        candles.append(make_candle(3, 13, volume=4000))
        study.append_new_candle(candles)

        assert study.max_volume == 4000
        assert study.get_y_scale().get_domain().max >= 4000

    def test_tick_below_peak_skips_rescan(self):
        study = VolumeStudy()
        candles = [make_candle(0, 10, volume=1000), make_candle(1, 11, volume=500)]
        study.reset_candles(candles)
        study._refresh_volume_domain = Mock(wraps=study._refresh_volume_domain)

        candles[-1] = make_candle(1, 12, volume=700)
        study.update_last_candle(candles)

        study._refresh_volume_domain.assert_not_called()
        assert study.max_volume == 1000

    def test_shrinking_peak_rescans(self):
        study = VolumeStudy()
        candles = [make_candle(0, 10, volume=1000), make_candle(1, 11, volume=3000)]
        study.reset_candles(candles)
        study._refresh_volume_domain = Mock(wraps=study._refresh_volume_domain)

        candles[-1] = make_candle(1, 12, volume=800)
        study.update_last_candle(candles)

        study._refresh_volume_domain.assert_called_once()
        assert study.max_volume == 1000

    def test_zero_volume_keeps_usable_scale(self):
        study = VolumeStudy()
        study.reset_candles([make_candle(0, 10, volume=0)])
        domain = study.get_y_scale().get_domain()
        assert domain.max > domain.min


class TestLastPriceLineStudy:

    def test_tracks_last_close(self):
        study = LastPriceLineStudy()
        candles = make_candles([10, 12, 11])
        study.reset_candles(candles)
        assert study.last_price == 11

        candles[-1] = make_candle(2, 11.7)
        study.update_last_candle(candles)
        assert study.last_price == 11.7

    def test_draws_dotted_line_and_label(self, compositor):
        candles = make_candles([10, 12, 11])
        scales = scales_for(candles)
        study = LastPriceLineStudy(decimals=2)
        study.reset_candles(candles)
        bounds = Bounds(0, 0, 200, 400)

        study.render_to(compositor, scales, bounds)
        study.render_infrastructure_to(compositor, scales, bounds)

        (_, line_shapes), (_, label_shapes) = compositor.calls
        line, label = line_shapes[0], label_shapes[0]
        assert line.line_dash == (5.0, 5.0)
        assert line.start.x == 0 and line.end.x == 200
        assert label.text == "11.00"
        assert label.position.x == 202
        assert label.background_color == '#2962FF'

    def test_price_on_domain_boundary_is_visible(self):
        candles = make_candles([10])
        scales = scales_for(candles)
        study = LastPriceLineStudy()
        study.reset_candles(candles)
        domain = scales.price_scale.get_domain()

        study.last_price = domain.max
        assert study.is_price_visible(scales.price_scale)
        study.last_price = domain.max + 1
        assert not study.is_price_visible(scales.price_scale)

    def test_skipped_when_outside_domain(self, compositor):
        candles = make_candles([10, 12, 11])
        scales = scales_for(candles)
        study = LastPriceLineStudy()
        study.reset_candles(candles)
        scales.update_price_domain(1000, 2000)

        study.render_to(compositor, scales, Bounds(0, 0, 200, 400))
        study.render_infrastructure_to(compositor, scales, Bounds(0, 0, 200, 400))

        assert compositor.calls == []
