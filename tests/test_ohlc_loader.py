"""
Tests for CSV candle loading and DataFrame conversion.
"""

import pandas as pd
import pytest

from src.data.ohlc_loader import (
    FORMAT_SEMICOLON,
    FORMAT_TRADINGVIEW,
    dataframe_to_candles,
    detect_format,
    load_ohlc,
)


@pytest.fixture
def semicolon_file(tmp_path):
    path = tmp_path / "es_1m.csv"
    path.write_text(
        "02/01/2024;09:31:00;101;103;100;102;800\n"
        "02/01/2024;09:30:00;100;102;99;101;1000\n"
        "02/01/2024;09:31:00;101;104;100;103;900\n"
    )
    return str(path)


@pytest.fixture
def tradingview_file(tmp_path):
    path = tmp_path / "tv.csv"
    path.write_text(
        "time,open,high,low,close,Volume\n"
        "1704187800,100,102,99,101,1000\n"
        "1704187860,101,103,100,102,\n"
        "1704187920,102,101,100,100.5,500\n"
    )
    return str(path)


class TestDetectFormat:

    def test_semicolon(self, semicolon_file):
        assert detect_format(semicolon_file) == FORMAT_SEMICOLON

    def test_tradingview_header(self, tradingview_file):
        assert detect_format(tradingview_file) == FORMAT_TRADINGVIEW

    def test_headerless_epoch_rows(self, tmp_path):
        path = tmp_path / "raw.csv"
        path.write_text("1704187800,100,102,99,101,1000\n")
        assert detect_format(str(path)) == FORMAT_TRADINGVIEW

    def test_unknown_layout(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello world\n")
        with pytest.raises(ValueError):
            detect_format(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            detect_format(str(tmp_path / "nope.csv"))


class TestLoadOhlc:

    def test_sorted_utc_index(self, semicolon_file):
        df = load_ohlc(semicolon_file)

        assert list(df.columns) == ['open', 'high', 'low', 'close', 'volume']
        assert df.index.name == 'timestamp'
        assert str(df.index.tz) == 'UTC'
        assert df.index.is_monotonic_increasing
        assert df.index[0] == pd.Timestamp('2024-01-02 09:30:00', tz='UTC')

    def test_duplicate_timestamps_keep_last(self, semicolon_file):
        df = load_ohlc(semicolon_file)
        assert len(df) == 2
        assert df['close'].iloc[-1] == 103

    def test_inconsistent_rows_dropped(self, tradingview_file):
        df = load_ohlc(tradingview_file)
        # third row has high below open
        assert len(df) == 2

    def test_missing_volume_becomes_zero(self, tradingview_file):
        df = load_ohlc(tradingview_file)
        assert df['volume'].iloc[1] == 0.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(ValueError):
            load_ohlc(str(path))

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "partial.csv"
        path.write_text("time,open,high\n1704187800,100,102\n")
        with pytest.raises(ValueError):
            load_ohlc(str(path))


class TestDataframeToCandles:

    def test_epoch_milliseconds(self, tradingview_file):
        candles = dataframe_to_candles(load_ohlc(tradingview_file))

        assert [c.timestamp for c in candles] == [1704187800000, 1704187860000]
        assert candles[0].open == 100.0
        assert candles[0].volume == 1000.0

    def test_timestamp_column_and_no_volume(self):
        df = pd.DataFrame({
            'timestamp': pd.to_datetime([0, 60], unit='s', utc=True),
            'open': [1.0, 2.0],
            'high': [2.0, 3.0],
            'low': [0.5, 1.5],
            'close': [1.5, 2.5],
        })
        candles = dataframe_to_candles(df)
        assert [c.timestamp for c in candles] == [0, 60_000]
        assert all(c.volume == 0.0 for c in candles)

    def test_empty_frame(self):
        assert dataframe_to_candles(pd.DataFrame()) == []
