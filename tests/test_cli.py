"""
Tests for the chart-engine command line.
"""

import argparse

import pytest

from src.cli.main import create_parser, main, parse_studies


class TestParseStudies:

    def test_comma_list(self):
        assert parse_studies("sma, EMA,rsi") == ['sma', 'ema', 'rsi']

    def test_unknown_study(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_studies("sma,macd")


class TestParser:

    def test_render_defaults(self):
        args = create_parser().parse_args(['render'])
        assert args.source == 'simulator'
        assert args.studies == []
        assert (args.width, args.height) == (1200, 800)

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert 'render' in capsys.readouterr().out


class TestRender:

    def test_simulator_chart_with_sub_panes(self, tmp_path):
        output = tmp_path / "chart.png"
        code = main(['render', '--output', str(output), '--seed', '1',
                     '--studies', 'sma,bb,volume,rsi', '--candles', '200',
                     '--ticks', '5', '--zoom-in', '2'])
        assert code == 0
        assert output.stat().st_size > 0

    def test_pan_pages_in_history(self, tmp_path):
        output = tmp_path / "paged.png"
        code = main(['render', '--output', str(output), '--seed', '2',
                     '--candles', '400', '--batch-size', '200', '--pan', '-100',
                     '--theme', 'light', '--utc'])
        assert code == 0
        assert output.exists()

    def test_csv_source(self, tmp_path):
        csv_path = tmp_path / "bars.csv"
        rows = ["time,open,high,low,close,volume"]
        for i in range(60):
            price = 100 + i % 7
            rows.append(f"{1704187800 + i * 300},{price},{price + 2},{price - 2},{price + 1},{50 + i}")
        csv_path.write_text("\n".join(rows) + "\n")
        output = tmp_path / "csv.svg"

        code = main(['render', '--source', 'csv', '--csv', str(csv_path),
                     '--output', str(output), '--studies', 'ema'])

        assert code == 0
        assert output.read_text().startswith('<?xml')

    def test_csv_source_requires_path(self, tmp_path):
        assert main(['render', '--source', 'csv', '--output', str(tmp_path / "x.png")]) == 1

    def test_missing_csv_file(self, tmp_path):
        code = main(['render', '--source', 'csv', '--csv', str(tmp_path / "missing.csv"),
                     '--output', str(tmp_path / "x.png")])
        assert code == 1
