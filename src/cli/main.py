"""
Main CLI Module for the Chart Engine

Renders candlestick charts to image files from simulated or CSV data.

Commands:
- render: Build a chart, apply navigation, draw one frame and save it

Examples:
    chart-engine render --source simulator --studies sma,bb,volume,rsi
    chart-engine render --source csv --csv data/es_5m.csv --zoom-in 3 --pan -40
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from src.core.config import ChartConfig
from src.core.errors import ChartEngineError
from src.core.geometry import ChartSize
from src.core.theme import Theme
from src.data.candle import CandleDuration
from src.data.csv_data_manager import CsvDataManager
from src.data.data_manager import DataManager
from src.data.simulator import SimulatorConfig, SimulatorDataManager, Volatility
from src.chart.chart import Chart
from src.logging.performance_tracker import PerformanceTracker
from src.studies import (
    BollingerBandsStudy,
    CandleStudy,
    EMAStudy,
    LastPriceLineStudy,
    RSIStudy,
    SMAStudy,
    VolumeStudy,
)
from src.visualization.matplotlib_compositor import MatplotlibCompositor

logger = logging.getLogger(__name__)

AVAILABLE_STUDIES = ('sma', 'ema', 'bb', 'volume', 'rsi')


def parse_studies(value: str) -> List[str]:
    """Split a comma-separated study list and reject unknown names."""
    names = [name.strip().lower() for name in value.split(',') if name.strip()]
    unknown = [name for name in names if name not in AVAILABLE_STUDIES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown studies: {', '.join(unknown)} (choose from {', '.join(AVAILABLE_STUDIES)})")
    return names


def build_data_manager(args) -> DataManager:
    if args.source == 'csv':
        if not args.csv:
            raise ChartEngineError("--csv is required with --source csv")
        return CsvDataManager(args.csv, batch_size=args.batch_size)
    config = SimulatorConfig(
        volatility=Volatility(args.volatility),
        candle_duration=CandleDuration(args.duration),
        seed=args.seed,
    )
    return SimulatorDataManager(config, historical_batch_size=args.batch_size,
                                initial_historical_count=args.candles)


def add_studies(chart: Chart, study_names: List[str], theme: Theme) -> None:
    """Attach the requested studies: overlays on the main pane, oscillators below."""
    for name in study_names:
        if name == 'sma':
            chart.add_overlay_study(SMAStudy(period=20))
        elif name == 'ema':
            chart.add_overlay_study(EMAStudy(period=12))
        elif name == 'bb':
            chart.add_overlay_study(BollingerBandsStudy(period=20, multiplier=2.0))
        elif name == 'volume':
            chart.create_sub_pane('volume', VolumeStudy(theme), 0.15)
        elif name == 'rsi':
            chart.create_sub_pane('rsi', RSIStudy(period=14), 0.2)
    chart.add_overlay_study(LastPriceLineStudy(color=theme.colors.last_price_line))


async def run_render(args) -> int:
    theme = Theme.light() if args.theme == 'light' else Theme.dark()
    config = ChartConfig(
        size=ChartSize(args.width, args.height),
        theme=theme,
        timezone_offset_ms=0 if args.utc else ChartConfig().timezone_offset_ms,
    )
    tracker = PerformanceTracker(enabled=args.verbose)
    data_manager = build_data_manager(args)
    compositor = MatplotlibCompositor(dpi=args.dpi, theme=theme)
    chart = Chart(CandleStudy(theme), data_manager, compositor, config, tracker=tracker)

    try:
        await chart.initialize()
        add_studies(chart, args.studies, theme)

        if isinstance(data_manager, SimulatorDataManager):
            for _ in range(args.ticks):
                data_manager.tick()

        for _ in range(args.zoom_in):
            chart.zoom_in()
        if args.pan:
            chart.pan(args.pan)
            await chart.wait_for_history_load()

        chart.render_now()
        compositor.save(args.output)
    finally:
        chart.destroy()

    start, end = chart.get_visible_indices()
    logger.info(f"Rendered candles {start}..{end} of {len(chart.get_candles())} "
                f"(zoom {chart.get_zoom_level():.1f}%) to {args.output}")
    if args.verbose:
        tracker.log_summary()
    return 0


def create_parser():
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="OHLC candlestick chart engine",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    render_parser = subparsers.add_parser('render', help='Render a chart to an image file')
    render_parser.add_argument('--source', choices=['simulator', 'csv'], default='simulator',
                               help='Candle source (default: simulator)')
    render_parser.add_argument('--csv', help='CSV file for --source csv')
    render_parser.add_argument('--output', '-o', default='chart.png',
                               help='Output image path (default: chart.png)')
    render_parser.add_argument('--width', type=int, default=1200, help='Width in pixels')
    render_parser.add_argument('--height', type=int, default=800, help='Height in pixels')
    render_parser.add_argument('--dpi', type=int, default=100, help='Output resolution')
    render_parser.add_argument('--theme', choices=['dark', 'light'], default='dark')
    render_parser.add_argument('--studies', type=parse_studies, default=[],
                               help=f"Comma-separated studies: {','.join(AVAILABLE_STUDIES)}")
    render_parser.add_argument('--zoom-in', type=int, default=0,
                               help='Number of zoom-in steps to apply')
    render_parser.add_argument('--pan', type=float, default=0,
                               help='Candles to pan by (negative moves back in time)')
    render_parser.add_argument('--utc', action='store_true',
                               help='Label the time axis in UTC instead of IST')
    render_parser.add_argument('--batch-size', type=int, default=500,
                               help='History batch size (default: 500)')
    render_parser.add_argument('--candles', type=int, default=500,
                               help='Simulator: initial history length (default: 500)')
    render_parser.add_argument('--ticks', type=int, default=0,
                               help='Simulator: realtime ticks to apply before rendering')
    render_parser.add_argument('--volatility', choices=[v.value for v in Volatility],
                               default=Volatility.MEDIUM.value)
    render_parser.add_argument('--duration', choices=[d.value for d in CandleDuration],
                               default=CandleDuration.ONE_MINUTE.value)
    render_parser.add_argument('--seed', type=int, help='Simulator random seed')
    render_parser.add_argument('--verbose', '-v', action='store_true',
                               help='Enable debug logging and timing summary')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == 'render':
        try:
            return asyncio.run(run_render(args))
        except (ChartEngineError, FileNotFoundError, ValueError) as e:
            logger.error(f"Render failed: {e}")
            return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
