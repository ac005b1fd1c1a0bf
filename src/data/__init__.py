"""Candle model, storage and data sources."""

from .candle import CandleDuration, HistoricalBatch, OHLCCandle
from .time_series_store import ChangeType, TimeSeriesStore
from .data_manager import DataManager, RealtimeCallback
from .simulator import (
    DataSimulator,
    SimulatorConfig,
    SimulatorDataManager,
    Volatility,
    VolatilityProfile,
)
from .ohlc_loader import dataframe_to_candles, detect_format, load_ohlc
from .csv_data_manager import CsvDataManager

__all__ = [
    "CandleDuration",
    "HistoricalBatch",
    "OHLCCandle",
    "ChangeType",
    "TimeSeriesStore",
    "DataManager",
    "RealtimeCallback",
    "DataSimulator",
    "SimulatorConfig",
    "SimulatorDataManager",
    "Volatility",
    "VolatilityProfile",
    "dataframe_to_candles",
    "detect_format",
    "load_ohlc",
    "CsvDataManager",
]
