"""
OHLC CSV Loader Module

Reads candle files into a normalized pandas DataFrame and converts frames
into OHLCCandle lists for the chart.

Key Features:
- Format detection for semicolon historical exports and comma TradingView exports
- Vectorized timestamp parsing to UTC
- Duplicate timestamp removal (last occurrence wins)
- OHLC consistency filtering
- DataFrame to candle conversion with epoch-millisecond timestamps
"""

import logging
import os
from typing import List

import numpy as np
import pandas as pd

from .candle import OHLCCandle

logger = logging.getLogger(__name__)

FORMAT_SEMICOLON = "format_a"
FORMAT_TRADINGVIEW = "format_b"


def detect_format(filepath: str) -> str:
    """
    Detect the layout of a candle CSV file.

    Args:
        filepath: Path to the CSV file.

    Returns:
        "format_a" for semicolon-separated DD/MM/YYYY;HH:MM:SS rows,
        "format_b" for comma-separated files with a time header or epoch seconds.

    Raises:
        FileNotFoundError, ValueError.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(filepath, 'r') as f:
        lines = [f.readline() for _ in range(10)]
    lines = [line.strip() for line in lines if line.strip()]
    if not lines:
        raise ValueError("File is empty")

    first_line = lines[0]
    if ';' in first_line:
        return FORMAT_SEMICOLON

    if ',' in first_line:
        lowered = first_line.lower()
        if "time" in lowered and "open" in lowered:
            return FORMAT_TRADINGVIEW
        if first_line.split(',')[0].replace('.', '', 1).isdigit():
            return FORMAT_TRADINGVIEW

    raise ValueError("Could not detect CSV format. Expected semicolon-separated "
                     "historical format or comma-separated TradingView format.")


def load_ohlc(filepath: str) -> pd.DataFrame:
    """
    Load a candle CSV into a DataFrame indexed by UTC timestamp.

    Args:
        filepath: Path to the CSV file.

    Returns:
        DataFrame with columns open, high, low, close, volume, sorted by a
        unique UTC DatetimeIndex named 'timestamp'.

    Raises:
        FileNotFoundError, ValueError.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")
    if os.path.getsize(filepath) == 0:
        raise ValueError("File is empty")

    fmt = detect_format(filepath)

    try:
        if fmt == FORMAT_SEMICOLON:
            df = pd.read_csv(
                filepath,
                sep=';',
                header=None,
                names=['date', 'time', 'open', 'high', 'low', 'close', 'volume'],
                dtype={'date': str, 'time': str},
                engine='c'
            )
            datetime_str = df['date'] + ' ' + df['time']
            df['timestamp'] = pd.to_datetime(datetime_str, format='%d/%m/%Y %H:%M:%S', utc=True)
            df.drop(columns=['date', 'time'], inplace=True)
        else:
            with open(filepath, 'r') as f:
                first_line = f.readline()
            has_header = not first_line.split(',')[0].replace('.', '', 1).isdigit()
            if has_header:
                df = pd.read_csv(filepath, sep=',', engine='c')
                df.columns = df.columns.str.lower()
            else:
                df = pd.read_csv(filepath, sep=',', header=None, engine='c')
                df.columns = ['time', 'open', 'high', 'low', 'close', 'volume'][:len(df.columns)]

            required = {'time', 'open', 'high', 'low', 'close'}
            if not required.issubset(df.columns):
                raise ValueError(f"Missing required columns. Found: {df.columns.tolist()}")
            df['timestamp'] = pd.to_datetime(df['time'], unit='s', utc=True)
            df.drop(columns=['time'], inplace=True)

        if 'volume' not in df.columns:
            df['volume'] = 0.0
        df['volume'] = df['volume'].fillna(0).astype('float64')
        for c in ['open', 'high', 'low', 'close']:
            df[c] = df[c].astype('float64')

    except (KeyError, TypeError, pd.errors.ParserError) as e:
        raise ValueError(f"Error parsing file: {e}")

    df = df[['timestamp', 'open', 'high', 'low', 'close', 'volume']]
    df.set_index('timestamp', inplace=True)
    df.sort_index(inplace=True, kind='stable')

    duplicates = df.index.duplicated(keep='last')
    if duplicates.any():
        logger.debug(f"Duplicate timestamps in {os.path.basename(filepath)}: "
                     f"{int(duplicates.sum())} removed (kept last occurrence)")
        df = df[~duplicates]

    valid = (
        (df['low'] <= df['open']) & (df['open'] <= df['high']) &
        (df['low'] <= df['close']) & (df['close'] <= df['high']) &
        (df['volume'] >= 0)
    )
    invalid_count = int((~valid).sum())
    if invalid_count:
        logger.warning(f"Dropped {invalid_count} rows with inconsistent OHLC values "
                       f"from {os.path.basename(filepath)}")
        df = df[valid]

    logger.info(f"Loaded {len(df)} candles from {os.path.basename(filepath)} ({fmt})")
    return df


def dataframe_to_candles(df: pd.DataFrame) -> List[OHLCCandle]:
    """
    Convert a loader DataFrame into candles.

    Accepts either a DatetimeIndex or a 'timestamp' column.

    Args:
        df: DataFrame with open, high, low, close and optional volume columns

    Returns:
        Candles in DataFrame order with epoch-millisecond timestamps
    """
    if df.empty:
        return []

    if 'timestamp' in df.columns:
        stamps = pd.to_datetime(df['timestamp'], utc=True)
    else:
        stamps = pd.to_datetime(df.index, utc=True)
    stamps = pd.DatetimeIndex(stamps)
    millis = (stamps - pd.Timestamp(0, tz='UTC')) // pd.Timedelta(milliseconds=1)

    volume = df['volume'].to_numpy(dtype=np.float64) if 'volume' in df.columns else np.zeros(len(df))
    opens = df['open'].to_numpy(dtype=np.float64)
    highs = df['high'].to_numpy(dtype=np.float64)
    lows = df['low'].to_numpy(dtype=np.float64)
    closes = df['close'].to_numpy(dtype=np.float64)

    return [
        OHLCCandle(int(ts), float(o), float(h), float(l), float(c), float(v))
        for ts, o, h, l, c, v in zip(np.asarray(millis), opens, highs, lows, closes, volume)
    ]
