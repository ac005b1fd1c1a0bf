"""
Market Data Simulator Module

Random-walk OHLC generator used for demos and tests, plus a DataManager
that serves its output in historical batches and realtime ticks.

Key Features:
- Low / medium / high volatility profiles
- 20 sub-ticks per historical candle for realistic wicks
- Backwards history generation continuing from the oldest candle served
- Realtime ticks aligned to candle buckets, emitted on every tick
- Seedable numpy Generator for reproducible runs
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from .candle import CandleDuration, HistoricalBatch, OHLCCandle
from .data_manager import DataManager, RealtimeCallback

logger = logging.getLogger(__name__)

TICKS_PER_CANDLE = 20


class Volatility(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class VolatilityProfile:
    """Random-walk parameters for one volatility level."""
    price_change_percent: float
    volume_base: float
    volume_variance: float

    @classmethod
    def for_level(cls, level: Volatility) -> "VolatilityProfile":
        return _PROFILES[level]


_PROFILES = {
    Volatility.LOW: VolatilityProfile(0.0005, 50000.0, 20000.0),
    Volatility.MEDIUM: VolatilityProfile(0.001, 100000.0, 50000.0),
    Volatility.HIGH: VolatilityProfile(0.002, 200000.0, 100000.0),
}


@dataclass
class SimulatorConfig:
    """
    Configuration for DataSimulator.

    Attributes:
        volatility: Random-walk volatility level
        candle_duration: Bucket size of generated candles
        ticks_per_second: Realtime tick rate used by run_ticker()
        start_price: Price of the most recent candle
        start_time_ms: Wall-clock anchor for history (defaults to now)
        seed: Optional seed for the random generator
    """
    volatility: Volatility = Volatility.MEDIUM
    candle_duration: CandleDuration = CandleDuration.ONE_MINUTE
    ticks_per_second: int = 10
    start_price: float = 100.0
    start_time_ms: Optional[int] = None
    seed: Optional[int] = None

    def __post_init__(self):
        if self.ticks_per_second <= 0:
            raise ValueError(f"ticks_per_second must be positive, got {self.ticks_per_second}")
        if self.start_price <= 0:
            raise ValueError(f"start_price must be positive, got {self.start_price}")


def _now_ms() -> int:
    return int(time.time() * 1000)


class DataSimulator:
    """Random-walk candle generator."""

    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config or SimulatorConfig()
        self.profile = VolatilityProfile.for_level(self.config.volatility)
        self._rng = np.random.default_rng(self.config.seed)

        anchor = self.config.start_time_ms if self.config.start_time_ms is not None else _now_ms()
        self._history_cursor = self.config.candle_duration.bucket_start(anchor)
        self._history_price = self.config.start_price
        self._current_price = self.config.start_price
        self._current_candle: Optional[OHLCCandle] = None

    @property
    def current_price(self) -> float:
        return self._current_price

    def _step(self, price: float) -> float:
        return (self._rng.random() - 0.5) * 2 * self.profile.price_change_percent * price

    def _volume(self, open_price: float, price_change: float) -> float:
        scaling = _volume_scaling(price_change, open_price)
        base = self.profile.volume_base + (self._rng.random() - 0.5) * self.profile.volume_variance
        volume = base * scaling
        if not np.isfinite(volume) or volume < 0:
            volume = self.profile.volume_base
        return float(volume)

    def generate_candle_backwards(self, timestamp: int, close: float) -> OHLCCandle:
        """
        Build one candle that ends at `close`, walking the price back to its open.

        Args:
            timestamp: Bucket start of the candle
            close: Closing price (the open of the following candle)

        Returns:
            Generated candle
        """
        open_price = high = low = close
        for _ in range(TICKS_PER_CANDLE):
            open_price += self._step(open_price)
            high = max(high, open_price)
            low = min(low, open_price)

        volume = self._volume(open_price, abs(close - open_price))
        return OHLCCandle(
            timestamp=timestamp,
            open=float(open_price),
            high=float(max(high, open_price, close)),
            low=float(min(low, open_price, close)),
            close=float(close),
            volume=volume,
        )

    def generate_historical_candles(self, count: int) -> List[OHLCCandle]:
        """
        Generate `count` candles immediately older than anything generated so far.

        Returns:
            Candles in chronological order (oldest first)
        """
        duration = self.config.candle_duration.milliseconds
        generated = []
        for _ in range(count):
            self._history_cursor -= duration
            candle = self.generate_candle_backwards(self._history_cursor, self._history_price)
            self._history_price = candle.open
            generated.append(candle)
        generated.reverse()
        return generated

    def generate_tick(self, now_ms: Optional[int] = None) -> OHLCCandle:
        """
        Advance the realtime random walk by one tick.

        Returns:
            The candle currently being built (emitted on every tick; the
            store decides between update and append by timestamp)
        """
        now = now_ms if now_ms is not None else _now_ms()
        bucket = self.config.candle_duration.bucket_start(now)

        if self._current_candle is None or self._current_candle.timestamp != bucket:
            price = self._current_price
            self._current_candle = OHLCCandle(bucket, price, price, price, price, 0.0)

        self._current_price += self._step(self._current_price)
        candle = self._current_candle
        price_change = abs(self._current_price - candle.open)
        tick_volume = self.profile.volume_base / 100 * _volume_scaling(price_change, candle.open)
        if not np.isfinite(tick_volume) or tick_volume < 0:
            tick_volume = self.profile.volume_base / 100

        self._current_candle = OHLCCandle(
            timestamp=candle.timestamp,
            open=candle.open,
            high=float(max(candle.high, self._current_price)),
            low=float(min(candle.low, self._current_price)),
            close=float(self._current_price),
            volume=float(candle.volume + tick_volume),
        )
        return self._current_candle


def _volume_scaling(price_change: float, open_price: float) -> float:
    if open_price == 0 or not np.isfinite(open_price):
        return 1.0
    change_percent = abs(price_change / open_price)
    if not np.isfinite(change_percent):
        return 1.0
    return 1.0 + change_percent * 10


class SimulatorDataManager(DataManager):
    """
    DataManager backed by DataSimulator.

    History is served newest-first in batches of `historical_batch_size`
    until `initial_historical_count` candles have been handed out.
    """

    def __init__(self,
                 config: Optional[SimulatorConfig] = None,
                 historical_batch_size: int = 100,
                 initial_historical_count: int = 500,
                 load_delay_s: float = 0.0):
        if historical_batch_size <= 0:
            raise ValueError(f"historical_batch_size must be positive, got {historical_batch_size}")
        self.config = config or SimulatorConfig()
        self.historical_batch_size = historical_batch_size
        self.initial_historical_count = initial_historical_count
        self.load_delay_s = load_delay_s
        self.simulator = DataSimulator(self.config)

        self._callback: Optional[RealtimeCallback] = None
        self._loaded_count = 0
        self._running = False

    @property
    def loaded_count(self) -> int:
        return self._loaded_count

    @property
    def is_running(self) -> bool:
        return self._running

    async def load_historical(self) -> HistoricalBatch:
        remaining = self.initial_historical_count - self._loaded_count
        if remaining <= 0:
            logger.debug("Simulator history exhausted")
            return HistoricalBatch(candles=[], has_more=False)

        if self._loaded_count > 0 and self.load_delay_s > 0:
            await asyncio.sleep(self.load_delay_s)

        candles = self.simulator.generate_historical_candles(min(remaining, self.historical_batch_size))
        self._loaded_count += len(candles)
        has_more = self._loaded_count < self.initial_historical_count
        logger.info(f"Simulator served {len(candles)} historical candles "
                    f"(total={self._loaded_count}, has_more={has_more})")
        return HistoricalBatch(candles=candles, has_more=has_more)

    def on_realtime_update(self, callback: RealtimeCallback) -> None:
        self._callback = callback

    def tick(self, now_ms: Optional[int] = None) -> OHLCCandle:
        """Generate one realtime tick and forward it to the registered callback."""
        candle = self.simulator.generate_tick(now_ms)
        if self._callback is not None:
            self._callback(candle)
        return candle

    async def run_ticker(self, max_ticks: Optional[int] = None) -> int:
        """
        Emit ticks at the configured rate until stop() or `max_ticks`.

        Returns:
            Number of ticks emitted
        """
        if self._running:
            logger.warning("Simulator ticker already running")
            return 0

        self._running = True
        interval = 1.0 / self.config.ticks_per_second
        emitted = 0
        logger.info(f"Simulator ticker started at {self.config.ticks_per_second} ticks/s")
        try:
            while self._running and (max_ticks is None or emitted < max_ticks):
                self.tick()
                emitted += 1
                await asyncio.sleep(interval)
        finally:
            self._running = False
            logger.info(f"Simulator ticker stopped after {emitted} ticks")
        return emitted

    def stop(self) -> None:
        self._running = False
