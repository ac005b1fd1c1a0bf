"""
Time Axis Module

Time labels for the ordinal time scale.

Key Features:
- Target label count adapted to the number of visible candles
- Pivot level chosen from the visible span (year down to second)
- Samples snap to nearby pivot candles or calendar boundaries
- Label format follows what changed since the previous label
- Always at least two labels, and the newest visible candle is labelled
- Fixed display timezone offset (default UTC+05:30)
"""

import math
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from src.core.geometry import AxisPosition
from src.core.theme import Theme

from .axis import Axis, AxisOptions, TickInfo
from .ordinal_time_scale import OrdinalTimeScale

IST_OFFSET_MS = 19_800_000

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
               'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

_DAY_SECONDS = 86_400


class PivotLevel(NamedTuple):
    level: str
    subdivision: int


def _first_at_least(value: float, steps, level: str, fallback: int) -> PivotLevel:
    for step in steps:
        if value >= step:
            return PivotLevel(level, step)
    return PivotLevel(level, fallback)


def choose_pivot_level(span_seconds: float, target_ticks: int) -> PivotLevel:
    """
    Pick the calendar unit and step that yield roughly `target_ticks` labels.

    Args:
        span_seconds: Time between the first and last visible candle
        target_ticks: Desired label count

    Returns:
        PivotLevel such as ('hour', 4) or ('day', 15)
    """
    span_minutes = span_seconds / 60
    span_hours = span_minutes / 60
    span_days = span_hours / 24
    span_months = span_days / 30
    span_years = span_days / 365

    if span_years > 3:
        ticks_per_year = target_ticks / span_years
        if ticks_per_year < 1:
            return PivotLevel('year', max(1, math.ceil(1 / ticks_per_year)))
        return PivotLevel('month', max(1, math.ceil(12 / ticks_per_year)))

    if span_months > 2:
        ticks_per_month = target_ticks / span_months
        if ticks_per_month < 1:
            return PivotLevel('month', max(1, math.ceil(1 / ticks_per_month)))
        return _first_at_least(30 / ticks_per_month, (15, 10, 5, 3, 2), 'day', 1)

    if span_days > 1:
        hours_per_tick = 24 / (target_ticks / span_days)
        return _first_at_least(hours_per_tick, (12, 6, 4, 3, 2), 'hour', 1)

    if span_hours > 1:
        minutes_per_tick = 60 / (target_ticks / span_hours)
        return _first_at_least(minutes_per_tick, (30, 20, 15, 10, 5), 'minute', 2)

    if span_minutes > 1:
        seconds_per_tick = 60 / (target_ticks / span_minutes)
        return _first_at_least(seconds_per_tick, (30, 20, 15, 10, 5), 'second', 2)

    return PivotLevel('second', 1)


class TimeAxis(Axis[int]):
    """
    Axis labelling candle timestamps.

    Args:
        scale: Shared ordinal time scale
        position: Usually BOTTOM
        timezone_offset_ms: Offset added to UTC before formatting
    """

    def __init__(self,
                 scale: OrdinalTimeScale,
                 position: AxisPosition = AxisPosition.BOTTOM,
                 theme: Optional[Theme] = None,
                 options: Optional[AxisOptions] = None,
                 timezone_offset_ms: int = IST_OFFSET_MS):
        super().__init__(position, theme, options)
        self.scale = scale
        self.timezone_offset_ms = timezone_offset_ms

    def _local(self, timestamp: int) -> datetime:
        return datetime.fromtimestamp((timestamp + self.timezone_offset_ms) / 1000.0, tz=timezone.utc)

    def is_pivot_point(self, timestamp: int, pivot: PivotLevel) -> bool:
        date = self._local(timestamp)
        level, sub = pivot
        if level == 'year':
            return date.month == 1 and date.day == 1 and date.year % sub == 0
        if level == 'month':
            return date.day == 1 and (date.month - 1) % sub == 0
        if level == 'day':
            return (date.day - 1) % sub == 0
        if level == 'hour':
            return date.hour % sub == 0 and date.minute < 10
        if level == 'minute':
            return date.minute % sub == 0
        if level == 'second':
            return date.second % sub == 0
        return False

    def format_label(self, timestamp: int, kind: str) -> str:
        date = self._local(timestamp)
        hh, mm, ss = f"{date.hour:02d}", f"{date.minute:02d}", f"{date.second:02d}"
        if kind == 'full':
            return f"{date.month}/{date.day} {hh}:{mm}"
        if kind == 'date':
            return f"{date.month}/{date.day}"
        if kind == 'time':
            return f"{hh}:{mm}:{ss}" if date.second != 0 else f"{hh}:{mm}"
        if kind == 'day':
            return f"{date.day}"
        if kind == 'month':
            return MONTH_NAMES[date.month - 1]
        if kind == 'year':
            return f"{date.year}"
        return f"{hh}:{mm}"

    @staticmethod
    def target_tick_count(visible_candles: int) -> int:
        if visible_candles <= 5:
            return visible_candles
        if visible_candles <= 15:
            return math.ceil(visible_candles / 2)
        return 10

    def generate_ticks(self) -> List[TickInfo[int]]:
        domain = self.scale.get_visible_domain()
        if not domain:
            return []
        start_index, end_index = self.scale.start_index, self.scale.end_index
        if not (math.isfinite(start_index) and math.isfinite(end_index)):
            return []

        first_time, last_time = domain[0], domain[-1]
        span_seconds = (last_time - first_time) / 1000.0
        target = max(1, self.target_tick_count(len(domain)))
        pivot = choose_pivot_level(span_seconds, target)

        base_index = max(0, math.floor(start_index))
        last_index = base_index + len(domain) - 1
        interval = max(1, len(domain) // target)
        half = interval // 2

        ticks: List[TickInfo[int]] = []
        prev: Optional[datetime] = None
        last_best = -1

        for i in range(0, len(domain), interval):
            search_start = max(0, i - half)
            search_end = min(len(domain) - 1, i + half)
            best = self._find_pivot(domain, search_start, search_end, pivot)
            if best is None:
                best = self._find_boundary(domain, search_start, search_end, prev, span_seconds)
            if best is None:
                best = i
            if best <= last_best:
                continue
            last_best = best

            timestamp = domain[best]
            pixel = self.scale.scaled_value_from_index(base_index + best)
            if not math.isfinite(pixel):
                continue

            date = self._local(timestamp)
            if pivot.level == 'year' or (prev is not None and date.year != prev.year):
                kind = 'year'
            elif pivot.level == 'month' or (prev is not None and date.month != prev.month):
                kind = 'month'
            elif pivot.level == 'day' or (prev is not None and date.day != prev.day):
                kind = 'day'
            else:
                kind = 'time'

            ticks.append(TickInfo(timestamp, pixel, self.format_label(timestamp, kind)))
            prev = date

        if not ticks:
            return [
                TickInfo(first_time, self.scale.scaled_value_from_index(base_index),
                         self.format_label(first_time, 'full')),
                TickInfo(last_time, self.scale.scaled_value_from_index(last_index),
                         self.format_label(last_time, 'full')),
            ]

        if ticks[-1].value != last_time:
            pixel = self.scale.scaled_value_from_index(last_index)
            if math.isfinite(pixel):
                kind = 'day' if span_seconds > _DAY_SECONDS else 'time'
                ticks.append(TickInfo(last_time, pixel, self.format_label(last_time, kind)))

        if len(ticks) == 1 and first_time != last_time:
            ticks.insert(0, TickInfo(first_time, self.scale.scaled_value_from_index(base_index),
                                     self.format_label(first_time, 'full')))
        return ticks

    def _find_pivot(self, domain: List[int], start: int, end: int, pivot: PivotLevel) -> Optional[int]:
        for j in range(start, end + 1):
            if self.is_pivot_point(domain[j], pivot):
                return j
        return None

    def _find_boundary(self, domain: List[int], start: int, end: int,
                       prev: Optional[datetime], span_seconds: float) -> Optional[int]:
        if prev is None:
            return None
        for j in range(start, end + 1):
            date = self._local(domain[j])
            if date.year != prev.year or date.month != prev.month:
                return j
            if date.day != prev.day and span_seconds < _DAY_SECONDS * 7:
                return j
        return None
