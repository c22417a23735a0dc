"""Time-window resolution and update filtering.

A RangeSpec is what the filter controls hold (preset, custom duration,
calendar dates or a bracket of two updates). resolve_range turns it into a
TimeWindow predicate; None means "show everything".
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

from bot_timeline.models import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, UpdateRecord
from bot_timeline.parsing import end_timestamp, resolve_timestamp

log = logging.getLogger("tl.filter")


class TimeRange(Enum):
    ONE_HOUR = "1h"
    ONE_DAY = "24h"
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    ALL_TIME = "AllTime"
    CUSTOM = "Custom"


_PRESET_DURATIONS_MS = {
    TimeRange.ONE_HOUR: MS_PER_HOUR,
    TimeRange.ONE_DAY: MS_PER_DAY,
    TimeRange.SEVEN_DAYS: 7 * MS_PER_DAY,
    TimeRange.THIRTY_DAYS: 30 * MS_PER_DAY,
}


@dataclass(frozen=True)
class RangeSpec:
    range: TimeRange = TimeRange.ALL_TIME
    custom_days: int = 0
    custom_hours: int = 0
    custom_minutes: int = 0
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    from_update: Optional[UpdateRecord] = None
    until_update: Optional[UpdateRecord] = None

    @property
    def custom_duration_ms(self) -> int:
        return (
            self.custom_days * MS_PER_DAY
            + self.custom_hours * MS_PER_HOUR
            + self.custom_minutes * MS_PER_MINUTE
        )

    @property
    def has_bracket(self) -> bool:
        return self.from_update is not None and self.until_update is not None

    @property
    def has_calendar(self) -> bool:
        return self.date_from is not None and self.date_to is not None


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start_ms, end_ms]; an open side is None."""

    start_ms: Optional[int] = None
    end_ms: Optional[int] = None

    def contains(self, ts: int) -> bool:
        if self.start_ms is not None and ts < self.start_ms:
            return False
        if self.end_ms is not None and ts > self.end_ms:
            return False
        return True

    def __call__(self, ts: int) -> bool:
        return self.contains(ts)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _day_start_ms(day: date) -> int:
    dt = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _day_end_ms(day: date) -> int:
    return _day_start_ms(day + timedelta(days=1)) - 1  # 23:59:59.999


def _ordered(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a <= b else (b, a)


def resolve_range(spec: Optional[RangeSpec], now_ms: Optional[int] = None) -> Optional[TimeWindow]:
    """Resolve a range specifier into a TimeWindow, or None for no filtering."""
    if spec is None:
        return None

    if spec.has_bracket:
        from_ts = resolve_timestamp(spec.from_update) or 0
        until_ts = resolve_timestamp(spec.until_update) or 0
        start, end = _ordered(from_ts, until_ts)
        return TimeWindow(start_ms=start, end_ms=end)

    if spec.range is TimeRange.ALL_TIME:
        return None

    now = _now_ms() if now_ms is None else now_ms

    if spec.range is TimeRange.CUSTOM:
        if spec.has_calendar:
            first, last = sorted((spec.date_from, spec.date_to))
            return TimeWindow(start_ms=_day_start_ms(first), end_ms=_day_end_ms(last))
        duration = spec.custom_duration_ms
        if duration <= 0:
            log.debug("Custom range without duration, no filtering")
            return None
        return TimeWindow(start_ms=now - duration)

    return TimeWindow(start_ms=now - _PRESET_DURATIONS_MS[spec.range])


def filter_updates(
    records: Iterable[UpdateRecord],
    spec: Optional[RangeSpec] = None,
    now_ms: Optional[int] = None,
) -> list[UpdateRecord]:
    """Keep the records whose end time falls in the window, time-ordered.

    Records without a readable end time key as 0, the same instant the series
    builder plots them at, so any finite window drops them. Only bracket
    references fall back to start and creation time.
    """
    ordered = sorted(records, key=end_timestamp)
    window = resolve_range(spec, now_ms)
    if window is None:
        return ordered
    kept = [r for r in ordered if window.contains(end_timestamp(r))]
    log.debug(
        "FILTER kept %d/%d updates │ window=[%s, %s]",
        len(kept), len(ordered), window.start_ms, window.end_ms,
    )
    return kept
