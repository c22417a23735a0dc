"""X-axis tick planning for a zoomed/panned time domain.

Ticks are anchored at the exact domain edges, never rounded to calendar
boundaries, so the visible window's true edges always carry a label. Between
the edges ticks step evenly from the start; ticks crowding either edge are
dropped.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Sequence, Union

from bot_timeline.config import TimelineConfig
from bot_timeline.models import MS_PER_DAY, MS_PER_HOUR

Number = Union[int, float]


class Granularity(Enum):
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


# (visible range up to, tick interval)
_INTERVAL_TABLE: tuple[tuple[int, int], ...] = (
    (12 * MS_PER_HOUR, MS_PER_HOUR),
    (36 * MS_PER_HOUR, 2 * MS_PER_HOUR),
    (72 * MS_PER_HOUR, 6 * MS_PER_HOUR),
    (7 * MS_PER_DAY, 12 * MS_PER_HOUR),
    (21 * MS_PER_DAY, MS_PER_DAY),
    (60 * MS_PER_DAY, 2 * MS_PER_DAY),
)
_WIDEST_INTERVAL = 7 * MS_PER_DAY

_GRANULARITY_FLOOR = {
    Granularity.HOURS: MS_PER_HOUR,
    Granularity.DAYS: MS_PER_HOUR,
    Granularity.WEEKS: MS_PER_DAY,
    Granularity.MONTHS: 7 * MS_PER_DAY,
}


def select_interval(visible_ms: Number, granularity: Granularity = Granularity.DAYS) -> int:
    """Tick interval for a visible range, never finer than the granularity allows."""
    interval = _WIDEST_INTERVAL
    for limit, step in _INTERVAL_TABLE:
        if visible_ms <= limit:
            interval = step
            break
    return max(interval, _GRANULARITY_FLOOR[granularity])


def _walk(start: Number, end: Number, interval: Number, crowding: float) -> list[Number]:
    margin = crowding * interval
    ticks = [start]
    step = 1
    tick = start + interval
    while tick < end:
        if tick - start >= margin and end - tick >= margin:
            ticks.append(tick)
        step += 1
        tick = start + interval * step
    ticks.append(end)
    return ticks


def plan_ticks(
    domain: Sequence,
    granularity: Granularity = Granularity.DAYS,
    zoom: float = 1.0,
    cfg: Optional[TimelineConfig] = None,
) -> list[Number]:
    """Ordered tick timestamps for ``domain``, first == start and last == end."""
    cfg = cfg or TimelineConfig()
    if len(domain) != 2 or any(isinstance(v, str) or v is None for v in domain):
        return []

    start, end = domain
    if end < start:
        start, end = end, start
    if start == end:
        return [start]

    span = end - start
    visible = span / max(1.0, zoom or 1.0)
    interval = select_interval(visible, granularity)
    if span / interval > cfg.max_ticks:
        interval = math.ceil(span / cfg.max_ticks)

    ticks = _walk(start, end, interval, cfg.tick_crowding_factor)
    if len(ticks) < cfg.tick_min_count and span > MS_PER_HOUR:
        fallback = max(cfg.tick_fallback_min_ms, math.ceil(span / cfg.tick_fallback_divisions))
        ticks = _walk(start, end, fallback, cfg.tick_crowding_factor)
    return ticks
