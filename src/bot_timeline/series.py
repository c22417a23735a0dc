"""Plot-point series from a bot type's update history.

Each update becomes an end point and, when it opens a fresh interval, a start
point before it. Updates come in two accounting flavours:

  * fresh ("Neu") snapshots report the running total directly, so the
    total is replaced outright;
  * comparison ("Vergleich") snapshots report only the delta since the
    previous update, so the total carries on from the prior end point.

Comparison updates omit their start point so the line runs straight on from
the previous end point. A second pass marks every end point whose successor
carries on from it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional

from bot_timeline.config import TimelineConfig
from bot_timeline.models import (
    HUNDRED,
    MS_PER_HOUR,
    ZERO,
    CapitalBase,
    Metric,
    PlotPoint,
    UpdateRecord,
)
from bot_timeline.parsing import end_timestamp, parse_runtime, parse_timestamp, to_decimal

log = logging.getLogger("tl.series")

_HOURS_PER_DAY = Decimal("24")
_LEGACY_COMPARISON_MODE = "Normal"


def is_comparison_update(record: UpdateRecord, epsilon: Decimal = Decimal("0.01")) -> bool:
    """True when the record's profit is a delta on top of the previous update.

    The absolute grid-profit field decides when present: a delta record's
    reported total differs from its absolute total. Older records without
    that field fall back to the legacy calculation-mode flag.
    """
    if record.has_absolute_values:
        reported = to_decimal(record.grid_profit_total)
        absolute = to_decimal(record.grid_profit_total_absolute)
        return abs(reported - absolute) > epsilon
    return (record.calculation_mode or "").strip() == _LEGACY_COMPARISON_MODE


def capital_of(record: UpdateRecord, base: CapitalBase) -> Decimal:
    if base is CapitalBase.BASE_INVESTMENT:
        return to_decimal(record.base_investment)
    return to_decimal(record.total_investment)


def _percent(profit: Decimal, capital: Decimal) -> Decimal:
    if capital <= ZERO:
        return ZERO
    return profit / capital * HUNDRED


def _per_day(profit: Decimal, hours: Decimal) -> Decimal:
    if hours <= ZERO:
        return ZERO
    return profit / (hours / _HOURS_PER_DAY)


def _start_values(capital: Decimal) -> dict[Metric, Decimal]:
    return {
        Metric.CAPITAL: capital,
        Metric.TOTAL_PROFIT: ZERO,
        Metric.TOTAL_PROFIT_PERCENT: ZERO,
        Metric.AVG_PROFIT_PER_DAY: ZERO,
        Metric.REAL_PROFIT_PER_DAY: ZERO,
    }


def build_series(
    records: Iterable[UpdateRecord],
    cfg: Optional[TimelineConfig] = None,
    capital_base: Optional[CapitalBase] = None,
) -> list[PlotPoint]:
    """Turn updates into a time-ordered PlotPoint list.

    The input is expected to be filtered already; the first UpdateMetrics
    record is always taken as absolute since it has no baseline to add to.
    Closed-bot records report their final profit as-is and never take part
    in comparison accounting.
    """
    cfg = cfg or TimelineConfig()
    base = capital_base or cfg.capital_base
    tolerance = cfg.overlap_tolerance_ms

    ordered = sorted(records, key=lambda r: (end_timestamp(r), r.version))
    points: list[PlotPoint] = []
    seams: list[int] = []  # end points a carrying successor continues from
    carried = 0

    running_profit = ZERO
    segment_start: Optional[int] = None
    prev_end_ts: Optional[int] = None
    last_metrics_end: Optional[int] = None

    for record in ordered:
        end_ts = end_timestamp(record)
        parsed_start = parse_timestamp(record.period_start)
        start_ts = end_ts if parsed_start is None else parsed_start

        comparison = is_comparison_update(record, cfg.comparison_epsilon)
        capital = capital_of(record, base)

        if record.is_closed:
            carry = False
            total_profit = to_decimal(record.profit)
        else:
            carry = comparison and last_metrics_end is not None
            raw_profit = to_decimal(record.grid_profit_total)
            running_profit = running_profit + raw_profit if carry else raw_profit
            if not carry or segment_start is None:
                segment_start = start_ts
            total_profit = running_profit

        first_rendered = prev_end_ts is None
        if (
            parsed_start is not None
            and end_ts - start_ts > tolerance
            and not record.is_closed
            and (first_rendered or not comparison)
            and (first_rendered or start_ts > prev_end_ts + tolerance)
        ):
            points.append(PlotPoint(
                timestamp=start_ts,
                is_start_point=True,
                version=record.version,
                status=record.status,
                values=_start_values(capital),
                update_id=record.id,
            ))
        elif parsed_start is not None and not record.is_closed and not comparison:
            log.debug(
                "START_SKIP v%d │ start=%d end=%d prev_end=%s",
                record.version, start_ts, end_ts, prev_end_ts,
            )

        if record.is_closed:
            real_per_day = ZERO
            runtime_ms = None
        else:
            span_hours = Decimal(end_ts - segment_start) / Decimal(MS_PER_HOUR)
            if span_hours <= ZERO:
                span_hours = parse_runtime(record.runtime_longest)
            real_per_day = _per_day(running_profit, span_hours)
            runtime_ms = max(0, end_ts - start_ts)

        if carry:
            seams.append(last_metrics_end)
            carried += 1
        end_index = len(points)
        points.append(PlotPoint(
            timestamp=end_ts,
            is_start_point=False,
            version=record.version,
            status=record.status,
            values={
                Metric.CAPITAL: capital,
                Metric.TOTAL_PROFIT: total_profit,
                Metric.TOTAL_PROFIT_PERCENT: _percent(total_profit, capital),
                Metric.AVG_PROFIT_PER_DAY: to_decimal(record.avg_grid_profit_per_day),
                Metric.REAL_PROFIT_PER_DAY: real_per_day,
            },
            runtime_ms=runtime_ms,
            is_comparison_carry=carry,
            update_id=record.id,
        ))
        if not record.is_closed:
            last_metrics_end = end_index
        prev_end_ts = end_ts

    # Second pass: an end point doubles as the implicit start of a carrying successor
    for index in seams:
        points[index] = replace(points[index], continues_into_next=True)

    log.debug(
        "SERIES built %d points from %d updates │ carried=%d",
        len(points), len(ordered), carried,
    )
    return points
