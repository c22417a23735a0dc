"""Highest/lowest markers per metric with non-overlapping label placement."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from bot_timeline.config import TimelineConfig
from bot_timeline.models import (
    ExtremaKind,
    ExtremaMarker,
    LabelAnchor,
    Metric,
    MetricExtrema,
    PlotPoint,
)


def _extreme_points(ends: Sequence[PlotPoint], metric: Metric) -> tuple[PlotPoint, PlotPoint]:
    """(highest, lowest); on ties the earliest point wins."""
    highest = lowest = ends[0]
    for point in ends[1:]:
        value = point.value(metric)
        if value > highest.value(metric):
            highest = point
        if value < lowest.value(metric):
            lowest = point
    return highest, lowest


def _line_just_below(
    points: Sequence[PlotPoint],
    marker_point: PlotPoint,
    metric: Metric,
    window: Decimal,
    time_window_ms: int,
) -> bool:
    peak = marker_point.value(metric)
    for point in points:
        if point is marker_point:
            continue
        if abs(point.timestamp - marker_point.timestamp) > time_window_ms:
            continue
        if peak - window <= point.value(metric) < peak:
            return True
    return False


def _collisions(
    placed: Iterable[ExtremaMarker],
    metric: Metric,
    timestamp: int,
    value: Decimal,
    window: Decimal,
    time_window_ms: int,
) -> int:
    return sum(
        1
        for other in placed
        if other.metric is not metric
        and abs(other.timestamp - timestamp) <= time_window_ms
        and abs(other.value - value) <= window
    )


def find_extrema(
    points: Sequence[PlotPoint],
    metrics: Iterable[Metric],
    cfg: Optional[TimelineConfig] = None,
) -> dict[Metric, MetricExtrema]:
    """Max/min end point of each active metric, with label offset and anchor.

    Start points are never candidates. Labels of different metrics that would
    land on top of each other (±1h, within 3% of the range) are stacked by
    ``label_stack_step`` per earlier marker.
    """
    cfg = cfg or TimelineConfig()
    ends = [p for p in points if not p.is_start_point]
    result: dict[Metric, MetricExtrema] = {}
    placed: list[ExtremaMarker] = []

    for metric in metrics:
        if not ends:
            result[metric] = MetricExtrema(highest=None, lowest=None)
            continue

        high_point, low_point = _extreme_points(ends, metric)
        span = high_point.value(metric) - low_point.value(metric)
        window = span * cfg.extrema_value_window

        markers = {}
        for kind, point in ((ExtremaKind.HIGHEST, high_point), (ExtremaKind.LOWEST, low_point)):
            value = point.value(metric)
            stacked = _collisions(
                placed, metric, point.timestamp, value, window, cfg.extrema_time_window_ms
            )
            anchor = LabelAnchor.BELOW
            if kind is ExtremaKind.HIGHEST and _line_just_below(
                points, point, metric, window, cfg.extrema_time_window_ms
            ):
                anchor = LabelAnchor.ABOVE
            marker = ExtremaMarker(
                metric=metric,
                kind=kind,
                timestamp=point.timestamp,
                value=value,
                offset=cfg.label_offset + stacked * cfg.label_stack_step,
                anchor=anchor,
            )
            markers[kind] = marker
            placed.append(marker)

        result[metric] = MetricExtrema(
            highest=markers[ExtremaKind.HIGHEST],
            lowest=markers[ExtremaKind.LOWEST],
        )
    return result
