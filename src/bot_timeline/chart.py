"""End-to-end chart pipeline: updates in, plot-ready structures out.

The rendering layer hands in everything it used to keep as ambient UI state
(range filter, active metrics, capital base, zoom/pan) as one ChartRequest
and redraws from the returned payload. Every call recomputes from scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from bot_timeline.config import TimelineConfig
from bot_timeline.extrema import find_extrema
from bot_timeline.models import (
    ALL_METRICS,
    CapitalBase,
    ExtremaMarker,
    MergedPoint,
    Metric,
    MetricExtrema,
    PlotPoint,
    UpdateRecord,
    Viewport,
)
from bot_timeline.overlay import compose_entities
from bot_timeline.series import build_series
from bot_timeline.ticks import Granularity, plan_ticks
from bot_timeline.time_range import RangeSpec, filter_updates
from bot_timeline.viewport import compute_viewport, x_domain, y_domain

log = logging.getLogger("tl.chart")


@dataclass(frozen=True)
class ChartRequest:
    range: RangeSpec = field(default_factory=RangeSpec)
    metrics: tuple[Metric, ...] = ALL_METRICS
    capital_base: Optional[CapitalBase] = None
    granularity: Granularity = Granularity.DAYS
    x_zoom: float = 1.0
    x_pan: float = 0.0
    y_zoom: float = 1.0
    y_pan: float = 0.0


@dataclass(frozen=True)
class MetricSummary:
    first: Decimal
    last: Decimal

    @property
    def change(self) -> Decimal:
        return self.last - self.first


@dataclass(frozen=True)
class ChartPayload:
    points: list[PlotPoint]
    extrema: dict[Metric, MetricExtrema]
    ticks: list
    viewport: Viewport
    summary: dict[Metric, MetricSummary]

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [_point_dict(p) for p in self.points],
            "extrema": {
                m.value: {
                    "highest": _marker_dict(e.highest),
                    "lowest": _marker_dict(e.lowest),
                }
                for m, e in self.extrema.items()
            },
            "ticks": list(self.ticks),
            "xDomain": list(self.viewport.x_domain),
            "yDomain": list(self.viewport.y_domain),
            "summary": {
                m.value: {
                    "first": float(s.first),
                    "last": float(s.last),
                    "change": float(s.change),
                }
                for m, s in self.summary.items()
            },
        }


@dataclass(frozen=True)
class OverlayPayload:
    metric: Metric
    entities: tuple[str, ...]
    points: list[MergedPoint]
    ticks: list
    viewport: Viewport

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric.value,
            "entities": list(self.entities),
            "points": [
                {
                    "timestamp": p.timestamp,
                    **{name: float(v) for name, v in p.values.items()},
                }
                for p in self.points
            ],
            "ticks": list(self.ticks),
            "xDomain": list(self.viewport.x_domain),
            "yDomain": list(self.viewport.y_domain),
        }


def _point_dict(point: PlotPoint) -> dict[str, Any]:
    return {
        "timestamp": point.timestamp,
        "isStartPoint": point.is_start_point,
        "version": point.version,
        "status": point.status.value,
        "runtimeMs": point.runtime_ms,
        "isComparisonCarry": point.is_comparison_carry,
        "continuesIntoNext": point.continues_into_next,
        **{m.value: float(v) for m, v in point.values.items()},
    }


def _marker_dict(marker: Optional[ExtremaMarker]) -> Optional[dict[str, Any]]:
    if marker is None:
        return None
    return {
        "timestamp": marker.timestamp,
        "value": float(marker.value),
        "offset": marker.offset,
        "anchor": marker.anchor.value,
    }


def summarize(
    points: Sequence[PlotPoint], metrics: Sequence[Metric] = ALL_METRICS
) -> dict[Metric, MetricSummary]:
    """First and last end-point value per metric (the stat cards above the chart)."""
    ends = [p for p in points if not p.is_start_point]
    if not ends:
        return {}
    return {m: MetricSummary(first=ends[0].value(m), last=ends[-1].value(m)) for m in metrics}


def build_chart(
    records: Sequence[UpdateRecord],
    request: Optional[ChartRequest] = None,
    cfg: Optional[TimelineConfig] = None,
    now_ms: Optional[int] = None,
) -> ChartPayload:
    request = request or ChartRequest()
    filtered = filter_updates(records, request.range, now_ms)
    points = build_series(filtered, cfg, request.capital_base)
    viewport = compute_viewport(
        points, request.metrics,
        request.x_zoom, request.x_pan, request.y_zoom, request.y_pan, cfg,
    )
    # The viewport domain is already the visible window, so no further zoom here
    ticks = plan_ticks(viewport.x_domain, request.granularity, 1.0, cfg)
    log.debug(
        "CHART %d/%d updates → %d points │ %d ticks",
        len(filtered), len(records), len(points), len(ticks),
    )
    return ChartPayload(
        points=points,
        extrema=find_extrema(points, request.metrics, cfg),
        ticks=ticks,
        viewport=viewport,
        summary=summarize(points, request.metrics),
    )


def build_overlay_chart(
    entities: Mapping[str, Sequence[UpdateRecord]],
    metric: Metric,
    request: Optional[ChartRequest] = None,
    cfg: Optional[TimelineConfig] = None,
    now_ms: Optional[int] = None,
) -> OverlayPayload:
    request = request or ChartRequest()
    merged = compose_entities(
        entities, metric, cfg, request.capital_base, request.range, now_ms
    )
    ends = [p.timestamp for p in merged if set(p.values) - p.start_entities]
    stamps = ends if len(ends) == 1 else [p.timestamp for p in merged]
    viewport = Viewport(
        x_domain=x_domain(stamps, request.x_zoom, request.x_pan, cfg),
        y_domain=y_domain(
            (v for p in merged for v in p.values.values()), request.y_zoom, request.y_pan, cfg
        ),
    )
    return OverlayPayload(
        metric=metric,
        entities=tuple(entities),
        points=merged,
        ticks=plan_ticks(viewport.x_domain, request.granularity, 1.0, cfg),
        viewport=viewport,
    )
