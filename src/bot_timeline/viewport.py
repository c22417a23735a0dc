"""Zoom/pan viewport domains for the chart axes."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from bot_timeline.config import TimelineConfig
from bot_timeline.models import AUTO_DOMAIN, Domain, Metric, PlotPoint, Viewport


def _zoomed(lower: float, upper: float, zoom: float, pan: float) -> tuple[float, float]:
    """Shrink [lower, upper] around its midpoint by ``zoom``; shift by ``pan`` base ranges."""
    base = upper - lower
    effective = base / max(1.0, zoom or 1.0)
    center = (lower + upper) / 2 + pan * base
    return center - effective / 2, center + effective / 2


def y_domain(
    values: Iterable[Union[Decimal, float, int]],
    zoom: float = 1.0,
    pan: float = 0.0,
    cfg: Optional[TimelineConfig] = None,
) -> Domain:
    """Padded value domain.

    At least ``y_range_padding`` of the data range pads both sides and the
    bottom gets at least ``y_bottom_padding`` of the largest magnitude, so no
    point sits flush on the bottom edge. All-positive data never dips further
    below zero than the symmetric padding.
    """
    cfg = cfg or TimelineConfig()
    data = [float(v) for v in values]
    if not data:
        return AUTO_DOMAIN

    low, high = min(data), max(data)
    magnitude = max(abs(low), abs(high))
    pad = (high - low) * cfg.y_range_padding
    if pad == 0:
        pad = magnitude * cfg.y_range_padding or 1.0
    bottom = max(pad, magnitude * cfg.y_bottom_padding)

    lower = low - bottom
    upper = high + pad
    if low >= 0:
        lower = max(lower, -pad)
    return _zoomed(lower, upper, zoom, pan)


def x_domain(
    timestamps: Iterable[int],
    zoom: float = 1.0,
    pan: float = 0.0,
    cfg: Optional[TimelineConfig] = None,
) -> Domain:
    """Time domain with 5% padding per side; a single instant gets ±1 day."""
    cfg = cfg or TimelineConfig()
    data = list(timestamps)
    if not data:
        return AUTO_DOMAIN

    first, last = min(data), max(data)
    if first == last:
        lower = first - cfg.single_point_x_span_ms
        upper = last + cfg.single_point_x_span_ms
    else:
        pad = (last - first) * cfg.x_padding
        lower, upper = first - pad, last + pad
    start, end = _zoomed(lower, upper, zoom, pan)
    return round(start), round(end)


def compute_viewport(
    points: Sequence[PlotPoint],
    metrics: Iterable[Metric],
    x_zoom: float = 1.0,
    x_pan: float = 0.0,
    y_zoom: float = 1.0,
    y_pan: float = 0.0,
    cfg: Optional[TimelineConfig] = None,
) -> Viewport:
    active = list(metrics)
    values = [p.value(m) for p in points for m in active]
    ends = [p.timestamp for p in points if not p.is_start_point]
    # One update is centred on its end point even when it also has a start point
    stamps = ends if len(ends) == 1 else [p.timestamp for p in points]
    return Viewport(
        x_domain=x_domain(stamps, x_zoom, x_pan, cfg),
        y_domain=y_domain(values, y_zoom, y_pan, cfg),
    )
