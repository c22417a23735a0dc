"""
Bot performance timeline engine.

Contains:
- models.py: UpdateRecord, PlotPoint, MergedPoint, Metric, extrema/viewport types
- config.py: TimelineConfig + YAML loader
- parsing.py: lenient number/timestamp/runtime coercion
- time_range.py: RangeSpec → TimeWindow, update filtering
- series.py: start/end point series with comparison-mode accounting
- overlay.py: multi-entity merged timeline
- extrema.py: highest/lowest markers with label placement
- ticks.py: boundary-anchored X-axis ticks
- viewport.py: zoom/pan domains
- chart.py: the full pipeline
"""

from bot_timeline.chart import (
    ChartPayload,
    ChartRequest,
    OverlayPayload,
    build_chart,
    build_overlay_chart,
    summarize,
)
from bot_timeline.config import TimelineConfig, load_config_file, load_timeline_config
from bot_timeline.extrema import find_extrema
from bot_timeline.models import (
    ALL_METRICS,
    AUTO_DOMAIN,
    CapitalBase,
    MergedPoint,
    Metric,
    PlotPoint,
    UpdateRecord,
    UpdateStatus,
    Viewport,
)
from bot_timeline.overlay import compose_entities
from bot_timeline.series import build_series, is_comparison_update
from bot_timeline.ticks import Granularity, plan_ticks
from bot_timeline.time_range import RangeSpec, TimeRange, TimeWindow, filter_updates, resolve_range
from bot_timeline.viewport import compute_viewport, x_domain, y_domain

__all__ = [
    # Models
    "ALL_METRICS",
    "AUTO_DOMAIN",
    "CapitalBase",
    "MergedPoint",
    "Metric",
    "PlotPoint",
    "UpdateRecord",
    "UpdateStatus",
    "Viewport",
    # Config
    "TimelineConfig",
    "load_config_file",
    "load_timeline_config",
    # Filtering
    "RangeSpec",
    "TimeRange",
    "TimeWindow",
    "filter_updates",
    "resolve_range",
    # Components
    "build_series",
    "is_comparison_update",
    "compose_entities",
    "find_extrema",
    "Granularity",
    "plan_ticks",
    "compute_viewport",
    "x_domain",
    "y_domain",
    # Pipeline
    "ChartPayload",
    "ChartRequest",
    "OverlayPayload",
    "build_chart",
    "build_overlay_chart",
    "summarize",
]
