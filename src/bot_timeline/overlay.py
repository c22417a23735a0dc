"""Multi-entity overlay: one merged timeline for several bot types."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from bot_timeline.config import TimelineConfig
from bot_timeline.models import CapitalBase, MergedPoint, Metric, UpdateRecord
from bot_timeline.series import build_series
from bot_timeline.time_range import RangeSpec, filter_updates

log = logging.getLogger("tl.overlay")


def compose_entities(
    entities: Mapping[str, Sequence[UpdateRecord]],
    metric: Metric,
    cfg: Optional[TimelineConfig] = None,
    capital_base: Optional[CapitalBase] = None,
    spec: Optional[RangeSpec] = None,
    now_ms: Optional[int] = None,
) -> list[MergedPoint]:
    """Merge per-entity series of one metric into a single timestamp-keyed list.

    Every entity is filtered and built on its own, so comparison accounting
    never pools profits across entities. An entity without a point at some
    instant has no key there; renderers connect its existing points only.
    """
    by_ts: dict[int, dict[str, Decimal]] = {}
    starts: dict[int, set[str]] = {}

    for name, records in entities.items():
        filtered = filter_updates(records, spec, now_ms)
        for point in build_series(filtered, cfg, capital_base):
            slot = by_ts.setdefault(point.timestamp, {})
            slot[name] = point.value(metric)
            if point.is_start_point:
                starts.setdefault(point.timestamp, set()).add(name)
            else:
                # An end point wins over a start point at the same instant
                starts.get(point.timestamp, set()).discard(name)

    merged = [
        MergedPoint(
            timestamp=ts,
            values=dict(by_ts[ts]),
            start_entities=frozenset(starts.get(ts, ())),
        )
        for ts in sorted(by_ts)
    ]
    log.debug("OVERLAY %d entities → %d merged points", len(entities), len(merged))
    return merged


def entity_series(merged: Sequence[MergedPoint], name: str) -> list[tuple[int, Decimal]]:
    """(timestamp, value) pairs for one entity, skipping instants where it has none."""
    return [(p.timestamp, p.values[name]) for p in merged if name in p.values]
