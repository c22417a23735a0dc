"""Record and point builders shared by the timeline tests."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from bot_timeline.models import ALL_METRICS, ZERO, Metric, PlotPoint, UpdateRecord, UpdateStatus

HOUR = 3_600_000
DAY = 86_400_000


def ms(text: str) -> int:
    """ISO text (naive = UTC) to epoch ms."""
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def make_update(
    version: int,
    end: Optional[str],
    start: Optional[str] = None,
    grid_profit: str = "0",
    absolute: Optional[str] = None,
    status: UpdateStatus = UpdateStatus.UPDATE_METRICS,
    **kwargs,
) -> UpdateRecord:
    kwargs.setdefault("total_investment", "1000")
    kwargs.setdefault("base_investment", "800")
    return UpdateRecord(
        id=f"u{version}",
        bot_type_id="grid-bots",
        version=version,
        status=status,
        period_end=end,
        period_start=start,
        grid_profit_total=grid_profit,
        grid_profit_total_absolute=absolute,
        **kwargs,
    )


def make_point(
    timestamp: int,
    start: bool = False,
    **values: str,
) -> PlotPoint:
    """PlotPoint with metric values given by Metric.value keyword, rest ZERO."""
    by_metric = {m: ZERO for m in ALL_METRICS}
    for key, raw in values.items():
        by_metric[Metric(key)] = Decimal(raw)
    return PlotPoint(
        timestamp=timestamp,
        is_start_point=start,
        version=1,
        status=UpdateStatus.UPDATE_METRICS,
        values=by_metric,
    )
