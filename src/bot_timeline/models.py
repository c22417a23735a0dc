"""Data structures for the bot performance timeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

# Shared Decimal constants
ZERO = Decimal("0")
HUNDRED = Decimal("100")

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

# Sentinel for "let the renderer pick the bounds"
AUTO_DOMAIN = ("auto", "auto")


class UpdateStatus(Enum):
    UPDATE_METRICS = "Update Metrics"
    CLOSED_BOTS = "Closed Bots"


class Metric(Enum):
    CAPITAL = "capital"
    TOTAL_PROFIT = "totalProfit"
    TOTAL_PROFIT_PERCENT = "totalProfitPercent"
    AVG_PROFIT_PER_DAY = "avgProfitPerDay"
    REAL_PROFIT_PER_DAY = "realProfitPerDay"


ALL_METRICS: tuple[Metric, ...] = (
    Metric.CAPITAL,
    Metric.TOTAL_PROFIT,
    Metric.TOTAL_PROFIT_PERCENT,
    Metric.AVG_PROFIT_PER_DAY,
    Metric.REAL_PROFIT_PER_DAY,
)


class CapitalBase(Enum):
    TOTAL_INVESTMENT = "totalInvestment"
    BASE_INVESTMENT = "baseInvestment"


@dataclass(frozen=True)
class UpdateRecord:
    """One performance snapshot of a bot type, as delivered by the API.

    Money and time fields stay raw strings; the engine coerces them itself so
    a single bad field never drops the whole record.
    """

    id: str
    bot_type_id: str
    version: int
    status: UpdateStatus
    period_end: Optional[str]
    period_start: Optional[str] = None
    profit: Optional[str] = None
    grid_profit_total: Optional[str] = None
    grid_profit_total_absolute: Optional[str] = None  # newer records only
    total_investment: Optional[str] = None
    base_investment: Optional[str] = None
    avg_grid_profit_per_day: Optional[str] = None
    runtime_longest: Optional[str] = None  # e.g. "3d 5h 30m"
    runtime_average: Optional[str] = None
    calculation_mode: Optional[str] = None  # legacy: "Normal" | "Startmetrik"
    created_at: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status is UpdateStatus.CLOSED_BOTS

    @property
    def has_absolute_values(self) -> bool:
        return self.grid_profit_total_absolute is not None


@dataclass(frozen=True)
class PlotPoint:
    timestamp: int  # epoch ms
    is_start_point: bool
    version: int
    status: UpdateStatus
    values: dict[Metric, Decimal]
    runtime_ms: Optional[int] = None  # UpdateMetrics end points only
    is_comparison_carry: bool = False
    continues_into_next: bool = False  # next update carries on from this end point
    update_id: str = ""

    def value(self, metric: Metric) -> Decimal:
        return self.values.get(metric, ZERO)


@dataclass(frozen=True)
class MergedPoint:
    """One instant of a multi-entity overlay. Missing entities have no key."""

    timestamp: int
    values: dict[str, Decimal] = field(default_factory=dict)
    start_entities: frozenset[str] = field(default_factory=frozenset)


class LabelAnchor(Enum):
    ABOVE = "above"
    BELOW = "below"


class ExtremaKind(Enum):
    HIGHEST = "highest"
    LOWEST = "lowest"


@dataclass(frozen=True)
class ExtremaMarker:
    metric: Metric
    kind: ExtremaKind
    timestamp: int
    value: Decimal
    offset: int  # display units away from the point
    anchor: LabelAnchor


@dataclass(frozen=True)
class MetricExtrema:
    highest: Optional[ExtremaMarker]
    lowest: Optional[ExtremaMarker]


Domain = Union[tuple[float, float], tuple[str, str]]


@dataclass(frozen=True)
class Viewport:
    x_domain: Domain
    y_domain: Domain

    @property
    def is_auto(self) -> bool:
        return self.x_domain == AUTO_DOMAIN and self.y_domain == AUTO_DOMAIN
