"""Lenient coercion of user-entered update fields.

Upload data is typed in by hand or read off screenshots, so every helper here
degrades to a neutral value instead of raising: bad numbers become ZERO, bad
timestamps become None (the series builder sorts those first as epoch 0).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from bot_timeline.models import ZERO, UpdateRecord, UpdateStatus

# Anything below this is an epoch in seconds, not milliseconds (~ year 5138 in s)
_EPOCH_MS_THRESHOLD = 100_000_000_000

_TRAILING_STATUS_RE = re.compile(
    r"\s*(closed|geschlossen|open|offen|running|laufend).*$", re.IGNORECASE
)
_TIME_PART = r"(?:[ ,T]+(\d{1,2}):(\d{2})(?::(\d{2}))?)?"
# 24.11.2025 16:42[:05]
_DE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})" + _TIME_PART + r"$")
# 11/24/2025 4:42 PM
_US_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})" + _TIME_PART + r"\s*([AaPp][Mm])?$")
_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")

_RUNTIME_DAYS_RE = re.compile(r"(\d+)\s*[dD]")
_RUNTIME_HOURS_RE = re.compile(r"(\d+)\s*[hH]")
_RUNTIME_MINUTES_RE = re.compile(r"(\d+)\s*m(?!s)")
_RUNTIME_SECONDS_RE = re.compile(r"(\d+)\s*s")

_STATUS_ALIASES = {
    "update metrics": UpdateStatus.UPDATE_METRICS,
    "updatemetrics": UpdateStatus.UPDATE_METRICS,
    "closed bots": UpdateStatus.CLOSED_BOTS,
    "closedbots": UpdateStatus.CLOSED_BOTS,
}


def to_decimal(raw: Any) -> Decimal:
    """Coerce a decimal string or number to Decimal; anything unusable is ZERO."""
    if raw is None or isinstance(raw, bool):
        return ZERO
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else ZERO
    if isinstance(raw, int):
        return Decimal(raw)
    text = str(raw).strip()
    for suffix in ("USDT", "%", "$"):
        text = text.replace(suffix, "")
    text = text.replace(" ", "")
    if not text:
        return ZERO
    if "," in text:
        # "12,5" is a decimal comma; "1,234.5" has a thousands separator
        text = text.replace(",", "") if "." in text else text.replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ZERO
    return value if value.is_finite() else ZERO


def _to_epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return round(dt.timestamp() * 1000)


def _from_parts(year, month, day, hour, minute, second, meridiem=None) -> Optional[int]:
    h = int(hour) if hour else 0
    if meridiem:
        h = h % 12 + (12 if meridiem.lower() == "pm" else 0)
    try:
        dt = datetime(
            int(year), int(month), int(day), h, int(minute) if minute else 0,
            int(second) if second else 0, tzinfo=timezone.utc,
        )
    except ValueError:
        return None
    return _to_epoch_ms(dt)


def parse_timestamp(raw: Any) -> Optional[int]:
    """Parse an update timestamp into epoch milliseconds, or None.

    Accepts epoch numbers (seconds or ms), ISO 8601, German ``DD.MM.YYYY HH:MM``
    and US ``MM/DD/YYYY HH:MM``. Naive values are taken as UTC.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return _to_epoch_ms(raw)
    if isinstance(raw, (int, float, Decimal)):
        value = float(raw)
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return round(value if abs(value) >= _EPOCH_MS_THRESHOLD else value * 1000)

    text = _TRAILING_STATUS_RE.sub("", str(raw)).strip()
    if not text:
        return None
    if _NUMERIC_RE.match(text):
        return parse_timestamp(float(text))

    m = _DE_RE.match(text)
    if m:
        day, month, year, hour, minute, second = m.groups()
        return _from_parts(year, month, day, hour, minute, second)

    m = _US_RE.match(text)
    if m:
        month, day, year, hour, minute, second, meridiem = m.groups()
        return _from_parts(year, month, day, hour, minute, second, meridiem)

    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _to_epoch_ms(dt)


def parse_runtime(raw: Optional[str]) -> Decimal:
    """Runtime text such as ``"3d 5h 30m 22s"`` in hours."""
    if not raw:
        return ZERO
    hours = ZERO
    m = _RUNTIME_DAYS_RE.search(raw)
    if m:
        hours += Decimal(int(m.group(1)) * 24)
    m = _RUNTIME_HOURS_RE.search(raw)
    if m:
        hours += Decimal(int(m.group(1)))
    m = _RUNTIME_MINUTES_RE.search(raw)
    if m:
        hours += Decimal(int(m.group(1))) / 60
    m = _RUNTIME_SECONDS_RE.search(raw)
    if m:
        hours += Decimal(int(m.group(1))) / 3600
    return hours


def end_timestamp(record: UpdateRecord) -> int:
    """periodEnd in epoch ms; missing or unreadable sorts first as 0."""
    ts = parse_timestamp(record.period_end)
    return 0 if ts is None else ts


def resolve_timestamp(record: UpdateRecord) -> Optional[int]:
    """Best available instant for a record: end, then start, then creation time."""
    for raw in (record.period_end, record.period_start, record.created_at):
        ts = parse_timestamp(raw)
        if ts is not None:
            return ts
    return None


def parse_status(raw: Any) -> UpdateStatus:
    if isinstance(raw, UpdateStatus):
        return raw
    status = _STATUS_ALIASES.get(str(raw).strip().lower())
    if status is None:
        raise ValueError(f"Unknown update status {raw!r}")
    return status


def _text(raw: Any) -> Optional[str]:
    return None if raw is None else str(raw)


def _first(data: dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        if data.get(key) is not None:
            return _text(data[key])
    return None


def record_from_dict(data: dict[str, Any]) -> UpdateRecord:
    """Build an UpdateRecord from an API update object (camelCase keys)."""
    return UpdateRecord(
        id=str(data.get("id", "")),
        bot_type_id=str(data.get("botTypeId", "")),
        version=int(data.get("version") or 0),
        status=parse_status(data.get("status", UpdateStatus.UPDATE_METRICS.value)),
        period_end=_first(data, "periodEnd"),
        period_start=_first(data, "periodStart"),
        profit=_first(data, "profit"),
        grid_profit_total=_first(data, "gridProfitTotal", "overallGridProfitUsdt"),
        grid_profit_total_absolute=_first(
            data, "gridProfitTotalAbsolute", "overallGridProfitUsdtAbsolute"
        ),
        total_investment=_first(data, "totalInvestment"),
        base_investment=_first(data, "baseInvestment", "investment"),
        avg_grid_profit_per_day=_first(data, "avgGridProfitPerDay", "avgGridProfitDay"),
        runtime_longest=_first(data, "runtimeLongest", "longestRuntime"),
        runtime_average=_first(data, "runtimeAverage", "avgRuntime"),
        calculation_mode=_first(data, "calculationMode"),
        created_at=_first(data, "createdAt"),
    )
