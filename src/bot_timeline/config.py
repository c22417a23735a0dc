"""Timeline engine configuration: YAML loader + validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Union

import yaml

from bot_timeline.models import CapitalBase

log = logging.getLogger("tl.config")


@dataclass(frozen=True)
class TimelineConfig:
    # Series building
    overlap_tolerance_ms: int = 60_000  # start point vs. previous end point
    comparison_epsilon: Decimal = Decimal("0.01")  # |total - absolute| above this = delta record
    capital_base: CapitalBase = CapitalBase.TOTAL_INVESTMENT

    # Extrema labels
    label_offset: int = 8
    label_stack_step: int = 12
    extrema_time_window_ms: int = 3_600_000
    extrema_value_window: Decimal = Decimal("0.03")  # fraction of the metric's range

    # Axis ticks
    tick_crowding_factor: float = 0.3  # of the interval, near either boundary
    tick_min_count: int = 3
    tick_fallback_min_ms: int = 1_800_000
    tick_fallback_divisions: int = 8
    max_ticks: int = 200

    # Viewport padding
    y_range_padding: float = 0.15
    y_bottom_padding: float = 0.10  # of the largest absolute value
    x_padding: float = 0.05
    single_point_x_span_ms: int = 86_400_000


def validate_config(cfg: TimelineConfig) -> None:
    """Validate config values. Raises ValueError with all issues found."""
    errors: list[str] = []

    if cfg.overlap_tolerance_ms < 0:
        errors.append(f"overlap_tolerance_ms must be >= 0, got {cfg.overlap_tolerance_ms}")
    if cfg.comparison_epsilon < 0:
        errors.append(f"comparison_epsilon must be >= 0, got {cfg.comparison_epsilon}")
    if cfg.label_offset < 0:
        errors.append(f"label_offset must be >= 0, got {cfg.label_offset}")
    if cfg.label_stack_step <= 0:
        errors.append(f"label_stack_step must be > 0, got {cfg.label_stack_step}")
    if cfg.extrema_time_window_ms < 0:
        errors.append(f"extrema_time_window_ms must be >= 0, got {cfg.extrema_time_window_ms}")
    if not (0 <= cfg.extrema_value_window <= 1):
        errors.append(f"extrema_value_window must be in [0, 1], got {cfg.extrema_value_window}")
    if not (0 <= cfg.tick_crowding_factor < 0.5):
        errors.append(f"tick_crowding_factor must be in [0, 0.5), got {cfg.tick_crowding_factor}")
    if cfg.tick_min_count < 2:
        errors.append(f"tick_min_count must be >= 2, got {cfg.tick_min_count}")
    if cfg.tick_fallback_min_ms <= 0:
        errors.append(f"tick_fallback_min_ms must be > 0, got {cfg.tick_fallback_min_ms}")
    if cfg.tick_fallback_divisions <= 0:
        errors.append(f"tick_fallback_divisions must be > 0, got {cfg.tick_fallback_divisions}")
    if cfg.max_ticks < cfg.tick_min_count:
        errors.append(
            f"max_ticks ({cfg.max_ticks}) must be >= tick_min_count ({cfg.tick_min_count})"
        )
    if cfg.y_range_padding < 0:
        errors.append(f"y_range_padding must be >= 0, got {cfg.y_range_padding}")
    if cfg.y_bottom_padding < 0:
        errors.append(f"y_bottom_padding must be >= 0, got {cfg.y_bottom_padding}")
    if cfg.x_padding < 0:
        errors.append(f"x_padding must be >= 0, got {cfg.x_padding}")
    if cfg.single_point_x_span_ms <= 0:
        errors.append(f"single_point_x_span_ms must be > 0, got {cfg.single_point_x_span_ms}")

    if errors:
        raise ValueError("Config validation failed:\n  " + "\n  ".join(errors))


def _capital_base(raw: Any) -> CapitalBase:
    if isinstance(raw, CapitalBase):
        return raw
    for base in CapitalBase:
        if raw in (base.value, base.name, base.name.lower()):
            return base
    raise ValueError(f"Unknown capital_base {raw!r}")


def load_timeline_config(raw: dict[str, Any]) -> TimelineConfig:
    """Load TimelineConfig from config.yaml's timeline section."""
    section = (raw or {}).get("timeline", {})
    if not section:
        log.debug("No timeline section in config, using defaults")
        return TimelineConfig()

    defaults = TimelineConfig()
    cfg = TimelineConfig(
        overlap_tolerance_ms=int(section.get("overlap_tolerance_ms", defaults.overlap_tolerance_ms)),
        comparison_epsilon=Decimal(str(section.get("comparison_epsilon", "0.01"))),
        capital_base=_capital_base(section.get("capital_base", defaults.capital_base.value)),
        label_offset=int(section.get("label_offset", defaults.label_offset)),
        label_stack_step=int(section.get("label_stack_step", defaults.label_stack_step)),
        extrema_time_window_ms=int(
            section.get("extrema_time_window_ms", defaults.extrema_time_window_ms)
        ),
        extrema_value_window=Decimal(str(section.get("extrema_value_window", "0.03"))),
        tick_crowding_factor=float(
            section.get("tick_crowding_factor", defaults.tick_crowding_factor)
        ),
        tick_min_count=int(section.get("tick_min_count", defaults.tick_min_count)),
        tick_fallback_min_ms=int(section.get("tick_fallback_min_ms", defaults.tick_fallback_min_ms)),
        tick_fallback_divisions=int(
            section.get("tick_fallback_divisions", defaults.tick_fallback_divisions)
        ),
        max_ticks=int(section.get("max_ticks", defaults.max_ticks)),
        y_range_padding=float(section.get("y_range_padding", defaults.y_range_padding)),
        y_bottom_padding=float(section.get("y_bottom_padding", defaults.y_bottom_padding)),
        x_padding=float(section.get("x_padding", defaults.x_padding)),
        single_point_x_span_ms=int(
            section.get("single_point_x_span_ms", defaults.single_point_x_span_ms)
        ),
    )
    validate_config(cfg)
    return cfg


def load_config_file(path: Union[str, Path]) -> TimelineConfig:
    """Read a YAML file and load its timeline section."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return load_timeline_config(raw)
