#!/usr/bin/env python3
"""Print the chart payload for a JSON dump of bot-type updates.

Usage:
    python scripts/inspect_timeline.py <updates.json> [--range 7d] [--config config.yaml]
        [--base totalInvestment|baseInvestment] [--granularity days] [--verbose]

The JSON file holds a list of update objects as returned by
``GET /api/bot-types/<id>/updates``.
"""

import argparse
import json
import sys

from bot_timeline.chart import ChartRequest, build_chart
from bot_timeline.config import TimelineConfig, load_config_file
from bot_timeline.log_setup import setup_logging
from bot_timeline.models import CapitalBase
from bot_timeline.parsing import record_from_dict
from bot_timeline.ticks import Granularity
from bot_timeline.time_range import RangeSpec, TimeRange


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect the performance timeline of one bot type")
    parser.add_argument("updates", help="Path to a JSON list of update objects")
    parser.add_argument(
        "--range",
        default=TimeRange.ALL_TIME.value,
        choices=[r.value for r in TimeRange if r is not TimeRange.CUSTOM],
    )
    parser.add_argument("--config", default=None, help="YAML file with a timeline section")
    parser.add_argument(
        "--base", default=None, choices=[b.value for b in CapitalBase],
        help="Capital base for percentages (default: from config)",
    )
    parser.add_argument("--granularity", default="days", choices=[g.value for g in Granularity])
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    setup_logging(args.verbose)

    cfg = load_config_file(args.config) if args.config else TimelineConfig()
    with open(args.updates, encoding="utf-8") as f:
        records = [record_from_dict(item) for item in json.load(f)]

    request = ChartRequest(
        range=RangeSpec(range=TimeRange(args.range)),
        capital_base=CapitalBase(args.base) if args.base else None,
        granularity=Granularity(args.granularity),
    )
    payload = build_chart(records, request, cfg)
    json.dump(payload.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
