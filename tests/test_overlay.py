"""Tests for the multi-entity overlay."""

from decimal import Decimal

from helpers import DAY, make_update, ms

from bot_timeline.models import Metric
from bot_timeline.overlay import compose_entities, entity_series
from bot_timeline.time_range import RangeSpec, TimeRange

D = Decimal


def _entities():
    return {
        "A": [
            make_update(1, "2025-11-01T00:00", None, "10", absolute="10"),
            make_update(2, "2025-11-02T00:00", None, "5", absolute="15"),
        ],
        "B": [
            make_update(1, "2025-11-02T00:00", None, "3", absolute="3"),
            make_update(2, "2025-11-03T00:00", None, "4", absolute="7"),
        ],
    }


class TestComposeEntities:
    def test_union_of_timestamps(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        assert [p.timestamp for p in merged] == [
            ms("2025-11-01T00:00"),
            ms("2025-11-02T00:00"),
            ms("2025-11-03T00:00"),
        ]

    def test_missing_entity_has_no_key(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        assert "A" in merged[0].values
        assert "B" not in merged[0].values
        assert "A" not in merged[2].values

    def test_accumulation_stays_per_entity(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        assert merged[1].values == {"A": D("15"), "B": D("3")}
        assert merged[2].values == {"B": D("7")}

    def test_start_entities(self):
        entities = {
            "A": [make_update(1, "2025-11-02T00:00", "2025-11-01T00:00", "10")],
            "B": [make_update(1, "2025-11-01T00:00", "2025-10-31T00:00", "4")],
        }
        merged = compose_entities(entities, Metric.TOTAL_PROFIT)
        first_nov = next(p for p in merged if p.timestamp == ms("2025-11-01T00:00"))
        # A starts here while B ends here; both contribute a value
        assert first_nov.start_entities == frozenset({"A"})
        assert first_nov.values == {"A": D("0"), "B": D("4")}

    def test_start_entities_only_at_start_points(self):
        entities = {
            "A": [
                make_update(1, "2025-11-02T00:00", "2025-11-01T00:00", "10"),
                make_update(2, "2025-11-04T00:00", "2025-11-03T00:00", "20"),
            ],
        }
        merged = compose_entities(entities, Metric.TOTAL_PROFIT)
        assert merged[0].start_entities == frozenset({"A"})
        assert merged[1].start_entities == frozenset()
        assert merged[2].start_entities == frozenset({"A"})

    def test_range_applies_to_each_entity(self):
        now = ms("2025-11-03T12:00")
        spec = RangeSpec(range=TimeRange.ONE_DAY)
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT, spec=spec, now_ms=now)
        assert [p.timestamp for p in merged] == [ms("2025-11-03T00:00")]
        # B's second update is now the first in its window, so it counts as absolute
        assert merged[0].values == {"B": D("4")}

    def test_capital_metric(self):
        merged = compose_entities(_entities(), Metric.CAPITAL)
        assert merged[1].values == {"A": D("1000"), "B": D("1000")}

    def test_no_entities(self):
        assert compose_entities({}, Metric.CAPITAL) == []


class TestEntitySeries:
    def test_skips_instants_without_value(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        assert entity_series(merged, "B") == [
            (ms("2025-11-02T00:00"), D("3")),
            (ms("2025-11-03T00:00"), D("7")),
        ]

    def test_unknown_entity(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        assert entity_series(merged, "C") == []

    def test_spacing(self):
        merged = compose_entities(_entities(), Metric.TOTAL_PROFIT)
        stamps = [ts for ts, _ in entity_series(merged, "A")]
        assert stamps[1] - stamps[0] == DAY
