"""Tests for range resolution and update filtering."""

from datetime import date

import pytest
from helpers import DAY, HOUR, make_update, ms

from bot_timeline.time_range import RangeSpec, TimeRange, TimeWindow, filter_updates, resolve_range

NOW = ms("2025-11-20T12:00")


def _at(version: int, ts: int):
    return make_update(version, str(ts))


class TestResolveRange:
    def test_none_spec_is_no_filter(self):
        assert resolve_range(None, NOW) is None

    def test_all_time_is_no_filter(self):
        assert resolve_range(RangeSpec(range=TimeRange.ALL_TIME), NOW) is None

    @pytest.mark.parametrize(
        "preset,duration",
        [
            (TimeRange.ONE_HOUR, HOUR),
            (TimeRange.ONE_DAY, DAY),
            (TimeRange.SEVEN_DAYS, 7 * DAY),
            (TimeRange.THIRTY_DAYS, 30 * DAY),
        ],
    )
    def test_presets_are_rolling(self, preset, duration):
        window = resolve_range(RangeSpec(range=preset), NOW)
        assert window == TimeWindow(start_ms=NOW - duration, end_ms=None)

    def test_custom_duration(self):
        spec = RangeSpec(range=TimeRange.CUSTOM, custom_days=1, custom_hours=2, custom_minutes=30)
        window = resolve_range(spec, NOW)
        assert window.start_ms == NOW - DAY - 2 * HOUR - 30 * 60_000
        assert window.end_ms is None

    def test_custom_zero_duration_is_no_filter(self):
        assert resolve_range(RangeSpec(range=TimeRange.CUSTOM), NOW) is None

    def test_calendar_range_covers_whole_last_day(self):
        spec = RangeSpec(
            range=TimeRange.CUSTOM, date_from=date(2025, 11, 1), date_to=date(2025, 11, 3)
        )
        window = resolve_range(spec, NOW)
        assert window.start_ms == ms("2025-11-01T00:00")
        assert window.end_ms == ms("2025-11-04T00:00") - 1

    def test_calendar_beats_duration(self):
        spec = RangeSpec(
            range=TimeRange.CUSTOM,
            custom_days=1,
            date_from=date(2025, 11, 1),
            date_to=date(2025, 11, 1),
        )
        window = resolve_range(spec, NOW)
        assert window.start_ms == ms("2025-11-01T00:00")

    def test_calendar_reversed_dates_are_swapped(self):
        spec = RangeSpec(
            range=TimeRange.CUSTOM, date_from=date(2025, 11, 3), date_to=date(2025, 11, 1)
        )
        window = resolve_range(spec, NOW)
        assert window.start_ms == ms("2025-11-01T00:00")
        assert window.end_ms == ms("2025-11-04T00:00") - 1

    def test_bracket_uses_end_times(self):
        first = make_update(1, "2025-11-02T00:00", "2025-11-01T00:00")
        last = make_update(3, "2025-11-04T00:00", "2025-11-03T00:00")
        window = resolve_range(RangeSpec(from_update=first, until_update=last), NOW)
        assert window == TimeWindow(start_ms=ms("2025-11-02T00:00"), end_ms=ms("2025-11-04T00:00"))

    def test_bracket_falls_back_to_start_then_creation(self):
        no_end = make_update(1, None, "2025-11-01T00:00")
        only_created = make_update(2, None, None, created_at="2025-11-05T08:00")
        window = resolve_range(RangeSpec(from_update=no_end, until_update=only_created), NOW)
        assert window == TimeWindow(start_ms=ms("2025-11-01T00:00"), end_ms=ms("2025-11-05T08:00"))

    def test_bracket_beats_preset(self):
        first = make_update(1, "2025-11-02T00:00")
        last = make_update(2, "2025-11-04T00:00")
        spec = RangeSpec(range=TimeRange.ONE_HOUR, from_update=first, until_update=last)
        assert resolve_range(spec, NOW).start_ms == ms("2025-11-02T00:00")

    def test_window_is_inclusive_and_callable(self):
        window = TimeWindow(start_ms=10, end_ms=20)
        assert window(10) and window(20)
        assert not window.contains(9)
        assert not window.contains(21)


class TestFilterUpdates:
    def test_rolling_day_keeps_cutoff_inclusive(self):
        records = [
            _at(1, NOW - DAY - 1),
            _at(2, NOW - DAY),
            _at(3, NOW - HOUR),
            _at(4, NOW),
        ]
        spec = RangeSpec(range=TimeRange.CUSTOM, custom_days=1)
        kept = filter_updates(records, spec, NOW)
        assert [r.version for r in kept] == [2, 3, 4]

    def test_no_filter_returns_everything_sorted(self):
        records = [_at(2, NOW), _at(1, NOW - DAY)]
        assert [r.version for r in filter_updates(records, None, NOW)] == [1, 2]

    def test_zero_custom_never_empties(self):
        records = [_at(1, NOW - 400 * DAY)]
        assert len(filter_updates(records, RangeSpec(range=TimeRange.CUSTOM), NOW)) == 1

    def test_bracket_selection(self):
        records = [make_update(v, f"2025-11-0{v}T00:00") for v in range(1, 6)]
        spec = RangeSpec(from_update=records[1], until_update=records[3])
        assert [r.version for r in filter_updates(records, spec, NOW)] == [2, 3, 4]

    def test_calendar_keeps_late_evening(self):
        records = [
            make_update(1, "2025-11-03T23:59:59"),
            make_update(2, "2025-11-04T00:00"),
        ]
        spec = RangeSpec(
            range=TimeRange.CUSTOM, date_from=date(2025, 11, 1), date_to=date(2025, 11, 3)
        )
        assert [r.version for r in filter_updates(records, spec, NOW)] == [1]

    def test_missing_end_is_dropped_even_with_start_in_window(self):
        now = ms("2025-11-03T12:00")
        records = [
            make_update(1, "2025-11-03T06:00"),
            make_update(2, None, "2025-11-03T08:00"),
        ]
        spec = RangeSpec(range=TimeRange.ONE_DAY)
        assert [r.version for r in filter_updates(records, spec, now)] == [1]

    def test_unreadable_end_is_dropped_by_window(self):
        records = [make_update(1, "garbage", created_at=str(NOW)), _at(2, NOW)]
        spec = RangeSpec(range=TimeRange.SEVEN_DAYS)
        assert [r.version for r in filter_updates(records, spec, NOW)] == [2]

    def test_unresolvable_timestamp_kept_without_window(self):
        records = [_at(2, NOW), make_update(1, "garbage")]
        assert [r.version for r in filter_updates(records, None, NOW)] == [1, 2]

    def test_empty(self):
        assert filter_updates([], RangeSpec(range=TimeRange.ONE_DAY), NOW) == []
