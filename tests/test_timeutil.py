"""
tests/test_timeutil.py — Id & Calendar Helper Tests
=====================================================
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from toastx.engine.timeutil import (
    format_relative_time,
    generate_id,
    hours_since,
    is_today,
    month_string,
    parse_ts,
    start_of_month,
    start_of_quarter,
    start_of_week,
    today_string,
)

NOW = datetime(2026, 2, 18, 15, 0, tzinfo=UTC)


class TestGenerateId:
    def test_format(self):
        rid = generate_id("rec", now=NOW)
        assert re.fullmatch(r"rec-[0-9a-z]+-[0-9a-z]{9}", rid)

    def test_default_prefix(self):
        assert generate_id(now=NOW).startswith("toast-x-")

    def test_ids_are_unique(self):
        assert len({generate_id(now=NOW) for _ in range(200)}) == 200


class TestCalendar:
    def test_today_and_month_strings(self):
        assert today_string(NOW) == "2026-02-18"
        assert month_string(NOW) == "2026-02"

    def test_is_today_accepts_dates_and_strings(self):
        assert is_today("2026-02-18", NOW)
        assert is_today(NOW.replace(hour=0), NOW)
        assert not is_today("2026-02-17", NOW)

    def test_is_today_empty_is_false(self):
        assert not is_today("", NOW)
        assert not is_today(None, NOW)

    def test_naive_timestamps_are_utc(self):
        assert parse_ts("2026-02-18T15:00:00") == NOW

    def test_hours_since(self):
        assert hours_since(NOW - timedelta(hours=23), NOW) == 23

    def test_week_starts_monday(self):
        monday = start_of_week(NOW)
        assert monday == datetime(2026, 2, 16, tzinfo=UTC)
        assert monday.weekday() == 0

    def test_month_and_quarter_start(self):
        assert start_of_month(NOW) == datetime(2026, 2, 1, tzinfo=UTC)
        assert start_of_quarter(NOW) == datetime(2026, 1, 1, tzinfo=UTC)
        assert start_of_quarter(datetime(2026, 11, 3, tzinfo=UTC)) == datetime(2026, 10, 1, tzinfo=UTC)


class TestRelativeTime:
    def test_buckets(self):
        assert format_relative_time(NOW - timedelta(seconds=20), NOW) == "Just now"
        assert format_relative_time(NOW - timedelta(minutes=5), NOW) == "5m ago"
        assert format_relative_time(NOW - timedelta(hours=3), NOW) == "3h ago"
        assert format_relative_time(NOW - timedelta(hours=30), NOW) == "Yesterday"
        assert format_relative_time(NOW - timedelta(days=4), NOW) == "4d ago"

    def test_older_dates(self):
        assert format_relative_time(datetime(2026, 1, 5, tzinfo=UTC), NOW) == "Jan 5"
        assert format_relative_time(datetime(2025, 3, 5, tzinfo=UTC), NOW) == "Mar 5, 2025"
