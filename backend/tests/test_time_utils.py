from datetime import date, datetime, timezone

import pytest

from studyfeed.core.time_utils import format_duration, monday_of, parse_record_date


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-05", date(2025, 1, 5)),
        ("2025-01-05T09:30:00", date(2025, 1, 5)),
        ("2025-01-05 23:59", date(2025, 1, 5)),
        ("2025年01月05日", date(2025, 1, 5)),
        ("2025年1月5日 14:30", date(2025, 1, 5)),
        ("2025/01/05", date(2025, 1, 5)),
        ("2025/01/05 08:00", date(2025, 1, 5)),
        ("  2025-01-05  ", date(2025, 1, 5)),
    ],
)
def test_parse_record_date_accepts_client_formats(value, expected):
    assert parse_record_date(value, "UTC") == expected


@pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2025-02-30", "05/01/2025"])
def test_parse_record_date_rejects_garbage(value):
    assert parse_record_date(value, "UTC") is None


def test_offset_datetime_converted_to_target_zone():
    assert parse_record_date("2025-01-05T20:00:00Z", "Asia/Tokyo") == date(2025, 1, 6)
    assert parse_record_date("2025-01-05T20:00:00+00:00", "UTC") == date(2025, 1, 5)


def test_naive_datetime_is_wall_clock():
    assert parse_record_date("2025-01-05T23:30:00", "Asia/Tokyo") == date(2025, 1, 5)


def test_datetime_and_date_objects():
    aware = datetime(2025, 1, 5, 20, 0, tzinfo=timezone.utc)
    assert parse_record_date(aware, "Asia/Tokyo") == date(2025, 1, 6)
    assert parse_record_date(date(2025, 1, 5)) == date(2025, 1, 5)


def test_monday_of():
    assert monday_of(date(2025, 1, 8)) == date(2025, 1, 6)
    assert monday_of(date(2025, 1, 6)) == date(2025, 1, 6)
    assert monday_of(date(2025, 1, 12)) == date(2025, 1, 6)


@pytest.mark.parametrize("minutes, text", [(0, "0時間0分"), (45, "0時間45分"), (60, "1時間0分"), (90, "1時間30分")])
def test_format_duration(minutes, text):
    assert format_duration(minutes) == text
