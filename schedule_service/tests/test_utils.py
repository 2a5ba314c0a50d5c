"""Tests for deadline and timestamp helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from schedule_service.utils.deadline import Deadline
from schedule_service.utils.timestamps import ensure_utc, format_rfc3339, parse_rfc3339


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_deadline_remaining_and_expiry():
    clock = FakeClock()
    deadline = Deadline.after(15, clock=clock)
    assert deadline.remaining() == 15
    assert not deadline.expired

    clock.now += 20
    assert deadline.remaining() == 0
    assert deadline.expired


def test_child_deadline_is_never_looser_than_parent():
    clock = FakeClock()
    request = Deadline.after(15, clock=clock)
    assert request.child(5).remaining() == 5

    clock.now += 12
    assert request.child(5).remaining() == 3


@pytest.mark.parametrize("value, expected", [
    ("2025-01-15T09:00:00Z", datetime(2025, 1, 15, 9, tzinfo=timezone.utc)),
    ("2025-01-15t09:00:00z", datetime(2025, 1, 15, 9, tzinfo=timezone.utc)),
    ("2025-01-15T09:00:00.5+02:00", datetime(2025, 1, 15, 9, 0, 0, 500000, tzinfo=timezone(timedelta(hours=2)))),
    ("2025-01-15T09:00:00.123456789Z", datetime(2025, 1, 15, 9, 0, 0, 123456, tzinfo=timezone.utc)),
])
def test_parse_rfc3339(value, expected):
    assert parse_rfc3339(value) == expected


@pytest.mark.parametrize("value", [
    "2025-01-15T09:00:00",
    "2025-01-15 09:00:00Z",
    "2025-01-15",
    "2025-13-01T09:00:00Z",
    "2025-01-15T25:00:00Z",
    "2025-01-15T09:00:00Z\n",
    " 2025-01-15T09:00:00Z",
    "1736931600",
    "",
])
def test_parse_rfc3339_rejects(value):
    with pytest.raises(ValueError):
        parse_rfc3339(value)


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime(2025, 1, 15, 9)
    assert ensure_utc(naive) == datetime(2025, 1, 15, 9, tzinfo=timezone.utc)
    assert format_rfc3339(naive) == "2025-01-15T09:00:00Z"


def test_format_converts_offsets_to_utc():
    value = parse_rfc3339("2025-01-15T19:00:00-05:00")
    assert format_rfc3339(value) == "2025-01-16T00:00:00Z"
