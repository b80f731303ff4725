"""
Tests for timestamp resolution and export formatting.
"""
from datetime import datetime, timedelta, timezone

import pytest

from repairdesk.lib.timestamps import format_for_export, resolve_timestamp


class FirestoreLikeTimestamp:
    """Backend timestamp object exposing to_datetime()."""

    def __init__(self, value: datetime):
        self._value = value

    def to_datetime(self) -> datetime:
        return self._value


class ProtobufLikeTimestamp:
    def __init__(self, value: datetime):
        self._value = value

    def ToDatetime(self) -> datetime:
        return self._value


EXPECTED = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [
        "2024-01-10T09:00:00Z",
        "2024-01-10T09:00:00.000Z",
        "2024-01-10T14:30:00+05:30",
        EXPECTED,
        datetime(2024, 1, 10, 9, 0),  # naive is UTC
        FirestoreLikeTimestamp(EXPECTED),
        ProtobufLikeTimestamp(EXPECTED.replace(tzinfo=None)),
        {"seconds": int(EXPECTED.timestamp()), "nanoseconds": 0},
        {"_seconds": int(EXPECTED.timestamp()), "_nanoseconds": 0},
    ],
)
def test_resolve_timestamp_accepts_every_shape(value):
    """All supported shapes resolve to the same aware UTC instant."""
    resolved = resolve_timestamp(value)

    assert resolved == EXPECTED
    assert resolved.utcoffset() == timedelta(0)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2024-13-45", 42, object()])
def test_resolve_timestamp_unresolvable_returns_none(value):
    assert resolve_timestamp(value) is None


@pytest.mark.unit
def test_format_for_export_matches_iso_millisecond_utc():
    value = datetime(2024, 1, 10, 14, 30, 0, 123456, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    assert format_for_export(value) == "2024-01-10T09:00:00.123Z"


@pytest.mark.unit
def test_format_for_export_empty_for_missing():
    assert format_for_export(None) == ""
