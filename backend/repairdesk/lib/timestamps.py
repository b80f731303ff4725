"""
Timestamp normalisation.

Documents reach the stores with `createdAt`/`updatedAt` in one of three
shapes: an ISO-8601 string, a `datetime`, or a backend timestamp object.
`resolve_timestamp` turns any of them into an aware UTC datetime once, at
ingestion, so filters and exports only ever see `Optional[datetime]`.
"""
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

import pytz

from repairdesk.lib.settings import settings


def _as_utc(value: datetime) -> datetime:
    # Naive values come from drivers that drop the offset (SQLite); they are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_mapping(value: Mapping[str, Any]) -> Optional[datetime]:
    seconds = value.get("seconds", value.get("_seconds"))
    if seconds is None:
        return None
    nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
    return datetime.fromtimestamp(float(seconds) + float(nanos) / 1e9, tz=timezone.utc)


def resolve_timestamp(value: Any) -> Optional[datetime]:
    """
    Resolve a timestamp in any supported shape to an aware UTC datetime.

    Returns None for empty or unparseable input instead of raising.
    """
    if value is None or value == "":
        return None

    try:
        if isinstance(value, datetime):
            return _as_utc(value)

        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return _as_utc(datetime.fromisoformat(text))

        if isinstance(value, Mapping):
            return _from_mapping(value)

        # Backend timestamp objects (Firestore style or protobuf Timestamp)
        for converter in ("to_datetime", "ToDatetime", "toDate"):
            convert = getattr(value, converter, None)
            if callable(convert):
                converted = convert()
                if isinstance(converted, datetime):
                    return _as_utc(converted)
                return None
    except (ValueError, TypeError, OverflowError, OSError):
        return None

    return None


def format_for_export(value: Optional[datetime]) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-01-10T09:00:00.000Z."""
    if value is None:
        return ""
    return _as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def business_tz():
    """Timezone the business operates in (period boundaries, 'today')."""
    return pytz.timezone(settings.business_timezone)


def to_business_time(value: datetime) -> datetime:
    """Convert an aware datetime to business-local time."""
    return _as_utc(value).astimezone(business_tz())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
