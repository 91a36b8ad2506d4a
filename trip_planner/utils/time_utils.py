"""Wall-clock helpers for trip timelines."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def resolve_timezone(name: Optional[str] = None) -> Optional[tzinfo]:
    """Return the named IANA zone. None means the server's local zone."""
    if name:
        return ZoneInfo(name)
    return None


def parse_local_datetime(
    date_iso: str, hh_mm: str, tz: Optional[tzinfo] = None
) -> datetime:
    """
    Build an aware datetime from YYYY-MM-DD and HH:MM wall-clock values.

    The result carries a fixed UTC offset, so adding minutes to it is
    elapsed time and every derived timestamp keeps that offset.
    """
    year, month, day = (int(part) for part in date_iso.split("-"))
    hours, minutes = (int(part) for part in hh_mm.split(":"))
    naive = datetime(year, month, day, hours, minutes)
    if tz is None:
        return naive.astimezone()
    value = naive.replace(tzinfo=tz)
    return value.astimezone(timezone(value.utcoffset()))


def add_minutes(value: datetime, minutes: int) -> datetime:
    return value + timedelta(minutes=minutes)


def diff_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, never negative."""
    return max(0, round((end - start).total_seconds() / 60))


def format_local_iso(value: datetime) -> str:
    # 2025-06-01T08:00:00-05:00
    return value.isoformat(timespec="seconds")
