"""Utility helpers."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def today() -> date:
    return date.today()


def format_time(minutes: float) -> str:
    """Render minutes as ``"1h 30m"`` or ``"45m"``."""

    total = int(round(minutes or 0))
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.replace("Z", "")).date()


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` means UTC."""

    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso_string(dt: datetime | date) -> str:
    """Format like ``Date.prototype.toISOString`` (UTC, millisecond precision)."""

    if not isinstance(dt, datetime):
        dt = datetime.combine(dt, datetime.min.time())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
