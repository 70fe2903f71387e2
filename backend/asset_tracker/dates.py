"""Display formatting for ISO timestamps ("5 minutes ago", "Jan 3, 2025")."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

NEVER = "Never"
NOT_AVAILABLE = "N/A"
INVALID = "Invalid date"
MISSING_SHORT = "--"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 string; naive values are taken as UTC."""

    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _distance(seconds: float) -> str:
    minutes = round(seconds / 60)
    if seconds < 45:
        return "less than a minute"
    if minutes < 45:
        return _plural(max(1, minutes), "minute")
    if minutes < 24 * 60:
        return f"about {_plural(max(1, round(minutes / 60)), 'hour')}"
    days = round(minutes / (24 * 60))
    if days < 30:
        return _plural(days, "day")
    if days < 365:
        return f"about {_plural(max(1, round(days / 30)), 'month')}"
    return _plural(days // 365, "year")


def _clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {value:%p}"


def format_relative(value: str | None, now: datetime | None = None) -> str:
    if not value:
        return NEVER
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return INVALID
    delta = (_now(now) - moment).total_seconds()
    text = _distance(abs(delta))
    return f"{text} ago" if delta >= 0 else f"in {text}"


def format_relative_with_time(value: str | None, now: datetime | None = None) -> str:
    """Relative time followed by the short absolute form, e.g. ``5 minutes ago · Jan 3, 2:30 PM``."""

    if not value:
        return NEVER
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return INVALID
    return f"{format_relative(value, now)} · {moment:%b} {moment.day}, {_clock(moment)}"


def format_date_time(value: str | None) -> str:
    if not value:
        return NOT_AVAILABLE
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return INVALID
    return f"{moment:%b} {moment.day}, {moment.year} {_clock(moment)}"


def format_date(value: str | None) -> str:
    if not value:
        return NOT_AVAILABLE
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return INVALID
    return f"{moment:%b} {moment.day}, {moment.year}"


def format_short_relative(value: str | None, now: datetime | None = None) -> str:
    """Compact age: ``now``, ``5m``, ``2h``, ``3d`` and the date beyond 30 days."""

    if not value:
        return MISSING_SHORT
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return MISSING_SHORT
    seconds = (_now(now) - moment).total_seconds()
    minutes = int(seconds // 60)
    if minutes < 1:
        return "now"
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    days = hours // 24
    if days < 30:
        return f"{days}d"
    return f"{moment:%b} {moment.day}"


__all__ = [
    "format_date",
    "format_date_time",
    "format_relative",
    "format_relative_with_time",
    "format_short_relative",
    "parse_timestamp",
]
