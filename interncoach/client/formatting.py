"""Display helpers: dates, relative times and the search filter."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional

from interncoach.client.stats import day_label
from interncoach.core.utils import parse_timestamp

SEARCH_FIELDS = ("company", "role", "location")


def format_date(value) -> str:
    """Render 2026-10-05 as "Oct 5, 2026"; empty string when unparsable."""
    moment = parse_timestamp(value)
    return day_label(moment) if moment else ""


def time_ago(value, now: Optional[datetime] = None) -> str:
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    seconds = int(((now or datetime.now()) - moment).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 2592000:
        return f"{seconds // 86400}d ago"
    return f"{seconds // 2592000}mo ago"


def filter_internships(records: Iterable[Mapping], term: str) -> list[Mapping]:
    """Case-insensitive substring match on company, role or location."""
    needle = (term or "").strip().lower()
    items = list(records)
    if not needle:
        return items
    return [
        record
        for record in items
        if any(needle in str(record.get(key) or "").lower() for key in SEARCH_FIELDS)
    ]
