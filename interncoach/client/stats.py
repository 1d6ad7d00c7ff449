"""
Derived statistics over the full internship collection.

Everything here is a pure function of the records (plus the weekly goal and
the current time, both passed in). Nothing is cached: callers recompute after
every refresh.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional

from interncoach.core.utils import parse_timestamp
from interncoach.domain.internships import PLATFORMS, STATUSES, platform_of

DEFAULT_WEEKLY_GOAL = 5
MIN_WEEKLY_GOAL = 1

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_ABBR = tuple(name[:3] for name in MONTH_NAMES)


@dataclass
class WeeklyGoalProgress:
    this_week: int
    goal: int
    percent: int

    @property
    def label(self) -> str:
        return f"{self.this_week} / {self.goal}"


@dataclass
class PlatformStat:
    platform: str
    count: int
    offers: int
    offer_rate: float


@dataclass
class InternshipStats:
    total: int
    by_status: dict[str, int]
    interview_rate: float
    offer_rate: float
    status_share: dict[str, float]
    this_week: int
    weekly_goal: WeeklyGoalProgress
    platforms: list[PlatformStat]
    per_day: dict[str, int] = field(default_factory=dict)
    per_month: dict[str, int] = field(default_factory=dict)
    avg_response_days: int = 0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a browser would (0.5 goes up), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percent(part: int, total: int) -> float:
    """part/total*100 to one decimal; 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part / total * 100, 1)


def count_by_status(records: Iterable[Mapping]) -> dict[str, int]:
    counts = {status: 0 for status in STATUSES}
    for record in records:
        status = record.get("status")
        if isinstance(status, str) and status in counts:
            counts[status] += 1
    return counts


def week_start(now: Optional[datetime] = None) -> datetime:
    """Monday 00:00:00 local time of the week containing now (Sunday belongs to the week before)."""
    current = parse_timestamp(now) if now else datetime.now()
    start = current - timedelta(days=current.weekday())
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def _record_moment(record: Mapping) -> Optional[datetime]:
    return parse_timestamp(record.get("createdAt") or record.get("deadline"))


def count_this_week(records: Iterable[Mapping], now: Optional[datetime] = None) -> int:
    start = week_start(now)
    total = 0
    for record in records:
        moment = _record_moment(record)
        if moment is not None and moment >= start:
            total += 1
    return total


def normalize_goal(goal) -> int:
    try:
        value = int(goal)
    except (TypeError, ValueError):
        return DEFAULT_WEEKLY_GOAL
    return max(MIN_WEEKLY_GOAL, value)


def weekly_goal_progress(this_week: int, goal=DEFAULT_WEEKLY_GOAL) -> WeeklyGoalProgress:
    goal_value = normalize_goal(goal)
    pct = min(100, int(round_half_up(this_week / goal_value * 100)))
    return WeeklyGoalProgress(this_week=this_week, goal=goal_value, percent=pct)


def platform_stats(records: Iterable[Mapping]) -> list[PlatformStat]:
    """Counts and offer rate for each entry of the fixed platform list."""
    counts: dict[str, int] = {}
    offers: dict[str, int] = {}
    for record in records:
        platform = platform_of(record)
        counts[platform] = counts.get(platform, 0) + 1
        if record.get("status") == "Offer":
            offers[platform] = offers.get(platform, 0) + 1
    return [
        PlatformStat(
            platform=platform,
            count=counts.get(platform, 0),
            offers=offers.get(platform, 0),
            offer_rate=percent(offers.get(platform, 0), counts.get(platform, 0)),
        )
        for platform in PLATFORMS
    ]


def day_label(moment: datetime) -> str:
    return f"{MONTH_ABBR[moment.month - 1]} {moment.day}, {moment.year}"


def month_label(moment: datetime) -> str:
    return f"{MONTH_NAMES[moment.month - 1]} {moment.year}"


def group_by_day(records: Iterable[Mapping]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        moment = parse_timestamp(record.get("deadline"))
        if moment is None:
            continue
        label = day_label(moment)
        counts[label] = counts.get(label, 0) + 1
    return counts


def group_by_month(records: Iterable[Mapping]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        moment = parse_timestamp(record.get("deadline"))
        if moment is None:
            continue
        label = month_label(moment)
        counts[label] = counts.get(label, 0) + 1
    return counts


def average_response_days(records: Iterable[Mapping], now: Optional[datetime] = None) -> int:
    """Mean whole days since the application date, over records past Applied."""
    current = parse_timestamp(now) if now else datetime.now()
    days = []
    for record in records:
        if record.get("status") == "Applied":
            continue
        moment = parse_timestamp(record.get("deadline"))
        if moment is None:
            continue
        days.append(math.floor((current - moment).total_seconds() / 86400))
    if not days:
        return 0
    return int(round_half_up(sum(days) / len(days)))


def compute_stats(
    records: Iterable[Mapping],
    *,
    weekly_goal=DEFAULT_WEEKLY_GOAL,
    now: Optional[datetime] = None,
) -> InternshipStats:
    items = list(records)
    current = parse_timestamp(now) if now else datetime.now()
    total = len(items)
    by_status = count_by_status(items)
    this_week = count_this_week(items, current)
    return InternshipStats(
        total=total,
        by_status=by_status,
        interview_rate=percent(by_status["Interview"], total),
        offer_rate=percent(by_status["Offer"], total),
        status_share={status: percent(count, total) for status, count in by_status.items()},
        this_week=this_week,
        weekly_goal=weekly_goal_progress(this_week, weekly_goal),
        platforms=platform_stats(items),
        per_day=group_by_day(items),
        per_month=group_by_month(items),
        avg_response_days=average_response_days(items, current),
    )
