"""
Cycle position resolution.

Maps a moment in time onto a (week, day) coordinate of a program template.
The cycle is rolling: day 1 of week 1 is the enrollment's start date, whatever
weekday that was. Past the end of the program the position stays pinned to
the final day of the final week.

All functions here are pure. ``now`` is always passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, order=True)
class CyclePosition:
    """1-based (week, day) coordinate; ordering is lexicographic."""

    week_index: int
    day_index: int


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def to_naive_utc(value: datetime) -> datetime:
    """Normalise aware datetimes to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def elapsed_days(start_at: datetime, now: datetime) -> int:
    """1-based count of cycle days since ``start_at``; never below 1."""
    delta = to_naive_utc(now) - to_naive_utc(start_at)
    return max(1, delta // ONE_DAY + 1)


def total_span_days(cycle_days: int, weeks_count: int) -> int:
    return cycle_days * weeks_count


def resolve_cycle_position(
    start_at: datetime,
    cycle_days: int,
    weeks_count: int,
    now: datetime,
) -> CyclePosition:
    """
    Resolve the (week, day) a player is on at ``now``.

    Args:
        start_at: Enrollment start; anchors week 1 day 1
        cycle_days: Days per template week (validated > 0 at template write time)
        weeks_count: Weeks in the template (validated > 0 at template write time)
        now: Moment to resolve for

    Returns:
        CyclePosition clamped into [1, weeks_count] x [1, cycle_days]
    """
    elapsed = elapsed_days(start_at, now)
    offset = elapsed - 1

    week_index = _clamp(offset // cycle_days + 1, 1, weeks_count)
    day_index = _clamp(offset % cycle_days + 1, 1, cycle_days)

    # Past the program span the modulo would wrap back to day 1
    if elapsed > total_span_days(cycle_days, weeks_count):
        return CyclePosition(weeks_count, cycle_days)

    return CyclePosition(week_index, day_index)


def is_program_finished(
    start_at: datetime,
    cycle_days: int,
    weeks_count: int,
    now: datetime,
) -> bool:
    """True once ``now`` is beyond the last day of the last week."""
    return elapsed_days(start_at, now) > total_span_days(cycle_days, weeks_count)
