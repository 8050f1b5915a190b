"""Calendar helpers for weekly challenges and daily streaks."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from .models import WeekWindow

ONE_DAY = timedelta(days=1)


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def align_to(moment: datetime, reference: datetime) -> datetime:
    """
    Express moment so it can be compared with reference.

    Aware moments against a naive (local time) reference are converted to
    local time; naive moments against an aware reference take its zone.
    """
    moment = _as_datetime(moment)
    if reference.tzinfo is None:
        if moment.tzinfo is not None:
            return moment.astimezone().replace(tzinfo=None)
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=reference.tzinfo)
    return moment.astimezone(reference.tzinfo)


def iso_week_label(moment) -> str:
    iso_year, iso_week, _ = _as_datetime(moment).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def week_range(reference_date) -> WeekWindow:
    """
    The Monday-to-Monday window containing reference_date.

    start is Monday 00:00 in the reference's own zone (naive means local
    time), end is start + 7 days and exclusive. The label uses ISO-8601
    week numbering, so 2024-12-30 belongs to "2025-W01".
    """
    reference = _as_datetime(reference_date)
    start = (reference - timedelta(days=reference.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    end = start + timedelta(days=7)
    return WeekWindow(start=start, end=end, week_label=iso_week_label(start))


def _utc_day(value) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def current_streak(timestamps: Iterable, today=None) -> int:
    """
    Number of consecutive training days ending today.

    Timestamps are reduced to distinct UTC dates. The newest day may be
    today or yesterday (one day of grace); every older day must follow the
    previous one without a gap. Dates after today count as the newest day.
    """
    days = sorted({_utc_day(ts) for ts in timestamps}, reverse=True)
    if not days:
        return 0

    anchor = _utc_day(today) if today is not None else datetime.now(timezone.utc).date()
    if days[0] < anchor - ONE_DAY:
        return 0

    streak = 1
    for previous, day in zip(days, days[1:]):
        if previous - day != ONE_DAY:
            break
        streak += 1
    return streak
