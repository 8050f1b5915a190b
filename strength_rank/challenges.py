"""Weekly, exercise-scoped challenges built on the leaderboard ranking."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional

from .constants import (
    CHALLENGE_EXERCISES,
    MEDALS,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_STARTING_SOON,
    Exercise,
)
from .models import ChallengeSummary, LiftEntry, RankedRow, WeekWindow
from .ranking import rank
from .week import align_to, week_range


def challenge_status(window: WeekWindow, now) -> str:
    moment = align_to(now, window.start)
    if window.start <= moment < window.end:
        return STATUS_IN_PROGRESS
    if moment < window.start:
        return STATUS_STARTING_SOON
    return STATUS_COMPLETED


def weekly_challenges(reference_date, now=None) -> List[ChallengeSummary]:
    """
    One challenge per tracked lift for the week containing reference_date.

    Status compares `now` (default: reference_date itself) against the week.
    """
    window = week_range(reference_date)
    status = challenge_status(window, now if now is not None else reference_date)
    return [
        ChallengeSummary(
            id=f"{window.week_label}-{exercise.value}",
            title=f"{exercise.label} Week",
            exercise=exercise,
            week=window,
            status=status,
        )
        for exercise in CHALLENGE_EXERCISES
    ]


def challenge_leaderboard(
    entries: Iterable[LiftEntry],
    exercise,
    reference_date,
    gender=None,
    gym_id: Optional[str] = None,
    age_group: Optional[str] = None,
) -> List[RankedRow]:
    """
    Leaderboard restricted to this week's entries; the top three get medals.

    gender, gym_id and age_group narrow the field the same way as rank().
    """
    exercise = Exercise.parse(exercise)
    window = week_range(reference_date)
    in_week = [entry for entry in entries if window.contains(entry.date)]
    rows = rank(in_week, exercise, gender=gender, gym_id=gym_id, age_group=age_group)
    return [
        replace(row, badge=MEDALS[index]) if index < len(MEDALS) else row
        for index, row in enumerate(rows)
    ]
