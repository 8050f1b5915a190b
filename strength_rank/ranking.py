"""Leaderboard ranking over a snapshot of lift entries."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from .constants import AGE_GROUPS, ALL_AGE_GROUPS, ANY_GENDER, FEED_MAX_LIMIT, Exercise, Gender
from .errors import InvalidInputError
from .models import LiftEntry, RankedRow


def _gender_filter(gender) -> Optional[Gender]:
    if gender is None:
        return None
    if isinstance(gender, str) and gender.strip().lower() in ("", ANY_GENDER):
        return None
    return Gender.parse(gender)


def _age_group_filter(age_group) -> Optional[Callable[[Optional[int]], bool]]:
    """Predicate on age for a bucket label; None means no age filter."""
    if age_group is None:
        return None
    label = str(age_group).strip().upper()
    if label.lower() in ("", ALL_AGE_GROUPS):
        return None
    if label not in AGE_GROUPS:
        raise InvalidInputError(f"Unknown age group: {age_group!r}")
    youngest, oldest = AGE_GROUPS[label]

    def matches(age):
        # Entries without an age never fall into a bucket
        if age is None:
            return False
        return (youngest is None or age >= youngest) and (oldest is None or age <= oldest)

    return matches


def filter_entries(
    entries: Iterable[LiftEntry],
    exercise,
    gender=None,
    gym_id: Optional[str] = None,
    age_group: Optional[str] = None,
) -> List[LiftEntry]:
    """Entries for one exercise, optionally narrowed by gender, gym and age group."""
    exercise = Exercise.parse(exercise)
    wanted_gender = _gender_filter(gender)
    age_matches = _age_group_filter(age_group)
    return [
        entry for entry in entries
        if entry.exercise is exercise
        and (wanted_gender is None or entry.gender is wanted_gender)
        and (not gym_id or entry.gym_id == gym_id)
        and (age_matches is None or age_matches(entry.age))
    ]


def best_by_user(entries: Iterable[LiftEntry]) -> Dict[str, LiftEntry]:
    """
    Highest-scoring entry per user_id.

    On equal scores the entry seen first is kept. The returned dict keeps
    the order in which users first appear.
    """
    best: Dict[str, LiftEntry] = {}
    best_scores: Dict[str, int] = {}
    for entry in entries:
        entry_score = entry.score
        current = best_scores.get(entry.user_id)
        if current is None or entry_score > current:
            best[entry.user_id] = entry
            best_scores[entry.user_id] = entry_score
    return best


def rank_best_entries(best_entries: Iterable[LiftEntry]) -> List[RankedRow]:
    # sorted() is stable, so equal scores keep first-appearance order
    ordered = sorted(best_entries, key=lambda entry: entry.score, reverse=True)
    return [
        RankedRow(
            rank=position,
            user_id=entry.user_id,
            user_name=entry.user_name,
            score=entry.score,
            weight_kg=entry.weight_kg,
            reps=entry.reps,
            verified=entry.verified,
        )
        for position, entry in enumerate(ordered, start=1)
    ]


def rank(
    entries: Iterable[LiftEntry],
    exercise,
    gender=None,
    gym_id: Optional[str] = None,
    age_group: Optional[str] = None,
) -> List[RankedRow]:
    """
    Build a leaderboard with one row per user.

    Args:
        entries: Snapshot of lift entries.
        exercise: Exercise (or its key) to rank.
        gender: Optional gender filter; None or "any" disables it.
        gym_id: Optional gym filter (exact match).
        age_group: Optional bucket label ("U23", "24-29", "30-39", "40+");
            None or "all" disables it. Entries without an age are left out
            when a bucket is chosen.

    Returns:
        Rows sorted by score descending with sequential 1-based ranks.
        Equal scores get consecutive ranks, not shared ones. No matching
        entries gives an empty list.
    """
    filtered = filter_entries(entries, exercise, gender=gender, gym_id=gym_id, age_group=age_group)
    return rank_best_entries(best_by_user(filtered).values())


def personal_records(entries: Iterable[LiftEntry], user_id: str) -> Dict[Exercise, LiftEntry]:
    """Current PR per exercise for one user: the best-scoring entry, not the latest."""
    by_exercise: Dict[Exercise, List[LiftEntry]] = {}
    for entry in entries:
        if entry.user_id == user_id:
            by_exercise.setdefault(entry.exercise, []).append(entry)

    records = {}
    for exercise in Exercise:
        best = best_by_user(by_exercise.get(exercise, []))
        if best:
            records[exercise] = best[user_id]
    return records


def recent_entries(
    entries: Iterable[LiftEntry],
    limit: int,
    user_names: Optional[Iterable[str]] = None,
) -> List[LiftEntry]:
    """
    Newest entries first, at most `limit` of them.

    With user_names only those lifters' entries are kept. Entries logged at
    the same moment keep their stored order.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= FEED_MAX_LIMIT:
        raise InvalidInputError(f"limit must be between 1 and {FEED_MAX_LIMIT}, got {limit!r}")
    if user_names is not None:
        names = set(user_names)
        entries = [entry for entry in entries if entry.user_name in names]
    # timestamp() puts naive (local) and aware dates on one scale
    ordered = sorted(entries, key=lambda entry: entry.date.timestamp(), reverse=True)
    return ordered[:limit]
