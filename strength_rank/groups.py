from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from .constants import COMPARISON_EXERCISES, Exercise
from .models import ComparisonRow, LiftEntry
from .scoring import format_lift_label


def normalize_members(members: Iterable[str]) -> List[str]:
    """Strip names, drop blanks and repeats, keep roster order."""
    seen = []
    for name in members:
        name = str(name).strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def group_comparison(
    entries: Iterable[LiftEntry],
    members: Iterable[str],
    exercises: Mapping[str, Exercise] = COMPARISON_EXERCISES,
) -> List[ComparisonRow]:
    """
    Side-by-side best lifts for a roster of display names.

    Every member gets a row, even with no entries. Each column shows the
    member's best set for that exercise as "weight×reps", picked by
    strength score (the same PR definition as the leaderboard).
    """
    columns = {exercise: key for key, exercise in exercises.items()}
    rows: Dict[str, ComparisonRow] = {
        name: ComparisonRow(user_name=name, labels={key: None for key in exercises})
        for name in normalize_members(members)
    }
    best_scores: Dict[tuple, int] = {}

    for entry in entries:
        row = rows.get(entry.user_name)
        column = columns.get(entry.exercise)
        if row is None or column is None:
            continue
        entry_score = entry.score
        current = best_scores.get((entry.user_name, column))
        if current is None or entry_score > current:
            best_scores[(entry.user_name, column)] = entry_score
            row.labels[column] = format_lift_label(entry.weight_kg, entry.reps)

    return list(rows.values())
