"""Record types shared by the store, the ranking functions and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .constants import Exercise, Gender, Verification
from .errors import InvalidInputError
from .scoring import score as score_lift


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing 'Z' is read as UTC."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Invalid date: {value!r}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(f"Invalid date: {value!r}") from None


def _optional_int(value, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid {name}: {value!r}") from None


@dataclass(frozen=True)
class LiftEntry:
    """One recorded attempt. Immutable once stored."""
    id: str
    user_id: str
    user_name: str
    exercise: Exercise
    reps: int
    weight_kg: float
    date: datetime
    gym_id: Optional[str] = None
    gender: Optional[Gender] = None
    age: Optional[int] = None
    equipment: Optional[str] = None
    verification: Verification = Verification.UNVERIFIED

    def __post_init__(self):
        # Rejects zero/negative weight and reps before anything is stored
        score_lift(self.weight_kg, self.reps)
        object.__setattr__(self, "reps", int(self.reps))
        object.__setattr__(self, "weight_kg", float(self.weight_kg))

    @property
    def score(self) -> int:
        return score_lift(self.weight_kg, self.reps)

    @property
    def verified(self) -> bool:
        return self.verification is Verification.VERIFIED

    @classmethod
    def from_dict(cls, data: Dict[str, Any], entry_id: Optional[str] = None) -> "LiftEntry":
        """
        Build an entry from its storage/JSON form, validating every closed
        value (exercise, gender, verification) on the way in.
        """
        if not isinstance(data, dict):
            raise InvalidInputError("Lift entry must be an object")
        missing = [k for k in ("user_id", "user_name", "exercise", "reps", "weight_kg") if data.get(k) in (None, "")]
        if missing:
            raise InvalidInputError(f"Missing fields: {', '.join(missing)}")

        gender = data.get("gender")
        verification = data.get("verification", data.get("verified"))
        date = data.get("date") or datetime.now().astimezone().isoformat()
        weight_kg = data["weight_kg"]
        if isinstance(weight_kg, str):
            try:
                weight_kg = float(weight_kg)
            except ValueError:
                raise InvalidInputError(f"Invalid weight_kg: {weight_kg!r}") from None

        return cls(
            id=str(entry_id if entry_id is not None else data.get("id", "")),
            user_id=str(data["user_id"]),
            user_name=str(data["user_name"]).strip(),
            exercise=Exercise.parse(data["exercise"]),
            reps=data["reps"],
            weight_kg=weight_kg,
            date=parse_timestamp(date),
            gym_id=data.get("gym_id") or None,
            gender=Gender.parse(gender) if gender else None,
            age=_optional_int(data.get("age"), "age"),
            equipment=data.get("equipment") or None,
            verification=Verification.parse(verification),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "exercise": self.exercise.value,
            "reps": self.reps,
            "weight_kg": self.weight_kg,
            "date": self.date.isoformat(),
            "gym_id": self.gym_id,
            "gender": self.gender.value if self.gender else None,
            "age": self.age,
            "equipment": self.equipment,
            "verification": self.verification.value,
        }


@dataclass(frozen=True)
class WeekWindow:
    start: datetime
    end: datetime
    week_label: str

    def contains(self, moment: datetime) -> bool:
        """True if moment falls in [start, end)."""
        from .week import align_to

        return self.start <= align_to(moment, self.start) < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "week_label": self.week_label,
        }


@dataclass(frozen=True)
class RankedRow:
    rank: int
    user_id: str
    user_name: str
    score: int
    weight_kg: float
    reps: int
    verified: bool
    badge: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        row = {
            "rank": self.rank,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "score": self.score,
            "best": {"weight_kg": self.weight_kg, "reps": self.reps},
            "verified": self.verified,
        }
        if self.badge is not None:
            row["badge"] = self.badge
        return row


@dataclass(frozen=True)
class ChallengeSummary:
    id: str
    title: str
    exercise: Exercise
    week: WeekWindow
    status: str

    @property
    def week_label(self) -> str:
        return self.week.week_label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "exercise": self.exercise.value,
            "week_label": self.week.week_label,
            "start": self.week.start.isoformat(),
            "end": self.week.end.isoformat(),
            "status": self.status,
        }


@dataclass
class ComparisonRow:
    user_name: str
    labels: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"user_name": self.user_name, **self.labels}
