# strength_rank/constants.py

from enum import Enum

from .errors import InvalidInputError


class Exercise(Enum):
    BENCH_PRESS = "bench_press"
    BACK_SQUAT = "back_squat"
    DEADLIFT = "deadlift"
    OVERHEAD_PRESS = "overhead_press"
    CHIN_UP = "chin_up"

    @property
    def label(self) -> str:
        return EXERCISE_LABELS[self]

    @classmethod
    def parse(cls, value) -> "Exercise":
        """Accepts enum members, keys, display labels and the four-lift names."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError(f"Unknown exercise: {value!r}")
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        exercise = EXERCISE_ALIASES.get(key)
        if exercise is None:
            raise InvalidInputError(f"Unknown exercise: {value!r}")
        return exercise


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "Gender":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown gender: {value!r}") from None


class Verification(Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value) -> "Verification":
        # Older records carry a plain boolean `verified` flag
        if value is None:
            return cls.UNVERIFIED
        if isinstance(value, bool):
            return cls.VERIFIED if value else cls.UNVERIFIED
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown verification state: {value!r}") from None


EXERCISE_LABELS = {
    Exercise.BENCH_PRESS: "Bench Press",
    Exercise.BACK_SQUAT: "Back Squat",
    Exercise.DEADLIFT: "Deadlift",
    Exercise.OVERHEAD_PRESS: "Overhead Press",
    Exercise.CHIN_UP: "Chin-up",
}

EXERCISE_ALIASES = {exercise.value: exercise for exercise in Exercise}
EXERCISE_ALIASES.update({
    # Four-lift deployment names
    "bench": Exercise.BENCH_PRESS,
    "squat": Exercise.BACK_SQUAT,
    "chinup": Exercise.CHIN_UP,
    "ohp": Exercise.OVERHEAD_PRESS,
})

# Leaderboard filter value meaning "all genders"
ANY_GENDER = "any"

CHALLENGE_EXERCISES = (Exercise.BENCH_PRESS, Exercise.BACK_SQUAT, Exercise.DEADLIFT)

# Column key -> exercise for group comparisons
COMPARISON_EXERCISES = {
    "bench": Exercise.BENCH_PRESS,
    "squat": Exercise.BACK_SQUAT,
    "deadlift": Exercise.DEADLIFT,
}

MEDALS = ("Gold", "Silver", "Bronze")

STATUS_IN_PROGRESS = "in progress"
STATUS_STARTING_SOON = "starting soon"
STATUS_COMPLETED = "completed"

# Epley denominator
EPLEY_REPS_DIVISOR = 30.0

# Leaderboard age buckets: label -> (youngest, oldest), None is open-ended
AGE_GROUPS = {
    "U23": (None, 23),
    "24-29": (24, 29),
    "30-39": (30, 39),
    "40+": (40, None),
}
# Filter value meaning "all ages"
ALL_AGE_GROUPS = "all"

# Recent lifts feed
FEED_DEFAULT_LIMIT = 30
FEED_MAX_LIMIT = 100
