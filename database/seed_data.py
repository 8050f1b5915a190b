import random
import sys
from datetime import datetime, timedelta, timezone

from strength_rank.constants import Exercise

# Demo lifters to be seeded
USERS_DATA = [
    {"id": "u1", "name": "Ana", "gender": "female", "age": 27, "gym_id": "ZG_ARENA"},
    {"id": "u2", "name": "Marko", "gender": "male", "age": 31, "gym_id": "ZG_ARENA"},
    {"id": "u3", "name": "Luka", "gender": "male", "age": 24, "gym_id": "ST_CITY"},
    {"id": "u4", "name": "Mia", "gender": "female", "age": 29, "gym_id": "RI_TOWER"},
]

# Typical working weight per lift (kg); other lifts use DEFAULT_BASE_WEIGHT_KG
BASE_WEIGHTS_KG = {
    Exercise.DEADLIFT: 140,
    Exercise.BACK_SQUAT: 110,
    Exercise.BENCH_PRESS: 80,
}
DEFAULT_BASE_WEIGHT_KG = 45
REP_CHOICES = [3, 5, 5, 8]

DEMO_GROUP_NAME = "Demo group"
DEMO_GROUP_MEMBERS = ["Ana", "Marko", "Luka"]


def jitter(value: float, rng: random.Random, spread: float = 0.25) -> int:
    return max(1, round(value * (1 + (rng.random() * 2 - 1) * spread)))


def build_seed_lifts(today: datetime | None = None, rng: random.Random | None = None) -> list[dict]:
    """Six to eight weekly entries per lifter and exercise, oldest first."""
    rng = rng or random.Random(42)
    today = today or datetime.now(timezone.utc)
    lifts = []
    for user in USERS_DATA:
        for exercise in Exercise:
            base = BASE_WEIGHTS_KG.get(exercise, DEFAULT_BASE_WEIGHT_KG)
            weeks = 6 + rng.randrange(3)
            for week in range(weeks, 0, -1):
                performed_at = today - timedelta(days=week * 7 - rng.randrange(3))
                lifts.append({
                    "user_id": user["id"],
                    "user_name": user["name"],
                    "exercise": exercise.value,
                    "reps": rng.choice(REP_CHOICES),
                    "weight_kg": jitter(base, rng),
                    "date": performed_at.isoformat(),
                    "gym_id": user["gym_id"],
                    "gender": user["gender"],
                    "age": user["age"],
                    "verification": "verified" if rng.random() < 0.3 else "unverified",
                })
    return lifts


def seed_if_empty(store, today: datetime | None = None, rng: random.Random | None = None) -> int:
    """Seeds demo lifts and a demo group into an empty store. Returns lifts added."""
    if store.get_all_lift_entries():
        print("Store already has lifts; skipping seed.")
        return 0
    lifts = build_seed_lifts(today=today, rng=rng)
    for lift in lifts:
        store.append_lift_entry(lift)
    store.save_group(DEMO_GROUP_NAME, DEMO_GROUP_MEMBERS)
    print(f"Seeded {len(lifts)} lifts for {len(USERS_DATA)} users and group '{DEMO_GROUP_NAME}'.")
    return len(lifts)


if __name__ == "__main__":
    from strength_rank.app import get_store

    print("Attempting to seed demo data...")
    try:
        seed_if_empty(get_store())
    except Exception as e:
        print(f"Seeding failed: {e}")
        sys.exit(1)
    print("Script finished.")
