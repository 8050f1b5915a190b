import pytest
import os
import sys
from datetime import datetime

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from strength_rank.app import app, limiter
from strength_rank.models import LiftEntry
from strength_rank.store import JsonFileLiftStore

TEST_JWT_SECRET = "test-secret-key-for-strength-rank-suite"


@pytest.fixture()
def store():
    return JsonFileLiftStore()


@pytest.fixture()
def client(store):
    app.config.update(TESTING=True, JWT_SECRET_KEY=TEST_JWT_SECRET, LIFT_STORE_BACKEND='json')
    app.extensions['lift_store'] = store
    limiter.enabled = False
    with app.test_client() as client:
        yield client
    app.extensions.pop('lift_store', None)


@pytest.fixture()
def make_lift():
    """Factory for LiftEntry objects with sensible defaults."""
    counter = {"n": 0}

    def _make(user_id="u1", exercise="bench_press", weight_kg=100, reps=5, **overrides):
        counter["n"] += 1
        fields = {
            "user_id": user_id,
            "user_name": overrides.pop("user_name", f"User {user_id}"),
            "exercise": exercise,
            "reps": reps,
            "weight_kg": weight_kg,
            "date": overrides.pop("date", datetime(2024, 1, 3, 12, 0)),
        }
        fields.update(overrides)
        return LiftEntry.from_dict(fields, entry_id=f"lift-{counter['n']}")

    return _make
