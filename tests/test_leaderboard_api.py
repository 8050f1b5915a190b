import pytest
from datetime import datetime, timedelta, timezone

# --- Helper Functions ---

def add(store, user_id, user_name, exercise="bench_press", weight_kg=100, reps=5, **extra):
    return store.append_lift_entry({
        "user_id": user_id,
        "user_name": user_name,
        "exercise": exercise,
        "weight_kg": weight_kg,
        "reps": reps,
        "date": extra.pop("date", "2024-01-03T10:00:00"),
        **extra,
    })


# --- Tests for /v1/exercises and /v1/score ---

def test_list_exercises(client):
    response = client.get('/v1/exercises')
    assert response.status_code == 200
    data = response.get_json()
    assert data[0] == {"key": "bench_press", "label": "Bench Press"}
    assert len(data) == 5


def test_score_endpoint(client):
    response = client.post('/v1/score', json={"weight_kg": 100, "reps": 5})
    assert response.status_code == 200
    assert response.get_json()["score"] == 117


@pytest.mark.parametrize("body", [
    {"weight_kg": 0, "reps": 5},
    {"weight_kg": 100, "reps": 0},
    {"weight_kg": "abc", "reps": 5},
    {"reps": 5},
])
def test_score_endpoint_rejects_invalid_input(client, body):
    response = client.post('/v1/score', json=body)
    assert response.status_code == 400
    assert "error" in response.get_json()


# --- Tests for /v1/leaderboard ---

def test_leaderboard_ranks_best_lift_per_user(client, store):
    add(store, "A", "A", weight_kg=100, reps=5)
    add(store, "A", "A", weight_kg=90, reps=8)
    add(store, "B", "B", weight_kg=80, reps=10)

    response = client.get('/v1/leaderboard?exercise=bench_press')

    assert response.status_code == 200
    data = response.get_json()
    assert [(row["rank"], row["user_name"], row["score"]) for row in data] == [(1, "A", 117), (2, "B", 107)]
    assert data[0]["best"] == {"weight_kg": 100.0, "reps": 5}


def test_leaderboard_filters(client, store):
    add(store, "u1", "Ana", gender="female", gym_id="ZG_ARENA")
    add(store, "u2", "Marko", gender="male", gym_id="ZG_ARENA", weight_kg=120)
    add(store, "u3", "Luka", gender="male", gym_id="ST_CITY", weight_kg=110)

    women = client.get('/v1/leaderboard?exercise=bench_press&gender=female').get_json()
    everyone = client.get('/v1/leaderboard?exercise=bench_press&gender=any').get_json()
    gym = client.get('/v1/leaderboard?exercise=bench_press&gym_id=ZG_ARENA').get_json()

    assert [row["user_name"] for row in women] == ["Ana"]
    assert [row["user_name"] for row in everyone] == ["Marko", "Luka", "Ana"]
    assert [row["user_name"] for row in gym] == ["Marko", "Ana"]


def test_leaderboard_empty_store(client):
    response = client.get('/v1/leaderboard?exercise=deadlift')
    assert response.status_code == 200
    assert response.get_json() == []


def test_leaderboard_requires_known_exercise(client):
    assert client.get('/v1/leaderboard').status_code == 400
    assert client.get('/v1/leaderboard?exercise=leg_press').status_code == 400


# --- Tests for /v1/users/<user_id>/profile ---

def test_profile_lists_personal_records_and_streak(client, store):
    now = datetime.now(timezone.utc)
    add(store, "u1", "Ana", exercise="deadlift", weight_kg=140, reps=5, date=(now - timedelta(days=1)).isoformat())
    add(store, "u1", "Ana", exercise="deadlift", weight_kg=150, reps=1, date=now.isoformat())
    add(store, "u1", "Ana", exercise="bench_press", weight_kg=60, reps=5, date=(now - timedelta(days=10)).isoformat())

    response = client.get('/v1/users/u1/profile')

    assert response.status_code == 200
    data = response.get_json()
    assert data["user_name"] == "Ana"
    assert data["streak"] == 2
    records = {pr["exercise"]: pr for pr in data["personal_records"]}
    assert set(records) == {"bench_press", "deadlift"}
    assert records["deadlift"]["lift"] == "140×5"
    assert records["deadlift"]["score"] == 163


def test_profile_unknown_user_is_empty(client):
    response = client.get('/v1/users/nobody/profile')
    assert response.status_code == 200
    assert response.get_json() == {"user_id": "nobody", "user_name": None, "personal_records": [], "streak": 0}


def test_leaderboard_age_group_filter(client, store):
    add(store, "u1", "Ana", age=22)
    add(store, "u2", "Marko", age=31, weight_kg=120)
    add(store, "u3", "Luka", age=24, weight_kg=110)
    add(store, "u4", "Mia")

    under_23 = client.get('/v1/leaderboard?exercise=bench_press&age_group=U23').get_json()
    thirties = client.get('/v1/leaderboard?exercise=bench_press&age_group=30-39').get_json()
    everyone = client.get('/v1/leaderboard?exercise=bench_press&age_group=all').get_json()

    assert [row["user_name"] for row in under_23] == ["Ana"]
    assert [row["user_name"] for row in thirties] == ["Marko"]
    assert len(everyone) == 4


def test_leaderboard_rejects_unknown_age_group(client):
    response = client.get('/v1/leaderboard?exercise=bench_press&age_group=teens')
    assert response.status_code == 400


# --- Tests for /v1/feed ---

def test_feed_lists_newest_lifts_first(client, store):
    add(store, "u1", "Ana", date="2024-01-01T09:00:00")
    add(store, "u2", "Marko", weight_kg=72.5, reps=3, date="2024-01-05T09:00:00")
    add(store, "u3", "Luka", date="2024-01-03T09:00:00")

    response = client.get('/v1/feed?limit=2')

    assert response.status_code == 200
    data = response.get_json()
    assert [item["user_name"] for item in data] == ["Marko", "Luka"]
    assert data[0]["lift"] == "72.5×3"
    assert data[0]["score"] == 80


def test_feed_for_group_members(client, store):
    add(store, "u1", "Ana", date="2024-01-01T09:00:00")
    add(store, "u2", "Marko", date="2024-01-05T09:00:00")
    add(store, "u3", "Luka", date="2024-01-03T09:00:00")
    store.save_group("Crew", ["Ana", "Luka"])

    crew = client.get('/v1/feed?group=Crew').get_json()
    nobody = client.get('/v1/feed?group=Nobody').get_json()

    assert [item["user_name"] for item in crew] == ["Luka", "Ana"]
    assert nobody == []


def test_feed_rejects_bad_limit(client):
    assert client.get('/v1/feed?limit=abc').status_code == 400
    assert client.get('/v1/feed?limit=0').status_code == 400
    assert client.get('/v1/feed?limit=500').status_code == 400
