from datetime import datetime

from strength_rank.challenges import challenge_leaderboard, challenge_status, weekly_challenges
from strength_rank.constants import Exercise
from strength_rank.week import week_range

REFERENCE = datetime(2024, 1, 3, 12, 0)  # Wednesday of 2024-W01


# --- Tests for weekly_challenges ---

def test_weekly_challenges_one_per_tracked_lift():
    challenges = weekly_challenges(REFERENCE)

    assert [c.exercise for c in challenges] == [Exercise.BENCH_PRESS, Exercise.BACK_SQUAT, Exercise.DEADLIFT]
    assert [c.id for c in challenges] == ["2024-W01-bench_press", "2024-W01-back_squat", "2024-W01-deadlift"]
    assert challenges[0].title == "Bench Press Week"
    assert all(c.week_label == "2024-W01" for c in challenges)
    assert all(c.status == "in progress" for c in challenges)


def test_weekly_challenge_status_relative_to_now():
    assert weekly_challenges(REFERENCE, now=datetime(2023, 12, 31, 23, 0))[0].status == "starting soon"
    assert weekly_challenges(REFERENCE, now=datetime(2024, 1, 8, 0, 0))[0].status == "completed"


def test_challenge_status_boundaries():
    window = week_range(REFERENCE)
    assert challenge_status(window, window.start) == "in progress"
    assert challenge_status(window, window.end) == "completed"


def test_summary_to_dict():
    data = weekly_challenges(REFERENCE)[2].to_dict()
    assert data == {
        "id": "2024-W01-deadlift",
        "title": "Deadlift Week",
        "exercise": "deadlift",
        "week_label": "2024-W01",
        "start": "2024-01-01T00:00:00",
        "end": "2024-01-08T00:00:00",
        "status": "in progress",
    }


# --- Tests for challenge_leaderboard ---

def test_challenge_leaderboard_only_counts_this_week(make_lift):
    entries = [
        make_lift("u1", weight_kg=100, date=datetime(2024, 1, 1, 0, 0)),
        make_lift("u1", weight_kg=150, date=datetime(2023, 12, 31, 23, 59)),  # last week
        make_lift("u2", weight_kg=90, date=datetime(2024, 1, 7, 23, 59)),
        make_lift("u3", weight_kg=200, date=datetime(2024, 1, 8, 0, 0)),      # next week
    ]
    rows = challenge_leaderboard(entries, "bench_press", REFERENCE)

    assert [(row.user_id, row.weight_kg) for row in rows] == [("u1", 100), ("u2", 90)]


def test_challenge_leaderboard_medals_top_three(make_lift):
    entries = [make_lift(f"u{i}", weight_kg=50 + i * 10) for i in range(5)]
    rows = challenge_leaderboard(entries, Exercise.BENCH_PRESS, REFERENCE)

    assert [row.badge for row in rows] == ["Gold", "Silver", "Bronze", None, None]
    assert [row.rank for row in rows] == [1, 2, 3, 4, 5]
    assert rows[0].to_dict()["badge"] == "Gold"
    assert "badge" not in rows[3].to_dict()


def test_challenge_leaderboard_entries_outside_window_is_empty(make_lift):
    entries = [make_lift("u1", date=datetime(2023, 6, 1))]
    assert challenge_leaderboard(entries, "bench_press", REFERENCE) == []


def test_challenge_leaderboard_ignores_other_exercises(make_lift):
    entries = [make_lift("u1", exercise="deadlift")]
    assert challenge_leaderboard(entries, "bench_press", REFERENCE) == []


def test_challenge_leaderboard_applies_gender_gym_and_age_filters(make_lift):
    entries = [
        make_lift("u1", weight_kg=80, gender="female", gym_id="ZG", age=27),
        make_lift("u2", weight_kg=120, gender="male", gym_id="ZG", age=31),
        make_lift("u3", weight_kg=90, gender="female", gym_id="ST", age=26),
        make_lift("u4", weight_kg=70, gender="female", gym_id="ZG", age=44),
    ]

    women = challenge_leaderboard(entries, "bench_press", REFERENCE, gender="female")
    zagreb = challenge_leaderboard(entries, "bench_press", REFERENCE, gym_id="ZG")
    young_women_zagreb = challenge_leaderboard(
        entries, "bench_press", REFERENCE, gender="female", gym_id="ZG", age_group="24-29",
    )

    assert [(row.user_id, row.badge) for row in women] == [("u3", "Gold"), ("u1", "Silver"), ("u4", "Bronze")]
    assert [row.user_id for row in zagreb] == ["u2", "u1", "u4"]
    assert [(row.user_id, row.rank, row.badge) for row in young_women_zagreb] == [("u1", 1, "Gold")]
