from flask import Blueprint, request, jsonify

from ..app import get_store, limiter, logger
from ..constants import FEED_DEFAULT_LIMIT, Exercise
from ..ranking import personal_records, rank, recent_entries
from ..scoring import format_lift_label, score
from ..week import current_streak

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/v1/exercises', methods=['GET'])
def list_exercises():
    return jsonify([{"key": exercise.value, "label": exercise.label} for exercise in Exercise]), 200


@leaderboard_bp.route('/v1/score', methods=['POST'])
@limiter.limit("60 per minute")
def score_lift():
    data = request.get_json(silent=True)
    if not data or 'weight_kg' not in data or 'reps' not in data:
        return jsonify(error="Missing 'weight_kg' or 'reps' in request body"), 400

    # InvalidInputError is turned into a 400 by the app error handler
    lift_score = score(data['weight_kg'], data['reps'])
    return jsonify({
        "weight_kg": data['weight_kg'],
        "reps": data['reps'],
        "score": lift_score,
    }), 200


@leaderboard_bp.route('/v1/leaderboard', methods=['GET'])
@limiter.limit("120 per minute")
def get_leaderboard():
    exercise_key = request.args.get('exercise')
    if not exercise_key:
        return jsonify(error="Query parameter 'exercise' is required"), 400
    exercise = Exercise.parse(exercise_key)
    gender = request.args.get('gender')
    gym_id = request.args.get('gym_id') or None
    age_group = request.args.get('age_group')

    entries = get_store().get_all_lift_entries()
    rows = rank(entries, exercise, gender=gender, gym_id=gym_id, age_group=age_group)
    logger.info(f"Leaderboard for {exercise.value} (gender={gender}, gym={gym_id}, age={age_group}): {len(rows)} rows from {len(entries)} entries")
    return jsonify([row.to_dict() for row in rows]), 200


@leaderboard_bp.route('/v1/users/<user_id>/profile', methods=['GET'])
@limiter.limit("120 per minute")
def get_profile(user_id):
    """Current PRs and daily streak for one lifter."""
    entries = get_store().get_all_lift_entries()
    own_entries = [entry for entry in entries if entry.user_id == user_id]
    if not own_entries:
        logger.info(f"No lifts recorded for user {user_id}")

    records = personal_records(own_entries, user_id)
    latest = max(own_entries, key=lambda entry: entry.date.timestamp(), default=None)
    return jsonify({
        "user_id": user_id,
        "user_name": latest.user_name if latest else None,
        "personal_records": [
            {
                "exercise": exercise.value,
                "label": exercise.label,
                "weight_kg": entry.weight_kg,
                "reps": entry.reps,
                "lift": format_lift_label(entry.weight_kg, entry.reps),
                "score": entry.score,
                "date": entry.date.isoformat(),
                "verified": entry.verified,
            }
            for exercise, entry in records.items()
        ],
        "streak": current_streak(entry.date for entry in own_entries),
    }), 200



@leaderboard_bp.route('/v1/feed', methods=['GET'])
@limiter.limit("120 per minute")
def get_feed():
    """Most recent lifts, optionally only from the members of ?group=."""
    try:
        limit = int(request.args.get('limit', FEED_DEFAULT_LIMIT))
    except ValueError:
        return jsonify(error="Invalid 'limit' parameter. Must be an integer."), 400

    store = get_store()
    group_name = request.args.get('group')
    members = None
    if group_name:
        members = store.get_group_members(group_name)
        if not members:
            logger.info(f"Feed for group '{group_name}' is empty: no members")

    # Out of range limits raise InvalidInputError -> 400
    entries = recent_entries(store.get_all_lift_entries(), limit, user_names=members)
    return jsonify([
        entry.to_dict() | {"score": entry.score, "lift": format_lift_label(entry.weight_kg, entry.reps)}
        for entry in entries
    ]), 200
