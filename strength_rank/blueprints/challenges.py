from datetime import datetime

from flask import Blueprint, request, jsonify

from ..app import get_store, limiter, logger
from ..challenges import challenge_leaderboard, weekly_challenges
from ..constants import Exercise
from ..models import parse_timestamp
from ..week import week_range

challenges_bp = Blueprint('challenges', __name__)


def reference_date_from_args(name='date'):
    """The ?date= query value, or the current local time."""
    value = request.args.get(name)
    if not value:
        return datetime.now()
    return parse_timestamp(value)


@challenges_bp.route('/v1/week', methods=['GET'])
def get_week():
    return jsonify(week_range(reference_date_from_args()).to_dict()), 200


@challenges_bp.route('/v1/challenges', methods=['GET'])
@limiter.limit("120 per minute")
def list_weekly_challenges():
    reference = reference_date_from_args()
    now = reference_date_from_args('now') if request.args.get('now') else None
    challenges = weekly_challenges(reference, now=now)
    return jsonify([challenge.to_dict() for challenge in challenges]), 200


@challenges_bp.route('/v1/challenges/<exercise>/leaderboard', methods=['GET'])
@limiter.limit("120 per minute")
def get_challenge_leaderboard(exercise):
    exercise = Exercise.parse(exercise)
    reference = reference_date_from_args()
    rows = challenge_leaderboard(
        get_store().get_all_lift_entries(),
        exercise,
        reference,
        gender=request.args.get('gender'),
        gym_id=request.args.get('gym_id') or None,
        age_group=request.args.get('age_group'),
    )
    logger.info(f"Challenge leaderboard for {exercise.value} week {week_range(reference).week_label}: {len(rows)} rows")
    return jsonify([row.to_dict() for row in rows]), 200
