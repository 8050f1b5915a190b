from flask import Blueprint, request, jsonify, g
from redis.exceptions import RedisError

from ..app import app, get_store, jwt_required, limiter, logger
from ..tasks import enqueue_current_prs_refresh

lifts_bp = Blueprint('lifts', __name__)

# Fields a client may set; identity comes from the token
LIFT_FIELDS = ('user_name', 'exercise', 'reps', 'weight_kg', 'date',
               'gym_id', 'gender', 'age', 'equipment')


def schedule_pr_refresh():
    """Queue a current_prs refresh when lifts live in PostgreSQL."""
    if app.config['LIFT_STORE_BACKEND'] != 'postgres':
        return None
    try:
        job = enqueue_current_prs_refresh()
        logger.info(f"Enqueued current_prs refresh job {job.id}")
        return job
    except RedisError as e:
        # The lift is already stored; the view catches up on the next refresh
        logger.warning(f"Could not enqueue current_prs refresh: {e}")
        return None


@lifts_bp.route('/v1/lifts', methods=['POST'])
@jwt_required
@limiter.limit("30 per minute")
def add_lift():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify(error="Request body must be JSON"), 400

    fields = {key: data[key] for key in LIFT_FIELDS if key in data}
    fields['user_id'] = g.current_user_id
    if not fields.get('user_name'):
        fields['user_name'] = g.decoded_token_data.get('name')
    # New entries always start unverified; review happens elsewhere
    fields['verification'] = 'unverified'

    # Validation failures raise InvalidInputError -> 400
    entry = get_store().append_lift_entry(fields)
    schedule_pr_refresh()

    logger.info(f"User {g.current_user_id} logged {entry.exercise.value} {entry.weight_kg}kg x {entry.reps} (score {entry.score})")
    return jsonify(entry.to_dict() | {"score": entry.score}), 201
