from flask import Blueprint, request, jsonify, g

from ..app import get_store, jwt_required, limiter, logger
from ..groups import group_comparison, normalize_members

groups_bp = Blueprint('groups', __name__, url_prefix='/v1/groups')


@groups_bp.route('/<group_name>', methods=['PUT'])
@jwt_required
@limiter.limit("30 per minute")
def save_group(group_name):
    """Replaces the group's whole roster with the submitted member list."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'members' not in data:
        return jsonify(error="Missing 'members' in request body"), 400

    members = data['members']
    if isinstance(members, str):
        # Comma separated form input
        members = members.split(',')
    if not isinstance(members, list):
        return jsonify(error="'members' must be a list of names"), 400

    roster = normalize_members(members)
    get_store().save_group(group_name, roster)
    logger.info(f"User {g.current_user_id} saved group '{group_name}' ({len(roster)} members)")
    return jsonify(group_name=group_name, members=roster), 200


@groups_bp.route('/<group_name>', methods=['GET'])
def get_group(group_name):
    # Unknown groups simply have no members
    return jsonify(group_name=group_name, members=get_store().get_group_members(group_name)), 200


@groups_bp.route('/<group_name>/comparison', methods=['GET'])
@limiter.limit("120 per minute")
def get_group_comparison(group_name):
    store = get_store()
    members = store.get_group_members(group_name)
    if not members:
        logger.info(f"Group '{group_name}' has no members")
        return jsonify([]), 200

    rows = group_comparison(store.get_all_lift_entries(), members)
    return jsonify([row.to_dict() for row in rows]), 200
