from flask import Blueprint, jsonify

from ..auth import login_required, current_user_id
from ..services.user_service import UserService
from ..utils.validators import validate_profile_update, validate_preferences, validate_fcm_token, require_json_object
from .helpers import json_body

users_bp = Blueprint('users', __name__, url_prefix='/api/users')


@users_bp.route('', methods=['GET'])
@login_required
def list_users():
    return jsonify([user.to_dict() for user in UserService().list_users()]), 200


@users_bp.route('/fcm-token', methods=['PUT'])
@login_required
def update_fcm_token():
    token = validate_fcm_token(json_body())
    UserService().update_fcm_token(current_user_id(), token)
    return jsonify({"message": "FCM token updated successfully"}), 200


@users_bp.route('/<user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    return jsonify(UserService().get_user(user_id).to_dict()), 200


@users_bp.route('/<user_id>', methods=['PUT'])
@login_required
def update_user(user_id):
    changes = validate_profile_update(json_body())
    user = UserService().update_profile(user_id, current_user_id(), changes)
    return jsonify(user.to_dict()), 200


@users_bp.route('/<user_id>', methods=['DELETE'])
@login_required
def delete_user(user_id):
    UserService().delete_user(user_id, current_user_id())
    return jsonify({"message": "User deleted successfully"}), 200


@users_bp.route('/<user_id>/preferences', methods=['PUT'])
@login_required
def update_preferences(user_id):
    preferences = validate_preferences(require_json_object(json_body()))
    user = UserService().update_preferences(user_id, current_user_id(), preferences)
    return jsonify(user.to_dict()), 200
