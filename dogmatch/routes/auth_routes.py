from flask import Blueprint, jsonify

from ..auth import login_required, current_user_id
from ..services.identity_service import IdentityService
from ..services.user_service import UserService
from ..utils.validators import validate_registration, validate_login, validate_profile_update
from .helpers import json_body

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    data = validate_registration(json_body())
    token, user = IdentityService().register(data["email"], data["password"], data["name"])
    return jsonify({"token": token, "user": user.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = validate_login(json_body())
    token, user = IdentityService().login(data["email"], data["password"])
    return jsonify({"token": token, "user": user.to_dict()}), 200


@auth_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    user = UserService().get_user(current_user_id())
    return jsonify(user.to_dict()), 200


@auth_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    changes = validate_profile_update(json_body())
    user = UserService().update_profile(current_user_id(), current_user_id(), changes)
    return jsonify(user.to_dict()), 200
