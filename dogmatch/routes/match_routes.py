from flask import Blueprint, jsonify

from ..auth import login_required, current_user_id
from ..utils.validators import validate_match_payload, validate_match_status
from .helpers import json_body, match_service

matches_bp = Blueprint('matches', __name__, url_prefix='/api/matches')


@matches_bp.route('', methods=['POST'])
@login_required
def create_match():
    payload = validate_match_payload(json_body())
    match = match_service().create_match(current_user_id(), payload)
    return jsonify(match.to_dict()), 201


@matches_bp.route('', methods=['GET'])
@login_required
def list_matches():
    matches = match_service().list_matches(current_user_id())
    return jsonify([match.to_dict() for match in matches]), 200


@matches_bp.route('/<match_id>', methods=['GET'])
@login_required
def get_match(match_id):
    return jsonify(match_service().get_match(match_id, current_user_id()).to_dict()), 200


@matches_bp.route('/<match_id>/status', methods=['PUT'])
@login_required
def update_match_status(match_id):
    status = validate_match_status(json_body())
    match = match_service().update_status(match_id, current_user_id(), status)
    return jsonify(match.to_dict()), 200
