from flask import Blueprint, jsonify

from ..auth import login_required, current_user_id
from ..utils.validators import validate_message_payload
from .helpers import json_body, message_service

messages_bp = Blueprint('messages', __name__, url_prefix='/api/messages')


@messages_bp.route('', methods=['POST'])
@login_required
def send_message():
    payload = validate_message_payload(json_body())
    message = message_service().send_message(current_user_id(), payload)
    return jsonify(message.to_dict()), 201


@messages_bp.route('/<match_id>', methods=['GET'])
@login_required
def list_messages(match_id):
    messages = message_service().list_messages(match_id, current_user_id())
    return jsonify([message.to_dict() for message in messages]), 200


@messages_bp.route('/<message_id>/read', methods=['PUT'])
@login_required
def mark_message_read(message_id):
    message = message_service().mark_read(message_id, current_user_id())
    return jsonify(message.to_dict()), 200
