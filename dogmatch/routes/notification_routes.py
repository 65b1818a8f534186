from flask import Blueprint, jsonify, request

from ..auth import login_required, current_user_id
from ..services.notification_service import NotificationService

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


@notifications_bp.route('', methods=['GET'])
@login_required
def list_notifications():
    unread_only = request.args.get('unread', '').lower() == 'true'
    notifications = NotificationService().list_notifications(current_user_id(), unread_only)
    return jsonify([notification.to_dict() for notification in notifications]), 200


@notifications_bp.route('/unread-count', methods=['GET'])
@login_required
def unread_count():
    return jsonify({"count": NotificationService().unread_count(current_user_id())}), 200


@notifications_bp.route('/<notification_id>/read', methods=['PUT'])
@login_required
def mark_notification_read(notification_id):
    notification = NotificationService().mark_read(notification_id, current_user_id())
    return jsonify(notification.to_dict()), 200


@notifications_bp.route('/<notification_id>', methods=['DELETE'])
@login_required
def delete_notification(notification_id):
    NotificationService().delete_notification(notification_id, current_user_id())
    return jsonify({"message": "Notification deleted successfully"}), 200
