"""
Notification service: the caller's in-app notification inbox.
"""
import logging
from typing import List

from google.cloud import firestore

from ..config import NOTIFICATIONS_COLLECTION
from ..exceptions import AuthorizationError, NotFoundError, ServiceUnavailableError
from ..models.notification import Notification
from ..utils.time_helpers import utcnow
from .. import gcp_clients

logger = logging.getLogger(__name__)


class NotificationService:
    """Owner-scoped reads and updates of notifications."""

    def __init__(self, firestore_client=None):
        self.firestore = firestore_client or gcp_clients.firestore_client

    def _collection(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore.collection(NOTIFICATIONS_COLLECTION)

    def _owner_query(self, user_id: str, unread_only: bool = False):
        query = self._collection().where("userId", "==", user_id)
        if unread_only:
            query = query.where("readAt", "==", None)
        return query

    def list_notifications(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        """Newest first."""
        query = self._owner_query(user_id, unread_only).order_by(
            "createdAt", direction=firestore.Query.DESCENDING)
        return [Notification.from_firestore_doc(doc.id, doc.to_dict()) for doc in query.stream()]

    def unread_count(self, user_id: str) -> int:
        result = self._owner_query(user_id, unread_only=True).count(alias="count").get()
        return int(result[0][0].value)

    def _get_owned(self, notification_id: str, user_id: str):
        doc_ref = self._collection().document(notification_id)
        doc = doc_ref.get()
        if not doc.exists:
            raise NotFoundError("Notification")

        notification = Notification.from_firestore_doc(doc.id, doc.to_dict())
        if notification.user_id != user_id:
            raise AuthorizationError("Not authorized to access this notification")
        return doc_ref, notification

    def mark_read(self, notification_id: str, user_id: str) -> Notification:
        """Idempotent: an already-read notification keeps its original readAt."""
        doc_ref, notification = self._get_owned(notification_id, user_id)
        if not notification.is_read:
            notification.read_at = utcnow()
            doc_ref.update({"readAt": notification.read_at})
            logger.info(f"Notification {notification_id} marked read")
        return notification

    def delete_notification(self, notification_id: str, user_id: str) -> None:
        doc_ref, _ = self._get_owned(notification_id, user_id)
        doc_ref.delete()
        logger.info(f"Deleted notification {notification_id}")
