"""
Push notification dispatcher.

Records an in-app notification for the target user and hands a device push
request to the push relay over Pub/Sub. Nothing here ever raises into the
request that triggered it.
"""
import json
import logging
from typing import Optional

from ..config import NOTIFICATIONS_COLLECTION, USERS_COLLECTION
from ..exceptions import PublishError, ServiceUnavailableError
from ..models.notification import Notification
from ..utils.time_helpers import utcnow
from .. import gcp_clients

logger = logging.getLogger(__name__)


class PushNotificationService:
    """Best-effort notification dispatch to a user's registered device."""

    def __init__(self, firestore_client=None, publisher=None, topic_path: str = ""):
        """
        Initialize push notification service.

        Args:
            firestore_client: Firestore client (or None to use global client)
            publisher: Pub/Sub publisher client (or None to use global client)
            topic_path: Full topic path of the push relay
        """
        self.firestore = firestore_client or gcp_clients.firestore_client
        self.publisher = publisher or gcp_clients.pubsub_publisher
        self.topic_path = topic_path or gcp_clients.topic_path

    def notify(self, user_id: str, notification_type: str, title: str, body: str,
               data: Optional[dict] = None) -> Optional[str]:
        """
        Record a notification and push it to the user's device.

        Args:
            user_id: Recipient user id
            notification_type: One of NOTIFICATION_TYPES
            title: Notification title
            body: Notification body
            data: Optional string payload (matchId, dogId, messageId)

        Returns:
            str: Id of the recorded notification, or None if dispatch failed
        """
        try:
            if not self.firestore:
                raise ServiceUnavailableError("Firestore")

            notification_id = self._record(user_id, notification_type, title, body, data)

            user_doc = self.firestore.collection(USERS_COLLECTION).document(user_id).get()
            user_data = (user_doc.to_dict() or {}) if user_doc.exists else {}
            fcm_token = user_data.get("fcmToken")
            if not fcm_token:
                logger.debug(f"No device token for user {user_id}, skipping push")
                return notification_id

            if (user_data.get("preferences") or {}).get("notifications") is False:
                logger.debug(f"User {user_id} disabled push notifications")
                return notification_id

            self.send_push(fcm_token, title, body, data)
            return notification_id
        except Exception as e:
            logger.error(f"Failed to dispatch {notification_type} notification to {user_id}: {e}")
            return None

    def _record(self, user_id: str, notification_type: str, title: str, body: str,
                data: Optional[dict]) -> str:
        notification = Notification(
            id="",
            user_id=user_id,
            type=notification_type,
            title=title,
            body=body,
            data=data,
            created_at=utcnow(),
        )
        doc_ref = self.firestore.collection(NOTIFICATIONS_COLLECTION).document()
        doc_ref.set(notification.to_firestore_document())
        logger.info(f"Created notification document: {doc_ref.id}")
        return doc_ref.id

    def send_push(self, fcm_token: str, title: str, body: str,
                  data: Optional[dict] = None) -> None:
        """
        Publish a device push request without waiting for delivery.

        Raises:
            PublishError: If the publish call itself fails
        """
        payload = self.format_push_message(fcm_token, title, body, data)

        if not self.publisher:
            logger.info(f"Skipping push publish (client not initialized). Data: {payload}")
            return

        try:
            future = self.publisher.publish(self.topic_path, json.dumps(payload).encode("utf-8"))
        except Exception as e:
            logger.error(f"Failed to publish push request: {e}")
            raise PublishError(f"Failed to publish push request: {str(e)}")

        future.add_done_callback(self._log_publish_result)

    @staticmethod
    def _log_publish_result(future) -> None:
        try:
            logger.info(f"Published push request ID: {future.result()}")
        except Exception as e:
            logger.error(f"Push request delivery to Pub/Sub failed: {e}")

    @staticmethod
    def format_push_message(fcm_token: str, title: str, body: str,
                            data: Optional[dict] = None) -> dict:
        """
        Shape the relay payload after the FCM message format.

        Data values must be strings for FCM, so they are coerced here.
        """
        return {
            "token": fcm_token,
            "notification": {"title": title, "body": body},
            "data": {key: str(value) for key, value in (data or {}).items()},
        }
