"""
Message service for the chat thread of a match.
"""
import logging
from typing import List, Optional

from google.cloud import firestore

from ..config import MESSAGES_COLLECTION, MATCHES_COLLECTION, EVENT_NEW_MESSAGE, EVENT_MESSAGE_READ
from ..exceptions import NotFoundError, ServiceUnavailableError
from ..models.message import Message
from ..utils.time_helpers import utcnow
from .match_service import MatchService
from .push_service import PushNotificationService
from .. import gcp_clients

logger = logging.getLogger(__name__)


class MessageService:
    """Service for sending and reading match messages."""

    def __init__(self, firestore_client=None, matches: Optional[MatchService] = None,
                 push: Optional[PushNotificationService] = None, realtime=None):
        self.firestore = firestore_client or gcp_clients.firestore_client
        self.push = push or PushNotificationService(self.firestore)
        self.matches = matches or MatchService(self.firestore, push=self.push, realtime=realtime)
        self.realtime = realtime

    def _collection(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore.collection(MESSAGES_COLLECTION)

    def send_message(self, caller_id: str, payload: dict) -> Message:
        """
        Persist a message, broadcast it to the match room and notify the other owner.

        The participant check runs before anything is written or emitted.

        Args:
            caller_id: Authenticated caller
            payload: Output of validate_message_payload

        Returns:
            Message: The stored message

        Raises:
            NotFoundError: If the match does not exist
            AuthorizationError: If the caller owns neither dog in the match
        """
        match_id = payload["matchId"]
        _, dog1, dog2 = self.matches.require_participant(
            match_id, caller_id, "Not authorized to send messages in this match")

        message = Message(
            id="",
            match_id=match_id,
            sender_id=caller_id,
            content=payload["content"],
            attachments=payload.get("attachments", []),
            created_at=utcnow(),
        )
        doc_ref = self._collection().document()
        doc_ref.set(message.to_firestore_document())
        message.id = doc_ref.id
        logger.info(f"Created message document: {doc_ref.id} in match {match_id}")

        self.firestore.collection(MATCHES_COLLECTION).document(match_id).update(
            {"lastMessageAt": message.created_at})

        if self.realtime is not None:
            self.realtime.emit_to_match(EVENT_NEW_MESSAGE, match_id, message.to_dict())

        sender_dog, other_dog = (dog1, dog2) if dog1 is not None and dog1.owner_id == caller_id else (dog2, dog1)
        if other_dog is not None and other_dog.owner_id != caller_id:
            self.push.notify(
                other_dog.owner_id,
                "message",
                "New Message!",
                f"{sender_dog.name}'s owner sent you a message",
                {"matchId": match_id, "messageId": message.id},
            )
        return message

    def list_messages(self, match_id: str, caller_id: str) -> List[Message]:
        """Messages of a match, oldest first."""
        self.matches.require_participant(match_id, caller_id, "Not authorized to view messages in this match")

        query = (self._collection()
                 .where("matchId", "==", match_id)
                 .order_by("createdAt", direction=firestore.Query.ASCENDING))
        return [Message.from_firestore_doc(doc.id, doc.to_dict()) for doc in query.stream()]

    def mark_read(self, message_id: str, caller_id: str) -> Message:
        """
        Mark a received message as read.

        Repeated calls keep the first readAt; a sender reading their own
        message changes nothing.
        """
        doc_ref = self._collection().document(message_id)
        doc = doc_ref.get()
        if not doc.exists:
            raise NotFoundError("Message")

        message = Message.from_firestore_doc(doc.id, doc.to_dict())
        self.matches.require_participant(message.match_id, caller_id, "Not authorized to read this message")

        if message.read_at is None and message.sender_id != caller_id:
            message.read_at = utcnow()
            doc_ref.update({"readAt": message.read_at})
            logger.info(f"Message {message_id} read by {caller_id}")
            if self.realtime is not None:
                self.realtime.emit_to_match(EVENT_MESSAGE_READ, message.match_id, message.to_dict())
        return message
