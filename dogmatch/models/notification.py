from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils.time_helpers import to_iso


@dataclass
class Notification:
    """An in-app notification addressed to one user."""
    id: str
    user_id: str
    type: str
    title: str
    body: str
    data: Optional[dict] = None
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_firestore_document(self) -> dict:
        # readAt is written as an explicit null so "unread" can be queried with == None
        return {
            "userId": self.user_id,
            "type": self.type,
            "title": self.title,
            "body": self.body,
            "data": self.data or {},
            "createdAt": self.created_at,
            "readAt": self.read_at,
            "sentAt": self.sent_at,
        }

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'Notification':
        return cls(
            id=doc_id,
            user_id=data.get("userId", ""),
            type=data.get("type", "system"),
            title=data.get("title", ""),
            body=data.get("body", ""),
            data=data.get("data") or {},
            created_at=data.get("createdAt"),
            read_at=data.get("readAt"),
            sent_at=data.get("sentAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type,
            "title": self.title,
            "body": self.body,
            "data": self.data or {},
            "createdAt": to_iso(self.created_at),
            "readAt": to_iso(self.read_at),
        }
