from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..utils.time_helpers import to_iso


@dataclass
class Message:
    """A chat message inside a match. Append-only apart from readAt."""
    id: str
    match_id: str
    sender_id: str
    content: str
    attachments: list = field(default_factory=list)
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    def to_firestore_document(self) -> dict:
        doc = {
            "matchId": self.match_id,
            "senderId": self.sender_id,
            "content": self.content,
            "createdAt": self.created_at,
            "readAt": self.read_at,
        }
        if self.attachments:
            doc["attachments"] = self.attachments
        return doc

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'Message':
        return cls(
            id=doc_id,
            match_id=data.get("matchId", ""),
            sender_id=data.get("senderId", ""),
            content=data.get("content", ""),
            attachments=data.get("attachments") or [],
            created_at=data.get("createdAt"),
            read_at=data.get("readAt"),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "matchId": self.match_id,
            "senderId": self.sender_id,
            "content": self.content,
            "createdAt": to_iso(self.created_at),
            "readAt": to_iso(self.read_at),
        }
        if self.attachments:
            result["attachments"] = self.attachments
        return result
