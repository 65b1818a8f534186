from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils.time_helpers import to_iso


def pair_key(dog_a: str, dog_b: str) -> str:
    """Order-independent key for an unordered pair of dog ids."""
    first, second = sorted((dog_a, dog_b))
    return f"{first}__{second}"


@dataclass
class Match:
    """A match request from dog1 (initiator) to dog2 (receiver)."""
    id: str
    dog1_id: str
    dog2_id: str
    status: str = "pending"
    match_preferences: Optional[dict] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None

    @property
    def dog_ids(self) -> tuple:
        return self.dog1_id, self.dog2_id

    def to_firestore_document(self) -> dict:
        doc = {
            "dog1Id": self.dog1_id,
            "dog2Id": self.dog2_id,
            "pairKey": pair_key(self.dog1_id, self.dog2_id),
            "status": self.status,
            "createdAt": self.created_at,
        }
        if self.match_preferences:
            doc["matchPreferences"] = self.match_preferences
        if self.notes:
            doc["notes"] = self.notes
        return doc

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'Match':
        return cls(
            id=doc_id,
            dog1_id=data.get("dog1Id", ""),
            dog2_id=data.get("dog2Id", ""),
            status=data.get("status", "pending"),
            match_preferences=data.get("matchPreferences"),
            notes=data.get("notes"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            last_message_at=data.get("lastMessageAt"),
        )

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "dog1Id": self.dog1_id,
            "dog2Id": self.dog2_id,
            "status": self.status,
            "createdAt": to_iso(self.created_at),
        }
        if self.match_preferences:
            result["matchPreferences"] = self.match_preferences
        if self.notes:
            result["notes"] = self.notes
        if self.updated_at:
            result["updatedAt"] = to_iso(self.updated_at)
        if self.last_message_at:
            result["lastMessageAt"] = to_iso(self.last_message_at)
        return result
