"""
User account profile as mirrored in Firestore.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..config import DEFAULT_PREFERENCES
from ..utils.time_helpers import to_iso


@dataclass
class User:
    """A registered user. The document id is the caller identity."""
    id: str
    email: str
    name: str
    preferences: dict = field(default_factory=lambda: dict(DEFAULT_PREFERENCES))
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None
    fcm_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_firestore_document(self) -> dict:
        """Document data for Firestore (the id is the document key)."""
        return {
            "email": self.email,
            "name": self.name,
            "preferences": self.preferences,
            "photoURL": self.photo_url,
            "phoneNumber": self.phone_number,
            "fcmToken": self.fcm_token,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'User':
        """Create from Firestore document."""
        preferences = dict(DEFAULT_PREFERENCES)
        preferences.update(data.get("preferences") or {})
        return cls(
            id=doc_id,
            email=data.get("email", ""),
            name=data.get("name", ""),
            preferences=preferences,
            photo_url=data.get("photoURL"),
            phone_number=data.get("phoneNumber"),
            fcm_token=data.get("fcmToken"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON response. The push token is never exposed."""
        result = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "preferences": self.preferences,
            "createdAt": to_iso(self.created_at),
        }
        if self.photo_url:
            result["photoURL"] = self.photo_url
        if self.phone_number:
            result["phoneNumber"] = self.phone_number
        if self.updated_at:
            result["updatedAt"] = to_iso(self.updated_at)
        return result
