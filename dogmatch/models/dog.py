"""
Dog profile models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from google.cloud import firestore

from ..utils.time_helpers import to_iso
from ..utils.url_helpers import gs_to_public_url

OPTIONAL_SECTIONS = ("traits", "medicalInfo", "pedigree", "availability")


@dataclass
class DogLocation:
    """Where a dog lives, optionally enriched by reverse geocoding."""
    latitude: float
    longitude: float
    address: str = ""
    city: str = ""
    region: str = ""
    country: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> 'DogLocation':
        return cls(
            latitude=payload["latitude"],
            longitude=payload["longitude"],
            address=payload.get("address", ""),
        )

    def geopoint(self) -> firestore.GeoPoint:
        return firestore.GeoPoint(self.latitude, self.longitude)

    def details(self) -> dict:
        """Non-coordinate fields, stored beside the GeoPoint."""
        return {
            "address": self.address,
            "city": self.city,
            "region": self.region,
            "country": self.country,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        result = {"latitude": self.latitude, "longitude": self.longitude}
        for key, value in self.details().items():
            if value:
                result[key] = value
        return result


@dataclass
class Dog:
    """A dog profile owned by exactly one user."""
    id: str
    owner_id: str
    name: str
    breed: str
    age: float
    gender: str
    location: Optional[DogLocation]
    description: str = ""
    photos: list = field(default_factory=list)
    extras: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, owner_id: str, payload: dict, location: DogLocation) -> 'Dog':
        """Build a new dog from validated request fields."""
        return cls(
            id="",
            owner_id=owner_id,
            name=payload["name"],
            breed=payload["breed"],
            age=payload["age"],
            gender=payload["gender"],
            location=location,
            description=payload.get("description", ""),
            photos=list(payload.get("photos", [])),
            extras={key: payload[key] for key in OPTIONAL_SECTIONS if key in payload},
        )

    def to_firestore_document(self) -> dict:
        """
        Convert to Firestore document format.

        Returns:
            dict: Document data for Firestore
        """
        doc = {
            "ownerId": self.owner_id,
            "name": self.name,
            "breed": self.breed,
            "age": self.age,
            "gender": self.gender,
            "description": self.description,
            "photos": self.photos,
            "location": self.location.geopoint(),
            "locationDetails": self.location.details(),
            "createdAt": self.created_at,
        }
        doc.update(self.extras)
        return doc

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'Dog':
        """Create from Firestore document."""
        geopoint = data.get("location")
        location = None
        if geopoint is not None:
            details = data.get("locationDetails") or {}
            location = DogLocation(
                latitude=geopoint.latitude,
                longitude=geopoint.longitude,
                address=details.get("address", ""),
                city=details.get("city", ""),
                region=details.get("region", ""),
                country=details.get("country", ""),
            )
        return cls(
            id=doc_id,
            owner_id=data.get("ownerId", ""),
            name=data.get("name", ""),
            breed=data.get("breed", ""),
            age=data.get("age", 0),
            gender=data.get("gender", ""),
            location=location,
            description=data.get("description", ""),
            photos=data.get("photos") or [],
            extras={key: data[key] for key in OPTIONAL_SECTIONS if data.get(key) is not None},
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON response."""
        result = {
            "id": self.id,
            "ownerId": self.owner_id,
            "name": self.name,
            "breed": self.breed,
            "age": self.age,
            "gender": self.gender,
            "description": self.description,
            "photos": [gs_to_public_url(photo) for photo in self.photos],
            "location": self.location.to_dict() if self.location else None,
            "createdAt": to_iso(self.created_at),
        }
        result.update(self.extras)
        if self.updated_at:
            result["updatedAt"] = to_iso(self.updated_at)
        return result
