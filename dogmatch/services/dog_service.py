"""
Dog service for Firestore database operations.
"""
import logging
from typing import Optional, List

from ..config import DOGS_COLLECTION
from ..exceptions import AuthorizationError, NotFoundError, ServiceUnavailableError
from ..models.dog import Dog, DogLocation
from ..utils.geo_helpers import haversine_km
from ..utils.time_helpers import utcnow
from .geocoding_service import GeocodingService
from .. import gcp_clients

logger = logging.getLogger(__name__)


class DogService:
    """Service for managing dog profiles in Firestore."""

    def __init__(self, firestore_client=None, geocoder: Optional[GeocodingService] = None):
        """
        Initialize dog service.

        Args:
            firestore_client: Firestore client (or None to use global client)
            geocoder: Geocoding service used to enrich locations
        """
        self.firestore = firestore_client or gcp_clients.firestore_client
        self.geocoder = geocoder or GeocodingService()

    def _collection(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore.collection(DOGS_COLLECTION)

    def create_dog(self, owner_id: str, payload: dict) -> Dog:
        """
        Create a new dog owned by the caller.

        Args:
            owner_id: Authenticated caller; any ownerId in the request is ignored
            payload: Output of validate_dog_payload

        Returns:
            Dog: The stored dog with its generated id
        """
        location = self.geocoder.enrich_location(DogLocation.from_payload(payload["location"]))
        dog = Dog.from_payload(owner_id, payload, location)
        dog.created_at = utcnow()

        doc_ref = self._collection().document()
        doc_ref.set(dog.to_firestore_document())
        dog.id = doc_ref.id
        logger.info(f"Created dog document: {doc_ref.id} for owner {owner_id}")
        return dog

    def get_dog(self, dog_id: str) -> Dog:
        doc = self._collection().document(dog_id).get()
        if not doc.exists:
            raise NotFoundError("Dog")
        return Dog.from_firestore_doc(doc.id, doc.to_dict())

    def find_dog(self, dog_id: str) -> Optional[Dog]:
        """Like get_dog, but None for a missing dog."""
        doc = self._collection().document(dog_id).get()
        if not doc.exists:
            return None
        return Dog.from_firestore_doc(doc.id, doc.to_dict())

    def list_owner_dogs(self, owner_id: str) -> List[Dog]:
        query = self._collection().where("ownerId", "==", owner_id)
        return [Dog.from_firestore_doc(doc.id, doc.to_dict()) for doc in query.stream()]

    def _get_owned(self, dog_id: str, caller_id: str) -> Dog:
        dog = self.get_dog(dog_id)
        if dog.owner_id != caller_id:
            raise AuthorizationError("Not authorized to modify this dog")
        return dog

    def update_dog(self, dog_id: str, caller_id: str, changes: dict) -> Dog:
        """
        Apply a validated partial update. Only the owner may update.

        Raises:
            NotFoundError: If the dog does not exist
            AuthorizationError: If the caller is not the owner
        """
        self._get_owned(dog_id, caller_id)

        updates = {key: value for key, value in changes.items() if key != "location"}
        if "location" in changes:
            location = self.geocoder.enrich_location(DogLocation.from_payload(changes["location"]))
            updates["location"] = location.geopoint()
            updates["locationDetails"] = location.details()
        updates["updatedAt"] = utcnow()

        self._collection().document(dog_id).update(updates)
        logger.info(f"Updated dog {dog_id}: {sorted(changes)}")
        return self.get_dog(dog_id)

    def delete_dog(self, dog_id: str, caller_id: str) -> None:
        self._get_owned(dog_id, caller_id)
        self._collection().document(dog_id).delete()
        logger.info(f"Deleted dog {dog_id}")

    def find_nearby(self, caller_id: str, latitude: float, longitude: float,
                    radius_km: float) -> List[dict]:
        """
        Dogs within radius_km of a point, nearest first.

        Scans the whole collection and keeps every dog whose Haversine distance
        is <= radius_km, excluding dogs owned by the caller and dogs without a
        location.

        Returns:
            list: Dog dictionaries with an extra 'distanceKm' key
        """
        nearby = []
        for doc in self._collection().stream():
            dog = Dog.from_firestore_doc(doc.id, doc.to_dict())
            if dog.owner_id == caller_id or dog.location is None:
                continue

            distance = haversine_km(latitude, longitude, dog.location.latitude, dog.location.longitude)
            if distance <= radius_km:
                nearby.append((distance, dog))

        nearby.sort(key=lambda item: item[0])
        results = []
        for distance, dog in nearby:
            item = dog.to_dict()
            item["distanceKm"] = round(distance, 3)
            results.append(item)
        return results
