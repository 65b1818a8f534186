"""
Match service: match requests between two dogs and their status.
"""
import logging
from typing import List, Optional, Tuple

from google.api_core.exceptions import Conflict

from ..config import (
    MATCHES_COLLECTION, MATCH_PAIRS_COLLECTION, MAX_IN_QUERY_VALUES, EVENT_MATCH_UPDATE,
)
from ..exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ServiceUnavailableError, ValidationError,
)
from ..models.dog import Dog
from ..models.match import Match, pair_key
from ..utils.time_helpers import utcnow
from .dog_service import DogService
from .push_service import PushNotificationService
from .. import gcp_clients

logger = logging.getLogger(__name__)


def _chunks(values: list, size: int):
    for start in range(0, len(values), size):
        yield values[start:start + size]


class MatchService:
    """Service for managing matches in Firestore."""

    def __init__(self, firestore_client=None, dogs: Optional[DogService] = None,
                 push: Optional[PushNotificationService] = None, realtime=None):
        """
        Initialize match service.

        Args:
            firestore_client: Firestore client (or None to use global client)
            dogs: Dog service used for ownership checks
            push: Notification dispatcher
            realtime: RealtimeChannel for room broadcasts (None disables them)
        """
        self.firestore = firestore_client or gcp_clients.firestore_client
        self.dogs = dogs or DogService(self.firestore)
        self.push = push or PushNotificationService(self.firestore)
        self.realtime = realtime

    def _collection(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore.collection(MATCHES_COLLECTION)

    def create_match(self, caller_id: str, payload: dict) -> Match:
        """
        Create a pending match from the caller's dog1 to dog2.

        The match and its pair key are written in one batch; the pair key is
        created with create(), so a second match for the same two dogs (in
        either order) fails instead of racing past a read-then-write check.

        Args:
            caller_id: Authenticated caller, who must own dog1
            payload: Output of validate_match_payload

        Returns:
            Match: The created match

        Raises:
            AuthorizationError: If the caller does not own dog1
            NotFoundError: If dog2 does not exist
            ConflictError: If the two dogs are already matched
        """
        dog1 = self.dogs.find_dog(payload["dog1Id"])
        if dog1 is None or dog1.owner_id != caller_id:
            raise AuthorizationError("Not authorized to create match for this dog")

        dog2 = self.dogs.find_dog(payload["dog2Id"])
        if dog2 is None:
            raise NotFoundError("Second dog")

        match_ref = self._collection().document()
        match = Match(
            id=match_ref.id,
            dog1_id=dog1.id,
            dog2_id=dog2.id,
            match_preferences=payload.get("matchPreferences"),
            notes=payload.get("notes"),
            created_at=utcnow(),
        )

        pair_ref = self.firestore.collection(MATCH_PAIRS_COLLECTION).document(pair_key(dog1.id, dog2.id))
        batch = self.firestore.batch()
        batch.create(pair_ref, {"matchId": match.id, "dogIds": sorted(match.dog_ids), "createdAt": match.created_at})
        batch.create(match_ref, match.to_firestore_document())
        try:
            batch.commit()
        except Conflict:
            raise ConflictError("Match already exists between these dogs")

        logger.info(f"Created match document: {match.id} ({dog1.id} -> {dog2.id})")

        self.push.notify(
            dog2.owner_id,
            "match_request",
            "New Match Request!",
            f"{dog1.name} wants to match with your dog!",
            {"matchId": match.id, "dogId": dog1.id},
        )
        return match

    def get_match_document(self, match_id: str) -> Match:
        doc = self._collection().document(match_id).get()
        if not doc.exists:
            raise NotFoundError("Match")
        return Match.from_firestore_doc(doc.id, doc.to_dict())

    def match_dogs(self, match: Match) -> Tuple[Optional[Dog], Optional[Dog]]:
        """Both dogs of a match; a deleted dog comes back as None."""
        return self.dogs.find_dog(match.dog1_id), self.dogs.find_dog(match.dog2_id)

    def require_participant(self, match_id: str, caller_id: str,
                            message: str = "Not authorized to view this match"):
        """
        Load a match and check the caller owns one of its dogs.

        Returns:
            tuple: (match, dog1, dog2)

        Raises:
            NotFoundError: If the match does not exist
            AuthorizationError: If the caller owns neither dog
        """
        match = self.get_match_document(match_id)
        dog1, dog2 = self.match_dogs(match)
        owners = {dog.owner_id for dog in (dog1, dog2) if dog is not None}
        if caller_id not in owners:
            raise AuthorizationError(message)
        return match, dog1, dog2

    def is_participant(self, match_id: str, user_id: str) -> bool:
        try:
            self.require_participant(match_id, user_id)
        except (NotFoundError, AuthorizationError):
            return False
        return True

    def get_match(self, match_id: str, caller_id: str) -> Match:
        match, _, _ = self.require_participant(match_id, caller_id)
        return match

    def update_status(self, match_id: str, caller_id: str, status: str) -> Match:
        """
        Accept or reject a pending match. Only dog2's owner may respond.

        Args:
            match_id: Match to update
            caller_id: Authenticated caller
            status: 'accepted' or 'rejected' (already validated)

        Raises:
            NotFoundError: If the match does not exist
            AuthorizationError: If the caller does not own dog2
            ValidationError: If the match is no longer pending
        """
        match = self.get_match_document(match_id)
        dog1, dog2 = self.match_dogs(match)
        if dog2 is None or dog2.owner_id != caller_id:
            raise AuthorizationError("Not authorized to update this match")

        if match.status != "pending":
            raise ValidationError("status", f"Match has already been {match.status}")

        match.status = status
        match.updated_at = utcnow()
        self._collection().document(match_id).update({"status": status, "updatedAt": match.updated_at})
        logger.info(f"Match {match_id} {status} by {caller_id}")

        if self.realtime is not None:
            self.realtime.emit_to_match(EVENT_MATCH_UPDATE, match_id, match.to_dict())

        if dog1 is not None:
            self.push.notify(
                dog1.owner_id,
                "match_update",
                "Match Update!",
                f"{dog2.name} has {status} your match request!",
                {"matchId": match_id, "dogId": dog2.id},
            )
        return match

    def list_matches(self, caller_id: str) -> List[Match]:
        """
        Matches where any of the caller's dogs is dog1, followed by those
        where one is dog2.

        The two result sets are concatenated as-is: a match between two of the
        caller's own dogs appears twice.
        """
        dog_ids = [dog.id for dog in self.dogs.list_owner_dogs(caller_id)]
        if not dog_ids:
            return []

        matches = []
        for field in ("dog1Id", "dog2Id"):
            for chunk in _chunks(dog_ids, MAX_IN_QUERY_VALUES):
                query = self._collection().where(field, "in", chunk)
                matches.extend(Match.from_firestore_doc(doc.id, doc.to_dict()) for doc in query.stream())
        return matches
