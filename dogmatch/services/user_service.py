"""
User service for profile reads and owner-only profile changes.
"""
import logging
from typing import List

from google.api_core.exceptions import Conflict

from ..config import USERS_COLLECTION
from ..exceptions import AuthorizationError, ConflictError, NotFoundError, ServiceUnavailableError
from ..models.user import User
from ..utils.time_helpers import utcnow
from .identity_service import IdentityService, EMAIL_IN_USE
from .. import gcp_clients

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing user profiles in Firestore."""

    def __init__(self, firestore_client=None, identity: IdentityService = None):
        self.firestore = firestore_client or gcp_clients.firestore_client
        self.identity = identity or IdentityService(self.firestore)

    def _collection(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore.collection(USERS_COLLECTION)

    def list_users(self) -> List[User]:
        # Any authenticated caller may list users; there is no admin role.
        return [User.from_firestore_doc(doc.id, doc.to_dict()) for doc in self._collection().stream()]

    def get_user(self, user_id: str) -> User:
        doc = self._collection().document(user_id).get()
        if not doc.exists:
            raise NotFoundError("User")
        return User.from_firestore_doc(doc.id, doc.to_dict())

    @staticmethod
    def _ensure_self(user_id: str, caller_id: str) -> None:
        if user_id != caller_id:
            raise AuthorizationError("Not authorized to modify another user")

    def update_profile(self, user_id: str, caller_id: str, changes: dict) -> User:
        """
        Apply a validated partial profile update.

        An email change re-keys the account record in the same batch as the
        profile write, so two users can never end up sharing an address.

        Args:
            user_id: Profile to update
            caller_id: Authenticated caller
            changes: Output of validate_profile_update

        Returns:
            User: The updated profile

        Raises:
            AuthorizationError: If the caller is not the profile owner
            ConflictError: If the new email is already registered
        """
        self._ensure_self(user_id, caller_id)
        current = self.get_user(user_id)

        updates = {key: value for key, value in changes.items() if key != "preferences"}
        if "preferences" in changes:
            preferences = dict(current.preferences)
            preferences.update(changes["preferences"])
            updates["preferences"] = preferences
        updates["updatedAt"] = utcnow()

        batch = self.firestore.batch()
        new_email = updates.get("email")
        if new_email and new_email.lower() != current.email.lower():
            self.identity.stage_email_change(batch, user_id, current.email, new_email)
        batch.update(self._collection().document(user_id), updates)

        try:
            batch.commit()
        except Conflict:
            raise ConflictError(EMAIL_IN_USE)

        logger.info(f"Updated user {user_id}: {sorted(changes)}")
        return self.get_user(user_id)

    def update_preferences(self, user_id: str, caller_id: str, preferences: dict) -> User:
        return self.update_profile(user_id, caller_id, {"preferences": preferences})

    def update_fcm_token(self, caller_id: str, fcm_token: str) -> None:
        doc_ref = self._collection().document(caller_id)
        if not doc_ref.get().exists:
            raise NotFoundError("User")
        doc_ref.update({"fcmToken": fcm_token, "updatedAt": utcnow()})
        logger.info(f"Updated push token for user {caller_id}")

    def delete_user(self, user_id: str, caller_id: str) -> None:
        """
        Delete the caller's account and profile.

        Dogs, matches and messages referencing the user are left in place.
        """
        self._ensure_self(user_id, caller_id)
        user = self.get_user(user_id)

        batch = self.firestore.batch()
        self.identity.stage_account_deletion(batch, user.email)
        batch.delete(self._collection().document(user_id))
        batch.commit()
        logger.info(f"Deleted user {user_id}")
