"""
Identity gateway: account records, password checks and session tokens.

Accounts live in their own collection keyed by a hash of the normalized
email, so email uniqueness is enforced by the store: the key is written with
create() in the same batch as the user document and an existing key fails
the whole batch.
"""
import hashlib
import logging

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from google.api_core.exceptions import Conflict
from jwt.exceptions import PyJWTError
from werkzeug.security import generate_password_hash, check_password_hash

from ..config import ACCOUNTS_COLLECTION, USERS_COLLECTION
from ..exceptions import (
    AuthenticationError, ConflictError, NotFoundError, ServiceUnavailableError,
)
from ..models.user import User
from ..utils.time_helpers import utcnow
from .. import gcp_clients

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email is already in use"
INVALID_CREDENTIALS = "Invalid email or password"


def account_key(email: str) -> str:
    """Document id for an account; emails may contain characters Firestore ids cannot."""
    return hashlib.sha256(email.lower().encode("utf-8")).hexdigest()


class IdentityService:
    """Creates accounts, verifies credentials and maps tokens to user ids."""

    def __init__(self, firestore_client=None):
        self.firestore = firestore_client or gcp_clients.firestore_client

    def _require_firestore(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore

    def _account_ref(self, email: str):
        return self._require_firestore().collection(ACCOUNTS_COLLECTION).document(account_key(email))

    def register(self, email: str, password: str, name: str) -> tuple[str, User]:
        """
        Create an account and its mirrored user document.

        Args:
            email: Normalized email address
            password: Plain-text password (only its hash is stored)
            name: Display name

        Returns:
            tuple: (access token, created User)

        Raises:
            ConflictError: If the email is already registered
        """
        db = self._require_firestore()
        user_ref = db.collection(USERS_COLLECTION).document()
        now = utcnow()
        user = User(id=user_ref.id, email=email, name=name, created_at=now)

        batch = db.batch()
        batch.create(self._account_ref(email), {
            "uid": user.id,
            "email": email,
            "passwordHash": generate_password_hash(password),
            "createdAt": now,
        })
        batch.create(user_ref, user.to_firestore_document())
        try:
            batch.commit()
        except Conflict:
            logger.info(f"Registration rejected, email already in use: {email}")
            raise ConflictError(EMAIL_IN_USE)

        logger.info(f"Registered user {user.id}")
        return self.issue_token(user.id), user

    def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Verify credentials and issue a token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        account = self._account_ref(email).get()
        if not account.exists:
            raise AuthenticationError(INVALID_CREDENTIALS)

        data = account.to_dict()
        if not check_password_hash(data.get("passwordHash", ""), password):
            raise AuthenticationError(INVALID_CREDENTIALS)

        user_doc = self._require_firestore().collection(USERS_COLLECTION).document(data["uid"]).get()
        if not user_doc.exists:
            raise NotFoundError("User")

        logger.info(f"User {user_doc.id} logged in")
        return self.issue_token(user_doc.id), User.from_firestore_doc(user_doc.id, user_doc.to_dict())

    def issue_token(self, user_id: str) -> str:
        """Signed access token whose subject is the user id."""
        return create_access_token(identity=user_id)

    def authenticate(self, token: str) -> str:
        """
        Resolve a bearer token to the caller's user id.

        Raises:
            AuthenticationError: If the token is missing, malformed, forged or expired
        """
        if not token:
            raise AuthenticationError("No token provided")

        try:
            decoded = decode_token(token)
        except (PyJWTError, JWTExtendedException) as e:
            logger.info(f"Token verification failed: {e}")
            raise AuthenticationError("Invalid token")

        if decoded.get("type") != "access" or not decoded.get("sub"):
            raise AuthenticationError("Invalid token")
        return decoded["sub"]

    def stage_email_change(self, batch, user_id: str, old_email: str, new_email: str) -> None:
        """
        Add the account re-keying for an email change to a write batch.

        The new key is created (failing the batch if taken) and the old one deleted.

        Raises:
            ConflictError: If the account record is missing the user it claims
        """
        old_ref = self._account_ref(old_email)
        old_account = old_ref.get()
        if not old_account.exists or old_account.to_dict().get("uid") != user_id:
            raise ConflictError("Account record does not match user")

        data = old_account.to_dict()
        data["email"] = new_email
        data["updatedAt"] = utcnow()
        batch.create(self._account_ref(new_email), data)
        batch.delete(old_ref)

    def stage_account_deletion(self, batch, email: str) -> None:
        batch.delete(self._account_ref(email))
