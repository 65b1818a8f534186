"""
Real-time channel: Socket.IO rooms keyed by match id.

One RealtimeChannel is created per application in create_app() and handed to
the services that broadcast. Room membership lives in the Socket.IO server of
this process only.
"""
import logging

from flask import request
from flask_socketio import SocketIO, ConnectionRefusedError, join_room, leave_room, emit

from .config import EVENT_JOIN_MATCH, EVENT_LEAVE_MATCH, EVENT_ERROR
from .exceptions import AuthenticationError, ValidationError
from .services.identity_service import IdentityService
from .services.match_service import MatchService
from .utils.validators import validate_document_id

logger = logging.getLogger(__name__)


class RealtimeChannel:
    """Authenticated Socket.IO endpoint plus room broadcasts for matches."""

    def __init__(self, app=None, identity: IdentityService = None, match_service_factory=None):
        """
        Args:
            app: Flask app to bind to immediately (optional)
            identity: Token verifier shared with the HTTP gate
            match_service_factory: Callable returning a MatchService for participant checks
        """
        self.socketio = None
        self.identity = identity or IdentityService()
        self.match_service_factory = match_service_factory or MatchService
        self.connections = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app, cors_allowed_origins="*", **kwargs) -> None:
        self.socketio = SocketIO(app, cors_allowed_origins=cors_allowed_origins, **kwargs)
        self.socketio.on_event("connect", self._on_connect)
        self.socketio.on_event("disconnect", self._on_disconnect)
        self.socketio.on_event(EVENT_JOIN_MATCH, self._on_join_match)
        self.socketio.on_event(EVENT_LEAVE_MATCH, self._on_leave_match)
        app.extensions["realtime"] = self

    def _on_connect(self, auth=None):
        token = (auth or {}).get("token") if isinstance(auth, dict) else None
        try:
            user_id = self.identity.authenticate(token)
        except AuthenticationError as e:
            logger.info(f"Rejected socket handshake: {e}")
            raise ConnectionRefusedError("Authentication error")

        self.connections[request.sid] = user_id
        logger.info(f"User connected: {user_id}")

    def _on_disconnect(self, reason=None):
        user_id = self.connections.pop(request.sid, None)
        logger.info(f"User disconnected: {user_id}")

    def _on_join_match(self, match_id):
        user_id = self.connections.get(request.sid)
        try:
            match_id = validate_document_id(match_id, "matchId")
        except ValidationError as e:
            return self._reject(EVENT_JOIN_MATCH, e.message)

        if user_id is None or not self.match_service_factory().is_participant(match_id, user_id):
            logger.warning(f"User {user_id} refused to join match room {match_id}")
            return self._reject(EVENT_JOIN_MATCH, "Not authorized to join this match", match_id)

        join_room(match_id)
        logger.info(f"User {user_id} joined match room {match_id}")
        return {"status": "ok", "matchId": match_id}

    def _on_leave_match(self, match_id):
        try:
            match_id = validate_document_id(match_id, "matchId")
        except ValidationError as e:
            return self._reject(EVENT_LEAVE_MATCH, e.message)
        leave_room(match_id)
        return {"status": "ok", "matchId": match_id}

    @staticmethod
    def _reject(event, message, match_id=None):
        payload = {"event": event, "message": message}
        if match_id is not None:
            payload["matchId"] = match_id
        emit(EVENT_ERROR, payload)
        return {"status": "error", "message": message}

    def emit_to_match(self, event: str, match_id: str, payload: dict) -> None:
        """Send an event to every connection currently in the match room."""
        if self.socketio is None:
            logger.warning(f"Realtime channel not bound, dropping {event} for match {match_id}")
            return
        self.socketio.emit(event, payload, to=match_id)
