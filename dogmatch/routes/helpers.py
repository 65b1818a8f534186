from flask import current_app, request

from ..services.match_service import MatchService
from ..services.message_service import MessageService


def json_body():
    """Request JSON or None; validators turn None into a 400."""
    return request.get_json(silent=True)


def realtime_channel():
    return current_app.extensions.get("realtime")


def match_service() -> MatchService:
    return MatchService(realtime=realtime_channel())


def message_service() -> MessageService:
    return MessageService(realtime=realtime_channel())
