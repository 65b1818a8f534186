"""
Authentication gate for HTTP routes.
"""
import logging
from functools import wraps

from flask import g
from flask_jwt_extended import JWTManager, verify_jwt_in_request, get_jwt_identity

from .error_handlers import error_response, request_context
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

jwt = JWTManager()


def _reject(message):
    error = AuthenticationError(message)
    logger.info(f"AuthenticationError: {error} | {request_context()}")
    return error_response(error)


@jwt.unauthorized_loader
def _missing_token(reason):
    return _reject(reason)


@jwt.invalid_token_loader
def _invalid_token(reason):
    return _reject("Invalid token")


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return _reject("Token has expired")


def login_required(fn):
    """Require a valid bearer token and expose the caller id as g.user_id."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        g.user_id = get_jwt_identity()
        return fn(*args, **kwargs)
    return wrapper


def current_user_id() -> str:
    return g.user_id
