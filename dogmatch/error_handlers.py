"""
Centralized error handling: every failure becomes
{"status": "error", "message": ..., "code": ...}.
"""
import logging
import traceback

from flask import current_app, g, jsonify, request
from google.api_core import exceptions as gcp_exceptions
from werkzeug.exceptions import HTTPException

from .exceptions import DogMatchError, ValidationError

logger = logging.getLogger(__name__)

_REDACTED_FIELDS = {"password", "fcmToken"}


def _include_stack() -> bool:
    return current_app.config.get("APP_ENV", "development").lower() != "production"


def error_response(error: Exception, status_code: int = None, code: str = None, message: str = None):
    """Build the JSON error response for an exception."""
    status_code = status_code or getattr(error, "status_code", 500)
    body = {
        "status": "error",
        "message": message or (error.message if isinstance(error, ValidationError) else str(error)),
        "code": code or type(error).__name__,
    }
    if isinstance(error, ValidationError):
        body["field"] = error.field
    if _include_stack() and error.__traceback__ is not None:
        body["stack"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return jsonify(body), status_code


def request_context() -> dict:
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        body = {key: ("***" if key in _REDACTED_FIELDS else value) for key, value in body.items()}
    return {
        "method": request.method,
        "path": request.path,
        "query": request.args.to_dict(),
        "body": body,
        "user": g.get("user_id"),
    }


def _provider_status(error: gcp_exceptions.GoogleAPICallError) -> int:
    if isinstance(error, gcp_exceptions.Conflict):
        return 409
    if isinstance(error, (gcp_exceptions.Unauthenticated, gcp_exceptions.PermissionDenied)):
        return 401
    return 500


def register_error_handlers(app):
    @app.errorhandler(DogMatchError)
    def handle_app_error(error):
        level = logging.ERROR if error.status_code >= 500 else logging.INFO
        logger.log(level, f"{type(error).__name__}: {error} | {request_context()}")
        return error_response(error)

    @app.errorhandler(gcp_exceptions.GoogleAPICallError)
    def handle_provider_error(error):
        status_code = _provider_status(error)
        logger.error(f"Provider error {type(error).__name__}: {error} | {request_context()}")
        message = str(error) if _include_stack() else "Data store operation failed"
        return error_response(error, status_code=status_code, code=type(error).__name__, message=message)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        logger.info(f"HTTP {error.code} {error.name} | {request_context()}")
        code = "NotFoundError" if error.code == 404 else error.name.replace(" ", "")
        message = "Route not found" if error.code == 404 else error.description
        body = {"status": "error", "message": message, "code": code}
        return jsonify(body), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error | {request_context()}")
        message = str(error) if _include_stack() else "Internal server error"
        return error_response(error, status_code=500, code="INTERNAL_SERVER_ERROR", message=message)
