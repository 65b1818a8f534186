import logging
from datetime import timedelta

from flask import Flask
from flask_cors import CORS

from . import gcp_clients
from .auth import jwt
from .error_handlers import register_error_handlers
from .realtime import RealtimeChannel
from .routes import register_blueprints

logger = logging.getLogger(__name__)


def _check_jwt_secret(app):
    if app.config["JWT_SECRET_KEY"] != gcp_clients.DEFAULT_JWT_SECRET_KEY:
        return
    if app.config["APP_ENV"].lower() == "production":
        raise RuntimeError("JWT_SECRET_KEY must be set when APP_ENV is production")
    logger.warning("JWT_SECRET_KEY not set, using the development default")


def create_app(config=None):
    app = Flask(__name__)
    app.config.update(
        JWT_SECRET_KEY=gcp_clients.JWT_SECRET_KEY,
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(hours=gcp_clients.JWT_EXPIRES_HOURS),
        APP_ENV=gcp_clients.APP_ENV,
        CORS_ORIGINS=gcp_clients.CORS_ORIGINS,
    )
    if config:
        app.config.update(config)

    _check_jwt_secret(app)

    # Initialize Global Services
    if not app.config.get("TESTING"):
        gcp_clients.init_services()

    origins = app.config["CORS_ORIGINS"]
    origins = "*" if origins.strip() == "*" else [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})

    jwt.init_app(app)
    register_error_handlers(app)

    # One channel per app, injected into services via app.extensions
    RealtimeChannel().init_app(app, cors_allowed_origins=origins)

    # Register Blueprints
    register_blueprints(app)

    return app
