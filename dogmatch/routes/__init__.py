from flask import jsonify

from .auth_routes import auth_bp
from .user_routes import users_bp
from .dog_routes import dogs_bp
from .match_routes import matches_bp
from .message_routes import messages_bp
from .notification_routes import notifications_bp

BLUEPRINTS = (auth_bp, users_bp, dogs_bp, matches_bp, messages_bp, notifications_bp)


def register_blueprints(app):
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.route('/healthz')
    def healthz():
        return jsonify({"status": "ok"}), 200
