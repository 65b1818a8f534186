import logging
import sys

from dogmatch import create_app, gcp_clients

logger = logging.getLogger(__name__)


def log_uncaught_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception, shutting down", exc_info=(exc_type, exc_value, exc_traceback))


sys.excepthook = log_uncaught_exception

app = create_app()

if __name__ == "__main__":
    socketio = app.extensions["socketio"]
    socketio.run(app, debug=gcp_clients.APP_ENV == "development", host="0.0.0.0",
                 port=gcp_clients.PORT, allow_unsafe_werkzeug=True)
