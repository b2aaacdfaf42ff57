"""
WSGI entry point for the Math Challenge server.
Used for production deployment with Gunicorn.
"""

from app import app, socketio
from config_factory import get_config

if __name__ == "__main__":
    # For development without Gunicorn
    config = get_config()
    socketio.run(app, host=config.host, port=config.port, debug=True)
else:
    # For production WSGI servers
    application = app
