"""
Math Challenge - a real-time team arithmetic quiz.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging
import atexit

from container import build_container
from config_factory import load_config, ConfigurationFactory
from math_challenge.handlers.socket_handlers import register_socket_handlers
from math_challenge.routes.api import create_api_blueprint

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Configure logging
logging.basicConfig(level=app_config.log_level.upper())
logger = logging.getLogger(__name__)

# Initialize Socket.IO; CORS and handler mode come from configuration
socketio = SocketIO(app, **config_factory.get_socketio_config())

# Configure service container with dependencies
container = build_container(socketio=socketio, app_config=app_config)

# Register REST endpoints
app.register_blueprint(create_api_blueprint({'room_manager': container.get('RoomManager')}))

# Register Socket.IO handlers
register_socket_handlers(socketio, container)


def cleanup_on_exit():
    """Clean up resources on application exit."""
    logger.info("Shutting down Math Challenge server...")
    container.shutdown()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    logger.info(f"Starting Math Challenge server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
