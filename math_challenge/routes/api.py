"""
REST API endpoints for the Math Challenge server.
"""

import logging
from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    room_manager = services['room_manager']

    api = Blueprint('api', __name__)

    @api.route('/health')
    def health():
        """Liveness probe."""
        return jsonify({'status': 'ok', 'rooms': len(room_manager.get_all_rooms())})

    @api.route('/api/rooms')
    def list_rooms():
        """Summaries of every live room."""
        return jsonify({'rooms': room_manager.room_summaries()})

    return api
