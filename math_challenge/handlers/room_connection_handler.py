"""
Room Connection Handler

Handles joining (set_username) and leaving (transport disconnect) rooms.
"""

import logging

from math_challenge.core.errors import RoomFullError
from math_challenge.core.messages import SetUsername
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAME = 'Player'


class RoomConnectionHandler(BaseHandler):
    """Handler for matchmaking and disconnection."""

    def handle_set_username(self, socket_id: str, message: SetUsername):
        """
        Seat the connection in a room.

        Expected data format:
        {
            'type': 'set_username',
            'name': 'display_name'
        }
        """
        self.log_handler_start('handle_set_username', socket_id, message)

        if self.room_manager.has_connection(socket_id):
            logger.info(f'Client {socket_id} is already in a room, ignoring set_username')
            return None

        name = message.name.strip() or DEFAULT_PLAYER_NAME
        try:
            seated = self.room_manager.assign_to_room(
                socket_id, name, on_joined=self._on_joined
            )
        except RoomFullError as e:
            logger.warning(f'Rejected join for {socket_id}: {e.message}')
            return None

        if seated is None:
            # A concurrent set_username from this connection won
            return None

        room, player = seated
        logger.info(f'Player {name} ({socket_id}) => room {room.room_id}, team: {player.team.value}')
        return room

    def _on_joined(self, room, player, update):
        self.lifecycle_service.apply(room, update)

    def handle_disconnect(self, socket_id: str):
        """Remove a disconnected client from its room."""
        resolved = self.resolve(socket_id)
        if resolved is None:
            return None

        room, player = resolved
        with self.room_manager.room_operation(room.room_id):
            self.room_manager.remove(socket_id)
            if room.closed:
                return None
            update = room.leave(player.player_id)
            self.lifecycle_service.apply(room, update)
            return update
