"""
Base Handler Classes

Common plumbing for message handlers: resolving a connection to its room and
running a room operation atomically under the room lock.
"""

import logging
from typing import Callable, Optional, Tuple

from math_challenge.game_room import Player, Room, RoomUpdate

logger = logging.getLogger(__name__)

RoomOperation = Callable[[Room, Player], RoomUpdate]


class BaseHandler:
    """
    Base class for message handlers.

    Services are handed in at construction; handlers hold no state of their own.
    """

    def __init__(self, room_manager, lifecycle_service):
        self.room_manager = room_manager
        self.lifecycle_service = lifecycle_service

    def resolve(self, socket_id: str) -> Optional[Tuple[Room, Player]]:
        """Look up the room and player for a connection."""
        return self.room_manager.lookup(socket_id)

    def run_room_operation(self, socket_id: str, operation: RoomOperation) -> Optional[RoomUpdate]:
        """
        Run ``operation`` on the sender's room and apply its update, atomically.

        Messages from connections without a room, or for rooms that closed
        meanwhile, are stale client state and are ignored.
        """
        resolved = self.resolve(socket_id)
        if resolved is None:
            logger.debug(f"Ignoring message from {socket_id}: not in a room")
            return None

        room, player = resolved
        with self.room_manager.room_operation(room.room_id):
            if room.closed or room.get_player(socket_id) is not player:
                logger.debug(f"Ignoring message from {socket_id}: room {room.room_id} is gone")
                return None
            update = operation(room, player)
            self.lifecycle_service.apply(room, update)
            return update

    def log_handler_start(self, handler_name: str, socket_id: str, message=None) -> None:
        logger.info(f'{handler_name} called by client: {socket_id}')
        if message is not None:
            logger.debug(f'{handler_name} data: {message}')
