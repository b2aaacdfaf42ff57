"""
Room Lifecycle Service for the Math Challenge game

Applies the updates produced by room operations and owns the single teardown
path shared by inactivity expiration, premature game end, failed rematches and
empty rooms. Every method here expects to run under the room's lock.
"""

import logging
from typing import Optional

from math_challenge.core import messages

logger = logging.getLogger(__name__)


class RoomLifecycleService:
    """Delivers room updates, records activity and tears rooms down."""

    def __init__(self, room_manager, broadcast_service, expiration_scheduler):
        self.room_manager = room_manager
        self.broadcast_service = broadcast_service
        self.expiration_scheduler = expiration_scheduler

    def apply(self, room, update) -> None:
        """Deliver an update's messages, then touch or tear down the room."""
        self.broadcast_service.deliver(update)

        if update.closing:
            self.teardown_room(room, update.close_reason)
        elif update.touched:
            self.expiration_scheduler.touch(room)

    def teardown_room(self, room, reason: Optional[str]) -> None:
        """Notify and disconnect every member, cancel the room's timers and remove it."""
        if room.closed:
            return

        members = list(room.players)
        # Unmap first so the disconnects triggered below find nothing to do
        self.room_manager.remove_room(room.room_id)
        self.expiration_scheduler.forget(room.room_id)

        for socket_id in members:
            if reason is not None:
                self.broadcast_service.emit_to_player(socket_id, messages.room_closed_message(reason))
            self.broadcast_service.close_connection(socket_id)

        logger.info(f"Room {room.room_id} closed ({len(members)} players disconnected)"
                    + (f": {reason}" if reason else ""))

    def expire_room(self, room_id: int, deadline: float) -> None:
        """Expiration handler for the scheduler: close the room if it is still idle."""
        room = self.room_manager.get_room(room_id)
        if room is None:
            return

        with self.room_manager.room_operation(room_id):
            if room.closed or room.expiration_deadline != deadline:
                logger.debug(f"Room {room_id} was active again before expiring")
                return
            self.teardown_room(room, messages.INACTIVITY_TEXT)
