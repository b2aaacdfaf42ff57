"""
Room Manager for the Math Challenge game

Room directory and matchmaker: owns every live room, the mapping from
connection id to (room, player), and the per-room locks.
"""

import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from math_challenge.config.game_settings import GameSettings
from math_challenge.game_room import Player, Room, RoomUpdate
from math_challenge.services.concurrency_control_service import ConcurrencyControlService
from math_challenge.services.problem_generator import ProblemGenerator

logger = logging.getLogger(__name__)

JoinCallback = Callable[[Room, Player, RoomUpdate], None]


class RoomManager:
    """Manages game rooms and the connections seated in them.

    Lock ordering: a room lock may be held while taking the directory lock,
    never the other way round.
    """

    def __init__(self, settings: Optional[GameSettings] = None,
                 problem_generator: Optional[ProblemGenerator] = None,
                 concurrency_control: Optional[ConcurrencyControlService] = None):
        self.settings = settings or GameSettings()
        self.problem_generator = problem_generator or ProblemGenerator()
        self.concurrency_control = concurrency_control or ConcurrencyControlService()

        self._rooms: Dict[int, Room] = {}
        self._connections: Dict[str, Tuple[int, str]] = {}
        self._room_ids = itertools.count()
        self._directory_lock = threading.RLock()

    # Room lifecycle

    def create_room(self) -> Room:
        """Create and register a new empty room with the next id."""
        with self._directory_lock:
            room = Room(next(self._room_ids), self.settings, self.problem_generator)
            self._rooms[room.room_id] = room
            logger.info(f"Created room {room.room_id}")
            return room

    def find_available_room(self) -> Room:
        """Return the first open room with spare capacity, creating one if none exists."""
        with self._directory_lock:
            for room in self._rooms.values():
                if not room.closed and not room.is_full():
                    return room
            return self.create_room()

    def remove_room(self, room_id: int) -> Optional[Room]:
        """Unregister a room and every connection mapped into it."""
        with self._directory_lock:
            room = self._rooms.pop(room_id, None)
            if room is None:
                return None
            room.closed = True
            stale = [sid for sid, (mapped_room_id, _) in self._connections.items()
                     if mapped_room_id == room_id]
            for sid in stale:
                del self._connections[sid]
        self.concurrency_control.cleanup_room_lock(room_id)
        logger.info(f"Removed room {room_id}")
        return room

    def get_room(self, room_id: int) -> Optional[Room]:
        with self._directory_lock:
            return self._rooms.get(room_id)

    def get_all_rooms(self) -> List[Room]:
        with self._directory_lock:
            return list(self._rooms.values())

    def room_summaries(self) -> List[Dict]:
        return [room.summary() for room in self.get_all_rooms()]

    def room_operation(self, room_id: int):
        """Context manager serializing operations on one room."""
        return self.concurrency_control.room_operation(room_id)

    # Matchmaking

    def assign_to_room(self, socket_id: str, player_name: str,
                       on_joined: Optional[JoinCallback] = None) -> Optional[Tuple[Room, Player]]:
        """
        Seat a connection in the first room with spare capacity.

        Returns None when the connection is already seated. The seated check
        and the registration happen under the directory lock, so two joins
        racing for one connection seat it exactly once.

        ``on_joined`` runs while the room lock is still held, so the caller can
        deliver the join update as part of the same atomic operation.

        Raises:
            RoomFullError: If the chosen room filled up in the meantime
        """
        while True:
            room = self.find_available_room()
            with self.room_operation(room.room_id):
                if room.closed:
                    # Torn down between selection and locking
                    continue
                with self._directory_lock:
                    if socket_id in self._connections:
                        logger.info(f"Connection {socket_id} is already seated, ignoring join")
                        return None
                    player, update = room.join(socket_id, player_name)
                    self._connections[socket_id] = (room.room_id, player.player_id)
                if on_joined is not None:
                    on_joined(room, player, update)
                return room, player

    # Connection mapping

    def lookup(self, socket_id: str) -> Optional[Tuple[Room, Player]]:
        """Resolve a connection to its room and player, or None."""
        with self._directory_lock:
            mapping = self._connections.get(socket_id)
            if mapping is None:
                return None
            room_id, player_id = mapping
            room = self._rooms.get(room_id)
            if room is None:
                return None
            player = room.get_player(player_id)
            if player is None:
                return None
            return room, player

    def remove(self, socket_id: str) -> bool:
        """Forget a connection's mapping."""
        with self._directory_lock:
            return self._connections.pop(socket_id, None) is not None

    def has_connection(self, socket_id: str) -> bool:
        with self._directory_lock:
            return socket_id in self._connections

    def connection_count(self) -> int:
        with self._directory_lock:
            return len(self._connections)
