"""
Core error definitions for the Math Challenge game

Provides error codes and exceptions that don't depend on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Room Management Errors
    ROOM_FULL = "ROOM_FULL"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"

    # Game Flow Errors
    WRONG_PHASE = "WRONG_PHASE"


class GameError(Exception):
    """Base exception for room and game state violations."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RoomFullError(GameError):
    """Raised when a player tries to join a room that is already at capacity."""

    def __init__(self, room_id: int, capacity: int):
        super().__init__(
            ErrorCode.ROOM_FULL,
            f"Room {room_id} is full ({capacity} players)",
            {'room_id': room_id, 'capacity': capacity}
        )


class AlreadyInRoomError(GameError):
    """Raised when a player id is seated in a room a second time."""

    def __init__(self, room_id: int, player_id: str):
        super().__init__(
            ErrorCode.ALREADY_IN_ROOM,
            f"Player {player_id} is already in room {room_id}",
            {'room_id': room_id, 'player_id': player_id}
        )


class InvalidPhaseError(GameError):
    """Raised when a room operation is invoked from a phase that does not allow it."""

    def __init__(self, room_id: int, operation: str, phase):
        super().__init__(
            ErrorCode.WRONG_PHASE,
            f"Cannot {operation} room {room_id} while {phase.value}",
            {'room_id': room_id, 'operation': operation, 'phase': phase.value}
        )


class CodecError(Exception):
    """Raised when a frame cannot be encoded or decoded."""
    pass
