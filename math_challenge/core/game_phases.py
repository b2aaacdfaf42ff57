"""
Game Phase Enumeration

Defines the game phase states, teams and rematch votes used throughout the application.
"""

from enum import Enum


class GamePhase(Enum):
    """Game phase enumeration."""
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class Team(Enum):
    """The two competing teams. Values are the names sent to clients."""
    A = "Team A"
    B = "Team B"


class RematchVote(Enum):
    """A player's answer to the rematch prompt."""
    UNSET = "unset"
    ACCEPTED = "accepted"
    DECLINED = "declined"
