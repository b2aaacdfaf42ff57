"""
Game Settings Configuration Module

Provides centralized access to game rule values, replacing hardcoded
constants throughout the codebase.
"""

import logging

logger = logging.getLogger(__name__)


class GameSettings:
    """Centralized game settings management."""

    DEFAULT_MAX_PLAYERS_PER_ROOM = 30
    DEFAULT_MIN_PLAYERS_REQUIRED = 2
    DEFAULT_WIN_SCORE = 9
    DEFAULT_INACTIVITY_LIMIT_SECONDS = 300

    def __init__(self, app_config=None):
        """
        Initialize game settings.

        Args:
            app_config: Application configuration instance from config_factory.
                When omitted, the built-in defaults are used.
        """
        self._config = app_config
        if app_config is None:
            logger.debug("No application configuration supplied, using default game settings")

    @property
    def max_players_per_room(self) -> int:
        """Maximum number of players allowed in one room."""
        if self._config is None:
            return self.DEFAULT_MAX_PLAYERS_PER_ROOM
        return self._config.max_players_per_room

    @property
    def min_players_required(self) -> int:
        """Minimum players required to start or continue a game."""
        if self._config is None:
            return self.DEFAULT_MIN_PLAYERS_REQUIRED
        return self._config.min_players_required

    @property
    def win_score(self) -> int:
        """Team score that ends a round."""
        if self._config is None:
            return self.DEFAULT_WIN_SCORE
        return self._config.win_score

    @property
    def inactivity_limit(self) -> float:
        """Seconds of inactivity after which a room is reclaimed."""
        if self._config is None:
            return float(self.DEFAULT_INACTIVITY_LIMIT_SECONDS)
        return float(self._config.inactivity_limit_seconds)
