"""
Configuration Factory for the Math Challenge server
Loads game and server settings from the environment and validates them once at startup.
"""

import os
import logging
from typing import Any, Callable, Dict, List, Optional, Union
from enum import Enum
from dataclasses import dataclass, field


DEV_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


@dataclass
class AppConfig:
    """Application configuration with type safety and validation"""

    secret_key: str = field(default_factory=lambda: DEV_SECRET_KEY)
    debug: bool = False
    flask_env: str = 'development'

    # Server
    host: str = '0.0.0.0'
    port: int = 3000
    cors_allowed_origins: str = '*'

    # Game rules
    max_players_per_room: int = 30
    min_players_required: int = 2  # to start a round and to keep it running
    win_score: int = 9
    inactivity_limit_seconds: int = 300

    # Gunicorn
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if not 2 <= self.max_players_per_room <= 100:
            raise ConfigError(f"Invalid max_players_per_room: {self.max_players_per_room}")

        if not 1 <= self.min_players_required <= self.max_players_per_room:
            raise ConfigError(f"Invalid min_players_required: {self.min_players_required}")

        if not 1 <= self.win_score <= 1000:
            raise ConfigError(f"Invalid win_score: {self.win_score}")

        if not 1 <= self.inactivity_limit_seconds <= 86400:
            raise ConfigError(f"Invalid inactivity_limit_seconds: {self.inactivity_limit_seconds}")

        if self.log_level.lower() not in ('debug', 'info', 'warning', 'error', 'critical'):
            raise ConfigError(f"Invalid log_level: {self.log_level}")

        if self.environment == Environment.PRODUCTION and self.secret_key == DEV_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def allowed_origins(self) -> Union[str, List[str]]:
        """CORS origins for Socket.IO. Production lists origins explicitly; an empty list is same-origin only."""
        if self.is_production:
            return [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]
        return self.cors_allowed_origins or '*'


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


class ConfigurationFactory:
    """
    Singleton holding the process configuration.

    ``load_from_environment`` builds and validates an AppConfig; the
    ``get_*_config`` helpers translate it for Flask and Flask-SocketIO.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._logger = logging.getLogger(__name__)
        return cls._instance

    def _read(self, key: str, default: Any, parse: Callable[[str], Any] = str, prefix: str = '') -> Any:
        env_key = f"{prefix}{key}"
        value = os.environ.get(env_key)
        if value is None:
            return default
        try:
            return parse(value)
        except ValueError:
            self._logger.warning(f"Invalid value for {env_key}: {value}, using default: {default}")
            return default

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'MATH_CHALLENGE_')

        Raises:
            ConfigError: If any value is out of range
        """
        def read(key, default, parse=str):
            return self._read(key, default, parse, env_prefix)

        flask_env = read('FLASK_ENV', 'development')
        environment = {
            'development': Environment.DEVELOPMENT,
            'testing': Environment.TESTING,
        }.get(flask_env, Environment.PRODUCTION)

        config = AppConfig(
            secret_key=read('SECRET_KEY', DEV_SECRET_KEY),
            debug=read('DEBUG', environment != Environment.PRODUCTION, _parse_bool),
            flask_env=flask_env,

            host=read('HOST', '0.0.0.0'),
            port=read('PORT', 3000, int),
            # Production defaults to same-origin only
            cors_allowed_origins=read('SOCKETIO_CORS_ALLOWED_ORIGINS',
                                      '' if environment == Environment.PRODUCTION else '*'),

            max_players_per_room=read('MAX_PLAYERS_PER_ROOM', 30, int),
            min_players_required=read('MIN_PLAYERS_REQUIRED', 2, int),
            win_score=read('WIN_SCORE', 9, int),
            inactivity_limit_seconds=read('INACTIVITY_LIMIT_SECONDS', 300, int),

            worker_connections=read('WORKER_CONNECTIONS', 1000, int),
            timeout=read('TIMEOUT', 30, int),
            keepalive=read('KEEPALIVE', 2, int),
            log_level=read('LOG_LEVEL', 'info'),

            environment=environment
        )

        self._config = config
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return config

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Forget the loaded configuration (used by tests)"""
        self._config = None
        return self

    def get_flask_config(self) -> Dict[str, Any]:
        """Dictionary suitable for Flask app.config.update()"""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
        }

    def get_socketio_config(self) -> Dict[str, Any]:
        """
        Keyword arguments for the SocketIO constructor.

        Handlers run synchronously on each connection's receive loop so a
        connection's messages are processed in arrival order.
        """
        config = self.get_config()
        return {
            'cors_allowed_origins': config.allowed_origins,
            'async_mode': 'eventlet',
            'async_handlers': False,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)
