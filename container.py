"""
Service Container - Dependency Injection Container for the Math Challenge server
Manages service creation, dependencies, and lifecycle.
"""

import inspect
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class ServiceLifecycle(Enum):
    """Service lifecycle management options"""
    SINGLETON = "singleton"  # One instance per container
    TRANSIENT = "transient"  # New instance every time


class ServiceDefinition:
    """Definition of how a service should be created"""

    def __init__(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ):
        self.name = name
        self.factory = factory
        self.dependencies = dependencies or []
        self.lifecycle = lifecycle
        self.config = config or {}


class CircularDependencyError(Exception):
    """Raised when circular dependency is detected"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


def _create_expiration_scheduler(game_settings, clock, timer_factory):
    from math_challenge.services.expiration_scheduler import ExpirationScheduler
    return ExpirationScheduler(game_settings.inactivity_limit, clock=clock, timer_factory=timer_factory)


def _create_lifecycle_service(room_manager, broadcast_service, expiration_scheduler):
    from math_challenge.services.room_lifecycle_service import RoomLifecycleService
    lifecycle = RoomLifecycleService(room_manager, broadcast_service, expiration_scheduler)
    expiration_scheduler.set_expiration_handler(lifecycle.expire_room)
    return lifecycle


class ServiceContainer:
    """
    Dependency Injection Container for managing services and their dependencies.

    Features:
    - Explicit dependency resolution
    - Circular dependency detection
    - Singleton and transient lifecycle management
    - External dependencies (socketio, clock, configuration)
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._creating: set = set()  # Track services being created (circular detection)

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ) -> 'ServiceContainer':
        """
        Register a service with the container.

        Args:
            name: Service name for retrieval
            factory: Class or function to create the service
            dependencies: List of service names this service depends on
            lifecycle: How the service instance should be managed
            config: Additional keyword arguments for function factories

        Returns:
            Self for method chaining
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")

        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name=name,
            factory=factory,
            dependencies=dependencies,
            lifecycle=lifecycle,
            config=config
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """
        Register all Math Challenge services with their dependencies.

        Expects the external dependencies ``socketio``, ``AppConfig``, ``clock``
        and ``timer_factory`` to have been set.
        """
        from math_challenge.config.game_settings import GameSettings
        from math_challenge.room_manager import RoomManager
        from math_challenge.services.problem_generator import ProblemGenerator
        from math_challenge.services.concurrency_control_service import ConcurrencyControlService
        from math_challenge.services.message_codec import MessageCodec
        from math_challenge.services.broadcast_service import BroadcastService
        from math_challenge.handlers.room_connection_handler import RoomConnectionHandler
        from math_challenge.handlers.game_action_handler import GameActionHandler

        # Settings and leaf services - no service dependencies
        self.register('GameSettings', GameSettings, dependencies=['AppConfig'])
        self.register('ProblemGenerator', ProblemGenerator)
        self.register('ConcurrencyControlService', ConcurrencyControlService)
        self.register('MessageCodec', MessageCodec)

        # Directory and timers
        self.register('RoomManager', RoomManager,
                      dependencies=['GameSettings', 'ProblemGenerator', 'ConcurrencyControlService'])
        self.register('ExpirationScheduler', _create_expiration_scheduler,
                      dependencies=['GameSettings', 'clock', 'timer_factory'])

        # Delivery and lifecycle
        self.register('BroadcastService', BroadcastService, dependencies=['socketio', 'MessageCodec'])
        self.register('RoomLifecycleService', _create_lifecycle_service,
                      dependencies=['RoomManager', 'BroadcastService', 'ExpirationScheduler'])

        # Handlers
        self.register('RoomConnectionHandler', RoomConnectionHandler,
                      dependencies=['RoomManager', 'RoomLifecycleService'])
        self.register('GameActionHandler', GameActionHandler,
                      dependencies=['RoomManager', 'RoomLifecycleService'])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """
        Set an external dependency that's created outside the container.
        Useful for Flask-SocketIO and similar framework objects.
        """
        self._instances[name] = instance
        return self

    def get(self, name: str) -> Any:
        """
        Get a service instance, creating it if necessary.

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If circular dependency detected
        """
        if name in self._instances:
            return self._instances[name]

        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        return self._create_service(name)

    def _create_service(self, name: str) -> Any:
        """
        Create a service instance with dependency injection.
        """
        if name in self._creating:
            cycle = ' -> '.join(list(self._creating) + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        self._creating.add(name)

        try:
            service_def = self._services[name]
            dependencies = [self.get(dep_name) for dep_name in service_def.dependencies]

            if inspect.isclass(service_def.factory):
                instance = service_def.factory(*dependencies)
            else:
                instance = service_def.factory(*dependencies, **service_def.config)

            if service_def.lifecycle == ServiceLifecycle.SINGLETON:
                self._instances[name] = instance

            return instance

        finally:
            self._creating.discard(name)

    def has_service(self, name: str) -> bool:
        """Check if a service is registered"""
        return name in self._services

    def get_service_names(self) -> List[str]:
        """Get list of all registered service names"""
        return list(self._services.keys())

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """
        Validate all service dependencies can be resolved.

        Returns:
            Dictionary mapping service names to lists of missing dependencies
        """
        issues = {}

        for name, service_def in self._services.items():
            missing_deps = [dep for dep in service_def.dependencies
                            if not self.has_service(dep) and dep not in self._instances]
            if missing_deps:
                issues[name] = missing_deps

        return issues

    def shutdown(self) -> None:
        """Stop background timers owned by created services."""
        scheduler = self._instances.get('ExpirationScheduler')
        if scheduler is not None:
            scheduler.shutdown()

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


def build_container(socketio=None, app_config=None, clock: Optional[Callable[[], float]] = None,
                    timer_factory: Optional[Callable] = None) -> ServiceContainer:
    """
    Build a service container with every Math Challenge service registered.

    Args:
        socketio: Flask-SocketIO instance
        app_config: AppConfig instance (defaults are used when None)
        clock: Time source for room expiration (defaults to time.monotonic)
        timer_factory: Timer constructor for room expiration (defaults to threading.Timer)

    Returns:
        Configured service container
    """
    container = ServiceContainer()
    container.set_external_dependency('socketio', socketio)
    container.set_external_dependency('AppConfig', app_config)
    container.set_external_dependency('clock', clock or time.monotonic)
    container.set_external_dependency('timer_factory', timer_factory or threading.Timer)
    return container.configure_services()
