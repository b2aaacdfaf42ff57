"""
Services package for the Math Challenge game

Contains the service classes the room layer and the handlers are built from.
"""

from .problem_generator import Problem, ProblemGenerator
from .team_balancer import choose_team
from .expiration_scheduler import ExpirationScheduler
from .concurrency_control_service import ConcurrencyControlService
from .message_codec import MessageCodec
from .broadcast_service import BroadcastService
from .room_lifecycle_service import RoomLifecycleService

__all__ = [
    'Problem',
    'ProblemGenerator',
    'choose_team',
    'ExpirationScheduler',
    'ConcurrencyControlService',
    'MessageCodec',
    'BroadcastService',
    'RoomLifecycleService'
]
