"""
Message Router

Decodes inbound binary frames, parses them into the closed set of inbound
message types and hands each one to the handler registered for its type.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Type

from math_challenge.core.errors import CodecError
from math_challenge.core.messages import InboundMessage, UnrecognizedMessage, parse_inbound
from math_challenge.services.message_codec import MessageCodec

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str, Any], Any]


class EventRouteNotFoundError(Exception):
    """Raised when a recognized message type has no registered handler."""
    pass


class MessageRouter:
    """
    Router for inbound game messages.

    Provides a declarative message-type-to-handler mapping and request logging.
    Undecodable frames and unrecognized messages are logged and dropped; the
    connection stays open.
    """

    def __init__(self, codec: Optional[MessageCodec] = None):
        self.codec = codec or MessageCodec()
        self._routes: Dict[Type, MessageHandler] = {}

    def register_route(self, message_type: Type, handler: MessageHandler) -> None:
        """Register a handler for a specific inbound message type."""
        self._routes[message_type] = handler
        logger.debug(f"Registered route: {message_type.__name__} -> {handler.__name__}")

    def route(self, message_type: Type):
        """Decorator for registering message handlers."""
        def decorator(handler: MessageHandler):
            self.register_route(message_type, handler)
            return handler
        return decorator

    def handle_frame(self, socket_id: str, frame: Any) -> Any:
        """Decode one frame from ``socket_id`` and dispatch it."""
        try:
            data = self.codec.decode(frame)
        except CodecError as e:
            logger.warning(f"Dropping undecodable frame from {socket_id}: {e}")
            return None
        return self.dispatch(socket_id, parse_inbound(data))

    def dispatch(self, socket_id: str, message: InboundMessage) -> Any:
        """
        Run the handler registered for ``message``.

        Raises:
            EventRouteNotFoundError: If no handler is registered for a recognized type
        """
        if isinstance(message, UnrecognizedMessage):
            logger.debug(f"Ignoring unrecognized message type {message.type!r} from {socket_id}")
            return None

        handler = self._routes.get(type(message))
        if handler is None:
            raise EventRouteNotFoundError(f"No handler registered for {type(message).__name__}")

        logger.debug(f"Handling {type(message).__name__} from client: {socket_id}")
        try:
            return handler(socket_id, message)
        except Exception as e:
            logger.error(f"Error handling {type(message).__name__} from {socket_id}: {e}")
            raise

    def get_registered_types(self) -> List[Type]:
        return list(self._routes.keys())

    def has_route(self, message_type: Type) -> bool:
        return message_type in self._routes
