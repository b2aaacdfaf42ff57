"""
Socket.IO event handlers for the Math Challenge game.

All game traffic arrives as binary frames on the ``message`` event; this module
wires that event, plus connect/disconnect, to the message router and handlers.
"""

import logging
from flask import request

from math_challenge.core.messages import Answer, RematchResponse, SetUsername
from .socket_event_router import MessageRouter

logger = logging.getLogger(__name__)


def create_router(container) -> MessageRouter:
    """Build a router with every inbound message type routed to its handler."""
    router = MessageRouter(container.get('MessageCodec'))
    room_handler = container.get('RoomConnectionHandler')
    game_handler = container.get('GameActionHandler')

    router.register_route(SetUsername, room_handler.handle_set_username)
    router.register_route(Answer, game_handler.handle_answer)
    router.register_route(RematchResponse, game_handler.handle_rematch_response)
    return router


def register_socket_handlers(socketio_instance, container) -> MessageRouter:
    """Register all socket handlers with the SocketIO instance."""
    router = create_router(container)
    room_handler = container.get('RoomConnectionHandler')

    def handle_connect(auth=None):
        logger.info(f'Client connected: {request.sid}')

    def handle_disconnect(reason=None):
        logger.info(f'Client disconnected: {request.sid}')
        room_handler.handle_disconnect(request.sid)

    def handle_message(data=None):
        router.handle_frame(request.sid, data)

    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)
    socketio_instance.on_event('message', handle_message)

    logger.info(f"Registered {len(router.get_registered_types())} message routes")
    return router
