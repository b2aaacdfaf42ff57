"""
Broadcast Service - Centralized Socket.IO message delivery.

This service handles all outbound traffic in one place:
- Unicast and multi-recipient sends of encoded frames
- Delivery of the messages produced by a room update
- Closing client connections

Sends are fire-and-forget: failures are logged and never raised to the caller.
"""

import logging
from typing import Any, Dict, Iterable

from math_challenge.core.errors import CodecError
from math_challenge.services.message_codec import MessageCodec

logger = logging.getLogger(__name__)

MESSAGE_EVENT = 'message'


class BroadcastService:
    """Centralized service for all Socket.IO emissions."""

    def __init__(self, socketio, codec: MessageCodec = None, namespace: str = '/'):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            codec: Codec used to turn payloads into binary frames
            namespace: Socket.IO namespace clients connect to
        """
        self.socketio = socketio
        self.codec = codec or MessageCodec()
        self.namespace = namespace

    def emit_to_player(self, socket_id: str, payload: Dict[str, Any]):
        """Send one message to a specific connection."""
        try:
            frame = self.codec.encode(payload)
            self.socketio.emit(MESSAGE_EVENT, frame, to=socket_id, namespace=self.namespace)
            logger.debug(f"Sent {payload.get('type')} to {socket_id}")
        except CodecError as e:
            logger.error(f"Error encoding {payload.get('type')} for {socket_id}: {e}")
        except Exception as e:
            logger.error(f"Error sending {payload.get('type')} to {socket_id}: {e}")

    def emit_to_players(self, socket_ids: Iterable[str], payload: Dict[str, Any]):
        """Send the same message to several connections, encoding it once."""
        socket_ids = list(socket_ids)
        try:
            frame = self.codec.encode(payload)
        except CodecError as e:
            logger.error(f"Error encoding {payload.get('type')}: {e}")
            return

        for socket_id in socket_ids:
            try:
                self.socketio.emit(MESSAGE_EVENT, frame, to=socket_id, namespace=self.namespace)
            except Exception as e:
                logger.error(f"Error sending {payload.get('type')} to {socket_id}: {e}")
        logger.debug(f"Sent {payload.get('type')} to {len(socket_ids)} players")

    def deliver(self, update):
        """Send every message carried by a room update, in order."""
        for message in update.messages:
            if len(message.recipients) == 1:
                self.emit_to_player(message.recipients[0], message.payload)
            else:
                self.emit_to_players(message.recipients, message.payload)

    def close_connection(self, socket_id: str):
        """Disconnect a client."""
        try:
            self.socketio.server.disconnect(socket_id, namespace=self.namespace)
            logger.debug(f"Closed connection {socket_id}")
        except Exception as e:
            logger.error(f"Error closing connection {socket_id}: {e}")
