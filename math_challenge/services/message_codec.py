"""
Message Codec - MessagePack encoding of protocol messages.

Frames are schemaless maps, so any msgpack-compatible client can talk to the
server without sharing type definitions.
"""

import logging
from typing import Any

import msgpack

from math_challenge.core.errors import CodecError

logger = logging.getLogger(__name__)


class MessageCodec:
    """Encode/decode a single frame."""

    def encode(self, obj: Any) -> bytes:
        try:
            return msgpack.packb(obj, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise CodecError(f"Cannot encode message: {e}") from e

    def decode(self, data: Any) -> Any:
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        if not isinstance(data, bytes):
            raise CodecError(f"Expected a binary frame, got {type(data).__name__}")
        try:
            return msgpack.unpackb(data, raw=False)
        except (msgpack.UnpackException, ValueError, TypeError) as e:
            raise CodecError(f"Cannot decode frame: {e}") from e
