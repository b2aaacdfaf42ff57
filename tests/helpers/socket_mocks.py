"""
Common SocketIO mock patterns for testing.
Provides a mock SocketIO object, a controllable clock and timer, and helpers
to decode the binary frames the server emitted.
"""

from unittest.mock import Mock

import msgpack


def create_mock_socketio():
    """Create a standardized mock SocketIO object for testing.

    Returns:
        Mock: A mock SocketIO object exposing ``emit`` and ``server.disconnect``
    """
    mock_socketio = Mock()
    mock_socketio.emit = Mock()
    mock_socketio.server = Mock()
    mock_socketio.server.disconnect = Mock()
    return mock_socketio


def encode_frame(payload):
    """Encode a client message the way a msgpack client would."""
    return msgpack.packb(payload, use_bin_type=True)


def sent_messages(mock_socketio, socket_id=None):
    """Decode every frame emitted on the mock, optionally filtered by recipient.

    Returns:
        list: ``(recipient, payload)`` tuples in emission order
    """
    decoded = []
    for call in mock_socketio.emit.call_args_list:
        event, frame = call[0][0], call[0][1]
        if event != 'message':
            continue
        recipient = call[1].get('to')
        if socket_id is not None and recipient != socket_id:
            continue
        decoded.append((recipient, msgpack.unpackb(frame, raw=False)))
    return decoded


def payloads_for(mock_socketio, socket_id, message_type=None):
    """Payloads received by one connection, optionally only of one type."""
    payloads = [payload for _, payload in sent_messages(mock_socketio, socket_id)]
    if message_type is not None:
        payloads = [payload for payload in payloads if payload.get('type') == message_type]
    return payloads


def disconnected_sids(mock_socketio):
    """Connection ids the server closed."""
    return [call[0][0] for call in mock_socketio.server.disconnect.call_args_list]


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeTimer:
    """Stand-in for threading.Timer that never fires on its own."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


class FakeTimerFactory:
    """Records every timer the scheduler creates."""

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [timer for timer in self.timers if timer.started and not timer.cancelled]

    def fire(self):
        """Run the callback of the single armed timer."""
        active = self.active
        assert len(active) == 1, f"expected one armed timer, found {len(active)}"
        active[0].callback()
