"""
Base Handler Unit Tests
"""

import threading
from unittest.mock import Mock

from math_challenge.game_room import RoomUpdate
from math_challenge.handlers.base_handler import BaseHandler
from math_challenge.room_manager import RoomManager


class TestBaseHandler:
    """Test the shared room-operation plumbing"""

    def setup_method(self):
        """Setup test fixtures for each test"""
        self.room_manager = RoomManager()
        self.lifecycle_service = Mock()
        self.handler = BaseHandler(self.room_manager, self.lifecycle_service)
        self.room, self.player = self.room_manager.assign_to_room('s1', 'Alice')

    def test_resolve(self):
        """Test a seated connection resolves to its room and player"""
        assert self.handler.resolve('s1') == (self.room, self.player)
        assert self.handler.resolve('s2') is None

    def test_run_room_operation_applies_update(self):
        """Test the operation's update is applied to its room"""
        update = RoomUpdate(touched=True)
        operation = Mock(return_value=update)

        result = self.handler.run_room_operation('s1', operation)

        assert result is update
        operation.assert_called_once_with(self.room, self.player)
        self.lifecycle_service.apply.assert_called_once_with(self.room, update)

    def test_run_room_operation_holds_room_lock(self):
        """Test the operation runs under the room lock"""
        lock = self.room_manager.concurrency_control.get_room_lock(self.room.room_id)
        held = []

        def operation(room, player):
            probe = threading.Thread(target=lambda: held.append(not lock.acquire(blocking=False)))
            probe.start()
            probe.join()
            return RoomUpdate()

        self.handler.run_room_operation('s1', operation)
        assert held == [True]

    def test_unknown_connection_skipped(self):
        """Test nothing runs for a connection without a room"""
        operation = Mock()
        assert self.handler.run_room_operation('ghost', operation) is None
        operation.assert_not_called()

    def test_replaced_player_skipped(self):
        """Test a player that left between lookup and locking is skipped"""
        operation = Mock()
        original_lookup = self.room_manager.lookup

        def lookup_then_leave(socket_id):
            resolved = original_lookup(socket_id)
            self.room.players.pop(socket_id)
            return resolved

        self.room_manager.lookup = lookup_then_leave
        assert self.handler.run_room_operation('s1', operation) is None
        operation.assert_not_called()
