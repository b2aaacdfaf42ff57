"""
Expiration Scheduler Unit Tests
Tests for the deadline heap, lazy invalidation and timer re-arming.
"""

from types import SimpleNamespace
from unittest.mock import Mock

from math_challenge.services.expiration_scheduler import ExpirationScheduler
from tests.helpers.socket_mocks import FakeClock, FakeTimerFactory


def make_room(room_id):
    return SimpleNamespace(room_id=room_id, last_activity=None, expiration_deadline=None)


class TestExpirationScheduler:
    """Test ExpirationScheduler functionality"""

    def setup_method(self):
        """Setup test fixtures for each test"""
        self.clock = FakeClock()
        self.timers = FakeTimerFactory()
        self.handler = Mock()
        self.scheduler = ExpirationScheduler(300, clock=self.clock, timer_factory=self.timers)
        self.scheduler.set_expiration_handler(self.handler)

    def test_touch_sets_deadline(self):
        """Test touching records activity and the new deadline on the room"""
        room = make_room(1)
        deadline = self.scheduler.touch(room)

        assert deadline == 1300.0
        assert room.last_activity == 1000.0
        assert room.expiration_deadline == 1300.0
        assert self.scheduler.current_deadline(1) == 1300.0

    def test_first_touch_arms_timer(self):
        """Test the timer is armed for the earliest deadline"""
        self.scheduler.touch(make_room(1))

        assert len(self.timers.active) == 1
        timer = self.timers.active[0]
        assert timer.delay == 300
        assert timer.daemon is True

    def test_later_deadline_keeps_timer(self):
        """Test entries behind the head do not re-arm the timer"""
        self.scheduler.touch(make_room(1))
        self.clock.advance(10)
        self.scheduler.touch(make_room(2))

        assert len(self.timers.timers) == 1

    def test_touch_does_not_remove_old_entries(self):
        """Test re-touching pushes without searching the heap"""
        room = make_room(1)
        self.scheduler.touch(room)
        self.clock.advance(5)
        self.scheduler.touch(room)

        assert self.scheduler.pending_entries() == 2
        assert self.scheduler.current_deadline(1) == 1305.0

    def test_expires_idle_room(self):
        """Test the handler runs once the deadline passes"""
        self.scheduler.touch(make_room(1))
        self.clock.advance(300)
        self.timers.fire()

        self.handler.assert_called_once_with(1, 1300.0)
        assert self.scheduler.current_deadline(1) is None
        assert self.scheduler.pending_entries() == 0
        assert self.timers.active == []

    def test_stale_entry_is_discarded(self):
        """Test an entry superseded by a later touch does not expire the room"""
        room = make_room(1)
        self.scheduler.touch(room)
        self.clock.advance(200)
        self.scheduler.touch(room)

        self.clock.advance(100)
        self.timers.fire()

        self.handler.assert_not_called()
        # Re-armed for the surviving deadline
        assert self.timers.active[0].delay == 200
        self.clock.advance(200)
        self.timers.fire()
        self.handler.assert_called_once_with(1, 1500.0)

    def test_one_expiry_per_room(self):
        """Test many touches on one room still expire it exactly once"""
        room = make_room(1)
        for _ in range(10):
            self.scheduler.touch(room)
            self.clock.advance(1)

        self.clock.advance(1000)
        self.timers.fire()

        assert self.handler.call_count == 1
        assert self.scheduler.pending_entries() == 0

    def test_forgotten_room_never_expires(self):
        """Test forget invalidates every queued entry"""
        self.scheduler.touch(make_room(1))
        self.scheduler.forget(1)
        self.clock.advance(301)
        self.timers.fire()

        self.handler.assert_not_called()

    def test_expires_rooms_in_deadline_order(self):
        """Test several due rooms are handled earliest first"""
        self.scheduler.touch(make_room(2))
        self.clock.advance(1)
        self.scheduler.touch(make_room(1))
        self.clock.advance(400)
        self.timers.fire()

        assert [c[0][0] for c in self.handler.call_args_list] == [2, 1]

    def test_early_fire_reschedules(self):
        """Test a timer firing before any deadline only re-arms"""
        self.scheduler.touch(make_room(1))
        self.clock.advance(100)
        self.timers.fire()

        self.handler.assert_not_called()
        assert self.timers.active[0].delay == 200

    def test_handler_errors_do_not_stop_draining(self):
        """Test a failing handler does not block other expirations"""
        self.handler.side_effect = [RuntimeError('boom'), None]
        self.scheduler.touch(make_room(1))
        self.scheduler.touch(make_room(2))
        self.clock.advance(300)
        self.timers.fire()

        assert self.handler.call_count == 2

    def test_shutdown_cancels_timer(self):
        """Test shutdown leaves no armed timer"""
        self.scheduler.touch(make_room(1))
        self.scheduler.shutdown()
        assert self.timers.active == []

    def test_without_handler_room_is_dropped_from_index(self):
        """Test firing with no handler registered is harmless"""
        scheduler = ExpirationScheduler(10, clock=self.clock, timer_factory=self.timers)
        scheduler.touch(make_room(5))
        self.clock.advance(10)
        self.timers.active[-1].callback()
        assert scheduler.current_deadline(5) is None
