"""
Expiration Scheduler - reclaims rooms that have been idle for too long.

Every activity touch pushes a (deadline, room) entry onto a min-heap and
records the deadline in an index keyed by room id. Entries whose deadline no
longer matches the index are stale and are dropped when popped, so touching a
room never requires searching the heap. A single timer is kept armed for the
earliest entry.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# (deadline, sequence, room_id); the sequence keeps ordering total for equal deadlines
HeapEntry = Tuple[float, int, int]
ExpirationHandler = Callable[[int, float], None]


class ExpirationScheduler:
    """Priority queue of room deadlines with lazy invalidation and one outstanding timer."""

    def __init__(self, inactivity_limit: float, clock: Callable[[], float] = time.monotonic,
                 timer_factory: Callable = threading.Timer):
        """
        Args:
            inactivity_limit: Seconds a room may stay idle before it is reclaimed
            clock: Time source returning seconds as a float
            timer_factory: Callable ``(delay, callback)`` returning an object with
                ``start()`` and ``cancel()``, e.g. ``threading.Timer``
        """
        self.inactivity_limit = inactivity_limit
        self._clock = clock
        self._timer_factory = timer_factory
        self._heap: List[HeapEntry] = []
        self._deadlines: Dict[int, float] = {}
        self._sequence = itertools.count()
        self._lock = threading.RLock()
        self._timer = None
        self._expiration_handler: Optional[ExpirationHandler] = None

    def set_expiration_handler(self, handler: ExpirationHandler) -> None:
        """Register the callback invoked with ``(room_id, deadline)`` for each expired room."""
        self._expiration_handler = handler

    def touch(self, room) -> float:
        """Record activity on ``room`` and push its new deadline."""
        with self._lock:
            now = self._clock()
            deadline = now + self.inactivity_limit
            room.last_activity = now
            room.expiration_deadline = deadline
            self._deadlines[room.room_id] = deadline

            entry = (deadline, next(self._sequence), room.room_id)
            heapq.heappush(self._heap, entry)
            if self._heap[0] is entry:
                self._schedule_locked()
            return deadline

    def forget(self, room_id: int) -> None:
        """Invalidate every queued entry of a destroyed room."""
        with self._lock:
            self._deadlines.pop(room_id, None)

    def current_deadline(self, room_id: int) -> Optional[float]:
        with self._lock:
            return self._deadlines.get(room_id)

    def pending_entries(self) -> int:
        with self._lock:
            return len(self._heap)

    def on_timer_fire(self) -> None:
        """Drain every due entry, expire the rooms whose entry is still valid, then re-arm."""
        expired = []
        with self._lock:
            now = self._clock()
            while self._heap and self._heap[0][0] <= now:
                deadline, _, room_id = heapq.heappop(self._heap)
                if self._deadlines.get(room_id) != deadline:
                    logger.debug(f"Discarding stale expiration entry for room {room_id}")
                    continue
                del self._deadlines[room_id]
                expired.append((room_id, deadline))

        # Handlers take room locks, so they run outside the heap lock
        for room_id, deadline in expired:
            logger.info(f"Room {room_id} expired after {self.inactivity_limit:.0f}s of inactivity")
            if self._expiration_handler is None:
                logger.warning(f"No expiration handler registered, room {room_id} left in place")
                continue
            try:
                self._expiration_handler(room_id, deadline)
            except Exception as e:
                logger.error(f"Error expiring room {room_id}: {e}")

        with self._lock:
            self._schedule_locked()

    def shutdown(self) -> None:
        """Cancel the outstanding timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.info("ExpirationScheduler stopped")

    def _schedule_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if not self._heap:
            return

        delay = max(self._heap[0][0] - self._clock(), 0)
        timer = self._timer_factory(delay, self.on_timer_fire)
        timer.daemon = True
        timer.start()
        self._timer = timer
