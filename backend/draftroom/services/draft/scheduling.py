"""Deferred-call backends used by turn timers and broadcast ticks.

``SocketIOScheduler`` runs each call as a Flask-SocketIO background task, so
it works under threading, eventlet and gevent alike. ``ManualScheduler`` keeps
a virtual clock that tests advance explicitly.
"""
import heapq
import itertools
import logging
import time
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class ScheduledCall:
    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if not self.cancelled:
            self._callback()


class SocketIOScheduler:
    def __init__(self, socketio):
        self._socketio = socketio

    def time(self) -> float:
        return time.time()

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(callback)

        def _runner():
            self._socketio.sleep(delay_sec)
            try:
                call.run()
            except Exception:
                logger.exception('[scheduler] deferred call failed')

        self._socketio.start_background_task(_runner)
        return call


class ManualScheduler:
    """Virtual clock; nothing fires until ``advance`` is called."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay_sec: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(callback)
        heapq.heappush(self._queue, (self.now + delay_sec, next(self._counter), call))
        return call

    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due calls in deadline order.

        Calls scheduled by a firing callback run too if they fall due before
        the new time.
        """
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self.now = due
            call.run()
        self.now = target

    def clear(self) -> None:
        for _, _, call in self._queue:
            call.cancel()
        self._queue = []
