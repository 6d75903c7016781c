from contextlib import nullcontext
from typing import Callable, Optional


class TurnTimer:
    """Single-shot, rearmable turn deadline.

    At most one expiry is pending at any time: arming cancels the previous
    one. The expiry callback receives the generation it was armed with, and
    the owner must check ``is_current`` under its own lock before acting,
    since a callback can already be in flight when the timer is re-armed.
    """

    def __init__(self, scheduler):
        self._scheduler = scheduler
        self._call = None
        self._generation = 0
        self.deadline: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._call is not None

    @property
    def generation(self) -> int:
        return self._generation

    def arm(self, duration_ms: int, on_expire: Callable[[int], None]) -> int:
        self.cancel()
        generation = self._generation
        self.deadline = self._scheduler.time() + duration_ms / 1000.0
        self._call = self._scheduler.call_later(duration_ms / 1000.0, lambda: on_expire(generation))
        return generation

    def cancel(self) -> None:
        if self._call is not None:
            self._call.cancel()
            self._call = None
        self.deadline = None
        self._generation += 1

    def is_current(self, generation: int) -> bool:
        return self._call is not None and generation == self._generation

    def expire(self, generation: int) -> bool:
        """Consume an expiry; returns False for a stale generation."""
        if not self.is_current(generation):
            return False
        self._call = None
        self.deadline = None
        self._generation += 1
        return True


class BroadcastTicker:
    """Repeating tick that keeps going while ``on_tick`` returns True.

    Each tick runs under ``lock`` (the owning room's lock) so a concurrent
    ``stop`` cannot interleave with it.
    """

    def __init__(self, scheduler, lock=None):
        self._scheduler = scheduler
        self._lock = lock if lock is not None else nullcontext()
        self._call = None
        self._generation = 0
        self._interval_sec = 0.0
        self._on_tick: Optional[Callable[[], bool]] = None

    @property
    def running(self) -> bool:
        return self._call is not None

    def start(self, interval_ms: int, on_tick: Callable[[], bool]) -> None:
        self.stop()
        self._interval_sec = interval_ms / 1000.0
        self._on_tick = on_tick
        self._schedule(self._generation)

    def stop(self) -> None:
        if self._call is not None:
            self._call.cancel()
            self._call = None
        self._generation += 1

    def _schedule(self, generation: int) -> None:
        self._call = self._scheduler.call_later(self._interval_sec, lambda: self._fire(generation))

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._call = None
            if self._on_tick():
                self._schedule(generation)
