import enum
import logging
import random
import threading
from typing import Any, Callable, Dict, Iterable, Optional

from draftroom.models import Item
from .errors import (
    InsufficientParticipants,
    ItemNotFound,
    ParticipantDeparted,
    PoolEmpty,
    RoomNotFound,
    Unauthorized,
)
from .pool import DraftPool
from .registry import ParticipantRegistry
from .sequencer import TurnSequencer
from .timer import BroadcastTicker, TurnTimer

Broadcast = Callable[[str, str, Dict[str, Any]], None]


class RoomStatus(str, enum.Enum):
    LOBBY = 'lobby'
    DRAFTING = 'drafting'
    FINISHED = 'finished'


class RoomCoordinator:
    """Authoritative state of one draft room.

    Sole mutator of the room's pool, registry, turn order and timers. Every
    public method and every timer callback runs under the room lock, so a
    manual selection and an expiring turn timer never interleave. Room-scoped
    events are broadcast from here, after the mutation and under the lock, so
    clients see them in the order the state changed.
    """

    def __init__(
        self,
        room_id: str,
        host_id: str,
        host_name: str,
        catalog: Iterable[Item],
        *,
        scheduler,
        broadcast: Broadcast,
        turn_duration_ms: int = 10000,
        broadcast_interval_ms: int = 1000,
        min_participants: int = 1,
        rng: random.Random = None,
        logger: logging.Logger = None,
    ):
        self.room_id = room_id
        self.created_by = host_id
        self.turn_duration_ms = turn_duration_ms
        self.broadcast_interval_ms = broadcast_interval_ms
        self.min_participants = min_participants
        self.status = RoomStatus.LOBBY
        self.closed = False

        self._lock = threading.RLock()
        self._broadcast = broadcast
        self._log = logger or logging.getLogger(__name__)
        rng = rng or random.Random()
        self._pool = DraftPool(catalog, rng=rng)
        self._registry = ParticipantRegistry()
        self._registry.add(host_id, host_name, host=True)
        self._sequencer = TurnSequencer(rng=rng)
        self._timer = TurnTimer(scheduler)
        self._ticker = BroadcastTicker(scheduler, lock=self._lock)

    # ---- read accessors ----

    @property
    def host_id(self) -> Optional[str]:
        return self._registry.host_id

    @property
    def current_turn(self) -> Optional[str]:
        if self.status is not RoomStatus.DRAFTING:
            return None
        return self._sequencer.current()

    @property
    def turn_timer_armed(self) -> bool:
        return self._timer.armed

    @property
    def ticking(self) -> bool:
        return self._ticker.running

    def has_participant(self, participant_id: str) -> bool:
        with self._lock:
            return participant_id in self._registry

    @property
    def participant_count(self) -> int:
        return len(self._registry)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self._snapshot()

    # ---- operations ----

    def join(self, participant_id: str, name: str) -> Dict[str, Any]:
        """Register a participant. Late joiners get no turn-order slot.

        Departure is permanent: a connection that left cannot join again.
        """
        with self._lock:
            self._ensure_open()
            if participant_id in self._registry:
                return self._snapshot()
            if self._registry.has_departed(participant_id):
                raise ParticipantDeparted(participant_id)
            self._registry.add(participant_id, name)
            self._log.info(f"[join] room={self.room_id} participant={participant_id} name={name!r} status={self.status.value}")
            state = self._snapshot()
            self._emit('user-joined', state)
            return state

    def start_game(self, requester_id: str) -> bool:
        """Fix the turn order and arm the first turn.

        Returns False without touching anything when the game already started.
        """
        with self._lock:
            self._ensure_open()
            if requester_id != self._registry.host_id:
                raise Unauthorized()
            if self.status is not RoomStatus.LOBBY:
                self._log.info(f"[start-skip] room={self.room_id} already {self.status.value}")
                return False
            participant_ids = self._registry.ids()
            if len(participant_ids) < self.min_participants:
                raise InsufficientParticipants(self.min_participants, len(participant_ids))

            first = self._sequencer.start(participant_ids)
            self.status = RoomStatus.DRAFTING
            self._log.info(f"[start] room={self.room_id} order={self._sequencer.order} first={first}")
            if len(self._pool) == 0:
                self._finish()
            else:
                self._arm_turn_timer()
                self._ticker.start(self.broadcast_interval_ms, self._tick)
            state = self._snapshot()
            self._emit('game-started', state)
            if self.status is RoomStatus.FINISHED:
                self._emit('draft-complete', state)
            return True

    def select_item(self, requester_id: str, item_id: Any) -> bool:
        """Claim ``item_id`` for the requester if it is their turn.

        Wrong-turn and already-claimed selections are routine race losses and
        return False with no state change and no broadcast.
        """
        with self._lock:
            if self.closed or self.status is not RoomStatus.DRAFTING:
                return False
            if requester_id != self._sequencer.current():
                return False
            try:
                item = self._pool.claim(item_id)
            except ItemNotFound:
                return False
            self._registry.record_claim(requester_id, item)
            self._log.info(f"[select] room={self.room_id} participant={requester_id} item={item.id} remaining={len(self._pool)}")
            self._advance_turn()
            self._emit_turn_change('player-selected')
            return True

    def leave(self, participant_id: str) -> bool:
        """Remove a participant; returns True once the room is empty and closed."""
        with self._lock:
            if self.closed:
                return True
            if participant_id not in self._registry:
                return False
            was_current = self.status is RoomStatus.DRAFTING and self._sequencer.current() == participant_id
            new_host = self._registry.remove(participant_id)
            self._log.info(f"[leave] room={self.room_id} participant={participant_id} remaining={len(self._registry)}")
            if new_host is not None:
                self._log.info(f"[host-transfer] room={self.room_id} from={participant_id} to={new_host}")
            if not self._registry:
                self._close()
                return True
            if was_current:
                self._advance_turn()
            state = self._snapshot()
            self._emit('user-left', state)
            if was_current and self.status is RoomStatus.FINISHED:
                self._emit('draft-complete', state)
            return False

    def close(self) -> None:
        """Cancel the turn timer and broadcast tick; the room accepts nothing after this."""
        with self._lock:
            self._close()

    # ---- internals (room lock held) ----

    def _ensure_open(self) -> None:
        if self.closed:
            raise RoomNotFound(self.room_id)

    def _close(self) -> None:
        self._timer.cancel()
        self._ticker.stop()
        self.closed = True
        self._log.info(f"[room-closed] room={self.room_id}")

    def _arm_turn_timer(self) -> None:
        self._timer.arm(self.turn_duration_ms, self._on_turn_expired)
        self._log.info(
            f"[timer-set] room={self.room_id} turn={self._sequencer.current()} "
            f"duration={self.turn_duration_ms}ms deadline={self._timer.deadline}"
        )

    def _advance_turn(self) -> None:
        """Move past the current turn, skipping departed participants."""
        if len(self._pool) == 0:
            self._finish()
            return
        next_id = self._sequencer.advance(lambda pid: pid in self._registry)
        if next_id is None:
            self._log.info(f"[turn-order-exhausted] room={self.room_id} no remaining participant holds a slot")
            self._finish()
            return
        self._arm_turn_timer()

    def _finish(self) -> None:
        self._timer.cancel()
        self._ticker.stop()
        self.status = RoomStatus.FINISHED
        self._log.info(f"[draft-complete] room={self.room_id} remaining={len(self._pool)}")

    def _on_turn_expired(self, generation: int) -> None:
        with self._lock:
            if self.closed or not self._timer.expire(generation):
                self._log.info(f"[timer-stale] room={self.room_id} generation={generation}")
                return
            if self.status is not RoomStatus.DRAFTING:
                return
            current = self._sequencer.current()
            self._log.info(f"[timer-fire] room={self.room_id} turn={current}")
            if current not in self._registry:
                self._advance_turn()
                self._emit_turn_change('game-state-update')
                return
            try:
                item = self._pool.claim_random()
            except PoolEmpty:
                self._finish()
                self._emit('draft-complete', self._snapshot())
                return
            self._registry.record_claim(current, item)
            self._log.info(f"[auto-select] room={self.room_id} participant={current} item={item.id} remaining={len(self._pool)}")
            self._advance_turn()
            self._emit_turn_change('player-selected')

    def _tick(self) -> bool:
        if self.closed or self.status is not RoomStatus.DRAFTING:
            return False
        self._emit('game-state-update', self._snapshot())
        return True

    def _emit_turn_change(self, event: str) -> None:
        state = self._snapshot()
        self._emit(event, state)
        if self.status is RoomStatus.FINISHED:
            self._emit('draft-complete', state)

    def _emit(self, event: str, state: Dict[str, Any]) -> None:
        self._broadcast(self.room_id, event, {'gameState': state})

    def _snapshot(self) -> Dict[str, Any]:
        return {
            'roomId': self.room_id,
            'status': self.status.value,
            'hostId': self._registry.host_id,
            'users': [p.to_dict() for p in self._registry.participants()],
            'departedUsers': [p.to_dict() for p in self._registry.departed()],
            'gameStarted': self.status is not RoomStatus.LOBBY,
            'currentTurn': self.current_turn,
            'turnOrder': self._sequencer.order,
            'availablePlayers': self._pool.to_list(),
            'currentTurnIndex': self._sequencer.index,
            'turnDeadline': self._timer.deadline,
            'turnDurationMs': self.turn_duration_ms,
        }
