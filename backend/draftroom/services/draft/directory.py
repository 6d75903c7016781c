import logging
import random
import string
import threading
from typing import Any, Dict, Iterable, List

from draftroom.models import Item
from .coordinator import Broadcast, RoomCoordinator
from .errors import RoomNotFound

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(taken, length: int = 6, rng: random.Random = None) -> str:
    """Generate a short uppercase room code not present in ``taken``."""
    rng = rng or random.Random()
    while True:
        code = ''.join(rng.choices(ROOM_CODE_ALPHABET, k=length))
        if code not in taken:
            return code


class RoomDirectory:
    """Process-wide map of room code to coordinator.

    Created once per application and handed to the transport handlers.
    Rooms are created on request and dropped as soon as their last
    participant leaves.
    """

    def __init__(
        self,
        catalog: Iterable[Item],
        *,
        scheduler,
        broadcast: Broadcast,
        turn_duration_ms: int = 10000,
        broadcast_interval_ms: int = 1000,
        room_code_length: int = 6,
        min_participants: int = 1,
        rng: random.Random = None,
        logger: logging.Logger = None,
    ):
        self.catalog = list(catalog)
        self.scheduler = scheduler
        self.turn_duration_ms = turn_duration_ms
        self.broadcast_interval_ms = broadcast_interval_ms
        self.room_code_length = room_code_length
        self.min_participants = min_participants
        self._broadcast = broadcast
        self._rng = rng or random.Random()
        self._log = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, RoomCoordinator] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id):
        with self._lock:
            return _normalize(room_id) in self._rooms

    def room_ids(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def get(self, room_id: str) -> RoomCoordinator:
        with self._lock:
            coordinator = self._rooms.get(_normalize(room_id))
        if coordinator is None or coordinator.closed:
            raise RoomNotFound(room_id)
        return coordinator

    def create_room(self, host_id: str, host_name: str) -> RoomCoordinator:
        with self._lock:
            room_id = generate_room_code(self._rooms, self.room_code_length, self._rng)
            coordinator = RoomCoordinator(
                room_id,
                host_id,
                host_name,
                self.catalog,
                scheduler=self.scheduler,
                broadcast=self._broadcast,
                turn_duration_ms=self.turn_duration_ms,
                broadcast_interval_ms=self.broadcast_interval_ms,
                min_participants=self.min_participants,
                rng=random.Random(self._rng.random()),
            )
            self._rooms[room_id] = coordinator
        self._log.info(f"[room-created] room={room_id} host={host_id} name={host_name!r} items={len(self.catalog)}")
        return coordinator

    def join_room(self, room_id: str, participant_id: str, name: str) -> Dict[str, Any]:
        return self.get(room_id).join(participant_id, name)

    def start_game(self, room_id: str, requester_id: str) -> bool:
        return self.get(room_id).start_game(requester_id)

    def select_item(self, room_id: str, requester_id: str, item_id: Any) -> bool:
        return self.get(room_id).select_item(requester_id, item_id)

    def snapshot(self, room_id: str) -> Dict[str, Any]:
        return self.get(room_id).snapshot()

    def leave_room(self, room_id: str, participant_id: str) -> bool:
        """Remove a participant; destroys the room when it empties.

        Returns True if the room was destroyed.
        """
        coordinator = self.get(room_id)
        if not coordinator.leave(participant_id):
            return False
        self._discard(coordinator)
        return True

    def disconnect(self, participant_id: str) -> List[str]:
        """Run ``leave_room`` for every room holding this connection."""
        with self._lock:
            rooms = list(self._rooms.values())
        left = []
        for coordinator in rooms:
            if not coordinator.has_participant(participant_id):
                continue
            left.append(coordinator.room_id)
            if coordinator.leave(participant_id):
                self._discard(coordinator)
        return left

    def shutdown(self) -> None:
        """Cancel every timer and tick and drop all rooms."""
        with self._lock:
            rooms = list(self._rooms.values())
            self._rooms.clear()
        for coordinator in rooms:
            coordinator.close()
        self._log.info(f"[shutdown] closed {len(rooms)} room(s)")

    def _discard(self, coordinator: RoomCoordinator) -> None:
        with self._lock:
            if self._rooms.get(coordinator.room_id) is coordinator:
                del self._rooms[coordinator.room_id]
        self._log.info(f"[room-destroyed] room={coordinator.room_id}")


def _normalize(room_id) -> str:
    return str(room_id or '').strip().upper()
