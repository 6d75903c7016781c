"""Draft session core: pool, registry, turn order, timers and rooms.

Nothing in this package imports Flask; the transport layer talks to it
through ``RoomDirectory`` and receives room broadcasts through the
``broadcast`` callable it supplies.
"""
from .coordinator import RoomCoordinator, RoomStatus
from .directory import RoomDirectory, generate_room_code
from .errors import (
    DraftError,
    InsufficientParticipants,
    ItemNotFound,
    NotStarted,
    ParticipantDeparted,
    ParticipantNotFound,
    PoolEmpty,
    RoomNotFound,
    Unauthorized,
)
from .scheduling import ManualScheduler, SocketIOScheduler
