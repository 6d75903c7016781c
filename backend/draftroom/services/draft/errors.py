"""Draft session errors.

Structural failures are raised as exceptions so the transport layer can
answer the sender with a single error event. Routine outcomes such as a
wrong-turn selection are not errors and are reported as ``False`` instead.
"""


class DraftError(Exception):
    """Base class for every draft session error."""
    pass


class RoomNotFound(DraftError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class Unauthorized(DraftError):
    """A non-host attempted a host-only action."""
    def __init__(self, message='Only the host can start the game'):
        super().__init__(message)


class ItemNotFound(DraftError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item {item_id} is not in the pool")


class ParticipantNotFound(DraftError):
    def __init__(self, participant_id):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found")


class PoolEmpty(DraftError):
    def __init__(self):
        super().__init__('The draft pool is empty')


class InsufficientParticipants(DraftError):
    def __init__(self, required, actual):
        self.required = required
        self.actual = actual
        super().__init__(f"At least {required} participants are required to start (have {actual})")


class NotStarted(DraftError):
    def __init__(self):
        super().__init__('The turn order has not been started')


class ParticipantDeparted(DraftError):
    """A connection that left a room tried to join it again."""
    def __init__(self, participant_id):
        self.participant_id = participant_id
        super().__init__('You have already left this room')
