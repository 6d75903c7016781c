from typing import Dict, List, Optional

from draftroom.models import Item, Participant
from .errors import ParticipantNotFound


class ParticipantRegistry:
    """Participants of one room, kept in join order.

    Exactly one live participant holds the host flag while the registry is
    non-empty. Departed participants keep their claimed items on record so
    every catalog item stays accounted for.
    """

    def __init__(self):
        self._live: Dict[str, Participant] = {}
        self._departed: List[Participant] = []

    def __len__(self):
        return len(self._live)

    def __contains__(self, participant_id):
        return participant_id in self._live

    @property
    def host_id(self) -> Optional[str]:
        for participant in self._live.values():
            if participant.is_host:
                return participant.id
        return None

    def add(self, participant_id: str, name: str, host: bool = False) -> Participant:
        if host:
            for existing in self._live.values():
                existing.is_host = False
        participant = Participant(id=participant_id, name=name, is_host=host)
        self._live[participant_id] = participant
        return participant

    def get(self, participant_id: str) -> Participant:
        try:
            return self._live[participant_id]
        except KeyError:
            raise ParticipantNotFound(participant_id)

    def remove(self, participant_id: str) -> Optional[str]:
        """Remove a participant and return the new host id if host status moved."""
        participant = self._live.pop(participant_id, None)
        if participant is None:
            raise ParticipantNotFound(participant_id)
        self._departed.append(participant)
        if not participant.is_host:
            return None
        participant.is_host = False
        if not self._live:
            return None
        # Earliest-joined remaining participant inherits the host flag
        successor = next(iter(self._live.values()))
        successor.is_host = True
        return successor.id

    def record_claim(self, participant_id: str, item: Item) -> None:
        self.get(participant_id).claimed.append(item)

    def ids(self) -> List[str]:
        return list(self._live)

    def participants(self) -> List[Participant]:
        return list(self._live.values())

    def departed(self) -> List[Participant]:
        return list(self._departed)

    def has_departed(self, participant_id: str) -> bool:
        return any(p.id == participant_id for p in self._departed)
