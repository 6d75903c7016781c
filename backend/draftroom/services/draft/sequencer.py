import random
from typing import Callable, List, Optional, Sequence

from .errors import InsufficientParticipants, NotStarted


class TurnSequencer:
    """Fixed turn order over participant ids plus the current position.

    The order is computed once by ``start`` and never shrinks. ``advance``
    can be told which ids are still present so departed slots are skipped.
    """

    def __init__(self, rng: random.Random = None):
        self._rng = rng or random.Random()
        self._order: List[str] = []
        self._index = 0

    @property
    def started(self) -> bool:
        return bool(self._order)

    @property
    def order(self) -> List[str]:
        return list(self._order)

    @property
    def index(self) -> int:
        return self._index

    def start(self, participant_ids: Sequence[str]) -> str:
        if len(participant_ids) < 1:
            raise InsufficientParticipants(1, len(participant_ids))
        order = list(participant_ids)
        self._rng.shuffle(order)
        self._order = order
        self._index = 0
        return self._order[0]

    def current(self) -> Optional[str]:
        if not self._order:
            return None
        return self._order[self._index]

    def advance(self, is_present: Callable[[str], bool] = None) -> Optional[str]:
        """Move to the next slot and return its id.

        With ``is_present``, slots whose id fails the check are skipped. If no
        slot passes, the index is left unchanged and ``None`` is returned.
        """
        if not self._order:
            raise NotStarted()
        size = len(self._order)
        for step in range(1, size + 1):
            candidate = (self._index + step) % size
            if is_present is None or is_present(self._order[candidate]):
                self._index = candidate
                return self._order[candidate]
        return None
