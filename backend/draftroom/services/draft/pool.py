import random
from typing import Any, Iterable, List

from draftroom.models import Item
from .errors import ItemNotFound, PoolEmpty


class DraftPool:
    """Items of one room that nobody has claimed yet.

    Starts as a copy of the catalog and only ever shrinks; catalog order is
    kept for display.
    """

    def __init__(self, catalog: Iterable[Item], rng: random.Random = None):
        self._items = {item.id: item for item in catalog}
        self._rng = rng or random.Random()

    def __len__(self):
        return len(self._items)

    def __contains__(self, item_id):
        return item_id in self._items

    def claim(self, item_id: Any) -> Item:
        try:
            return self._items.pop(item_id)
        except (KeyError, TypeError):
            raise ItemNotFound(item_id)

    def claim_random(self) -> Item:
        if not self._items:
            raise PoolEmpty()
        item_id = self._rng.choice(list(self._items))
        return self._items.pop(item_id)

    def items(self) -> List[Item]:
        return list(self._items.values())

    def to_list(self):
        return [item.to_dict() for item in self._items.values()]
