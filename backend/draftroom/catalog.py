import json
import os
from typing import List

from draftroom.models import Item

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), 'data', 'players.json')


def load_catalog(path: str = None) -> List[Item]:
    """Load the ordered catalog of draftable items from a JSON list.

    Identifiers must be unique; the file order is kept as the pool order.
    """
    path = path or DEFAULT_CATALOG_PATH
    with open(path, encoding='utf-8') as fh:
        raw = json.load(fh)
    if not isinstance(raw, list):
        raise ValueError(f"Catalog {path} must contain a JSON list")
    items = [Item.from_dict(entry) for entry in raw]
    seen = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate catalog id {item.id!r} in {path}")
        seen.add(item.id)
    return items
