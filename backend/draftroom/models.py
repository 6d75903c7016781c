from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Item:
    """A draftable catalog entry. Never mutated after the catalog is loaded."""
    id: Any
    name: str
    category: str
    rating: float
    country: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Item':
        # The bundled catalog and the web client call the category "role"
        category = data.get('category', data.get('role'))
        if data.get('id') is None or not data.get('name') or category is None:
            raise ValueError(f"Catalog entry is missing id, name or category: {data!r}")
        return cls(
            id=data['id'],
            name=data['name'],
            category=category,
            rating=data.get('rating', 0),
            country=data.get('country'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'role': self.category,
            'rating': self.rating,
            'country': self.country,
        }


@dataclass
class Participant:
    id: str
    name: str
    is_host: bool = False
    claimed: List[Item] = field(default_factory=list)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host,
            'selectedPlayers': [item.to_dict() for item in self.claimed],
        }
