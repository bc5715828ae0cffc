"""Item entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .item_status import ItemStatus


@dataclass(eq=False)
class Item:
    """A single inventory record. Two items are the same item when their ids match."""

    name: str
    market: str
    price: Decimal
    stock: int = 0
    description: str | None = None
    status: ItemStatus | None = None
    id: str | None = None  # Assigned on creation, never changed afterwards
    version: int = 0  # Optimistic concurrency token, bumped by the repository on every replace
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        if self.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
