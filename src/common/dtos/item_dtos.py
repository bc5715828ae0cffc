"""Data Transfer Objects for Item requests and listings."""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import InvalidEnumValueError
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus

SORTABLE_ITEM_FIELDS = ("id", "name", "description", "market", "price", "stock", "status")


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def from_name(cls, value: Optional[str]) -> "SortDirection":
        if value is None or not value.strip():
            return cls.ASC
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise InvalidEnumValueError(cls.__name__, value)


@dataclass
class UpdateItemDTO:
    """Partial update of an item. Fields left as None keep their stored value."""

    name: Optional[str] = None
    description: Optional[str] = None
    market: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class ItemFilterDTO:
    """Equality filters for item listings. None means the field is not filtered."""

    name: Optional[str] = None
    market: Optional[str] = None
    status: Optional[ItemStatus] = None


@dataclass(frozen=True)
class PageRequestDTO:
    page: int = 0
    size: int = field(default_factory=lambda: settings.ITEM_DEFAULT_PAGE_SIZE)
    sort_by: str = "id"
    direction: SortDirection = SortDirection.ASC


@dataclass
class ItemPageDTO:
    """One page of items plus the metadata needed to rebuild navigation links."""

    items: list[Item] = field(default_factory=list)
    page: int = 0
    size: int = field(default_factory=lambda: settings.ITEM_DEFAULT_PAGE_SIZE)
    total_elements: int = 0

    @property
    def number_of_elements(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 1
        return math.ceil(self.total_elements / self.size)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next
