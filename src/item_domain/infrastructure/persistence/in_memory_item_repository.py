# src/item_domain/infrastructure/persistence/in_memory_item_repository.py
"""Thread-safe in-process implementation of the Item repository."""

import logging
import uuid
from dataclasses import replace
from threading import Lock
from typing import Optional

from src.common.dtos.item_dtos import ItemFilterDTO, ItemPageDTO, PageRequestDTO, SortDirection
from src.common.exceptions.custom_exceptions import ItemNotFoundError, StaleItemError
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.repositories.item_repository import IItemRepository

logger = logging.getLogger(__name__)


def _sort_key(item: Item, field_name: str):
    value = getattr(item, field_name)
    if field_name == "status" and value is not None:
        value = value.value
    # None sorts before any value
    return (value is not None, value if value is not None else "")


class InMemoryItemRepository(IItemRepository):
    """Keeps items in a dict guarded by a lock. Every stored item is a copy, never the caller's object."""

    def __init__(self) -> None:
        self._items: dict[str, Item] = {}
        self._lock = Lock()

    def get_item_by_id(self, item_id: str) -> Optional[Item]:
        with self._lock:
            item = self._items.get(item_id)
            return replace(item) if item else None

    def insert_item(self, item: Item) -> Item:
        stored = replace(item, id=item.id or str(uuid.uuid4()), version=0)
        with self._lock:
            self._items[stored.id] = stored
        logger.debug(f"Inserted item {stored.id}")
        return replace(stored)

    def replace_item(self, item: Item) -> Item:
        with self._lock:
            current = self._items.get(item.id)
            if current is None:
                raise ItemNotFoundError(item.id)
            if current.version != item.version:
                raise StaleItemError(item.id, item.version)
            stored = replace(item, version=item.version + 1)
            self._items[stored.id] = stored
        return replace(stored)

    def delete_item_by_id(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def get_items_page(self, item_filter: ItemFilterDTO, page_request: PageRequestDTO) -> ItemPageDTO:
        with self._lock:
            matches = [
                replace(item)
                for item in self._items.values()
                if (item_filter.name is None or item.name == item_filter.name)
                and (item_filter.market is None or item.market == item_filter.market)
                and (item_filter.status is None or item.status is item_filter.status)
            ]

        reverse = page_request.direction is SortDirection.DESC
        matches.sort(key=lambda i: i.id)
        matches.sort(key=lambda i: _sort_key(i, page_request.sort_by), reverse=reverse)

        start = page_request.page * page_request.size
        return ItemPageDTO(
            items=matches[start : start + page_request.size],
            page=page_request.page,
            size=page_request.size,
            total_elements=len(matches),
        )
