# src/item_domain/domain/repositories/item_repository.py
"""Item repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.common.dtos.item_dtos import ItemFilterDTO, ItemPageDTO, PageRequestDTO
from src.item_domain.domain.entities.item import Item


class IItemRepository(ABC):

    @abstractmethod
    def get_item_by_id(self, item_id: str) -> Optional[Item]:
        """Retrieves an item by its id, or None when it does not exist."""
        pass

    @abstractmethod
    def insert_item(self, item: Item) -> Item:
        """Stores a new item, assigning an id if it has none. The stored item starts at version 0."""
        pass

    @abstractmethod
    def replace_item(self, item: Item) -> Item:
        """
        Overwrites the stored item only if its version still equals item.version.

        Returns the stored item with its version incremented.
        Raises ItemNotFoundError if the item is gone and StaleItemError if another
        writer got there first.
        """
        pass

    @abstractmethod
    def delete_item_by_id(self, item_id: str) -> bool:
        """Deletes an item. Returns False when there was nothing to delete."""
        pass

    @abstractmethod
    def get_items_page(self, item_filter: ItemFilterDTO, page_request: PageRequestDTO) -> ItemPageDTO:
        """Retrieves one ordered page of items matching the filter."""
        pass
