# src/item_domain/application/item_service.py
"""Application service managing the item stock lifecycle."""

import logging
import uuid
from dataclasses import replace
from typing import Callable

from src.common.config.settings import settings
from src.common.dtos.item_dtos import UpdateItemDTO
from src.common.exceptions.custom_exceptions import (
    ApplicationError,
    ConcurrentModificationError,
    ItemNotFoundError,
    StaleItemError,
)
from src.common.utils.date_utils import utc_now
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus
from src.item_domain.domain.repositories.item_repository import IItemRepository
from src.item_domain.domain.services import stock_lifecycle

logger = logging.getLogger(__name__)


class ItemApplicationService:
    """
    Creates, updates, restocks, dispatches and deletes items.

    Every mutation is an optimistic read-modify-write: the current item is read,
    the new state is computed by the domain rules, and the result is written
    back with a version check. When another writer wins the race the whole
    cycle starts over against the fresh item, so preconditions such as stock
    sufficiency are always checked against the state that actually gets replaced.
    """

    def __init__(self, item_repo: IItemRepository, max_retries: int | None = None) -> None:
        self.item_repo = item_repo
        self.max_retries = max_retries if max_retries is not None else settings.STOCK_WRITE_MAX_RETRIES

    def create(self, candidate: Item) -> Item:
        """Validates and stores a new item with a freshly generated id."""
        new_item = stock_lifecycle.prepare_new_item(candidate)
        now = utc_now()
        new_item = replace(new_item, id=str(uuid.uuid4()), created_at=now, updated_at=now)

        stored = self.item_repo.insert_item(new_item)
        logger.info(f"Created item {stored.id} ({stored.name}, market {stored.market}, stock {stored.stock})")
        return stored

    def find_by_id(self, item_id: str) -> Item:
        item = self.item_repo.get_item_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def update(self, item_id: str, patch: UpdateItemDTO) -> Item:
        """Applies a partial update. Fields missing from the patch keep their current values."""
        updated = self._mutate(item_id, "update", lambda item: stock_lifecycle.apply_update(item, patch))
        logger.info(f"Updated item {item_id}")
        return updated

    def delete_by_id(self, item_id: str) -> None:
        if not self.item_repo.delete_item_by_id(item_id):
            raise ItemNotFoundError(item_id)
        logger.info(f"Deleted item {item_id}")

    def restock(self, item_id: str, quantity: int) -> Item:
        stock_lifecycle.validate_quantity(quantity)
        updated = self._mutate(item_id, "restock", lambda item: stock_lifecycle.apply_restock(item, quantity))
        logger.info(f"Restocked item {item_id} with {quantity} units, stock is now {updated.stock}")
        return updated

    def dispatch(self, item_id: str, quantity: int) -> Item:
        stock_lifecycle.validate_quantity(quantity)
        updated = self._mutate(item_id, "dispatch", lambda item: stock_lifecycle.apply_dispatch(item, quantity))
        logger.info(f"Dispatched {quantity} units of item {item_id}, stock is now {updated.stock}")
        return updated

    def discontinue(self, item_id: str) -> Item:
        """Moves an item into the terminal DISCONTINUED status."""
        item = self.find_by_id(item_id)
        if item.status is ItemStatus.DISCONTINUED:
            return item
        updated = self._mutate(item_id, "discontinue", stock_lifecycle.apply_discontinue)
        logger.info(f"Discontinued item {item_id}")
        return updated

    def _mutate(self, item_id: str, operation: str, transition: Callable[[Item], Item]) -> Item:
        """Runs read, transition and conditional write, retrying when the write turns out to be stale."""
        for attempt in range(1, self.max_retries + 1):
            current = self.find_by_id(item_id)
            try:
                candidate = transition(current)
            except ApplicationError as e:
                logger.warning(f"Rejected {operation} on item {item_id}: {e}")
                raise

            candidate = replace(candidate, id=current.id, version=current.version, updated_at=utc_now())
            try:
                return self.item_repo.replace_item(candidate)
            except StaleItemError:
                logger.warning(
                    f"Concurrent write detected during {operation} on item {item_id} "
                    f"(attempt {attempt}/{self.max_retries}), retrying"
                )
                continue

        raise ConcurrentModificationError(item_id, self.max_retries)
