# src/item_domain/domain/services/stock_lifecycle.py
"""
Domain rules for the item stock lifecycle.

Every function here is pure: it takes the current Item and returns a new Item
(or raises), never touching storage. The application service decides when to
read and write; these rules decide what a valid transition looks like.
"""

import re
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from src.common.dtos.item_dtos import UpdateItemDTO
from src.common.exceptions.custom_exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ItemDiscontinuedError,
    ValidationFailedError,
)
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus

ISO_3166_1_ALPHA_2_PATTERN = re.compile(r"^[A-Z]{2}$")


def validate_item(item: Item) -> None:
    """Checks the invariants every stored item must satisfy."""
    if not isinstance(item.name, str) or not item.name.strip():
        raise ValidationFailedError("name", "must not be empty or blank")
    if item.description is not None and (not isinstance(item.description, str) or not item.description.strip()):
        raise ValidationFailedError("description", "must not be empty or blank")
    if not isinstance(item.market, str) or not ISO_3166_1_ALPHA_2_PATTERN.match(item.market):
        raise ValidationFailedError("market", "must be an ISO-3166-1 alpha-2 country code")
    try:
        price = Decimal(item.price)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationFailedError("price", "must be a decimal amount")
    if not price.is_finite() or price <= 0:
        raise ValidationFailedError("price", "must be greater than zero")
    if isinstance(item.stock, bool) or not isinstance(item.stock, int):
        raise ValidationFailedError("stock", "must be an integer")
    if item.stock < 0:
        raise ValidationFailedError("stock", "must be zero or greater")
    if not isinstance(item.status, ItemStatus):
        raise ValidationFailedError("status", "must be a known item status")


def resolve_settable_status(value: str | ItemStatus | None) -> ItemStatus | None:
    """Parses a caller-supplied status and rejects values callers may not assign."""
    status = value if isinstance(value, ItemStatus) else ItemStatus.from_name(value)
    if status is not None and not status.is_settable():
        raise ValidationFailedError("status", f"{status.value} cannot be assigned directly")
    return status


def validate_quantity(quantity) -> int:
    """Restock and dispatch only accept strictly positive integers."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return quantity


def ensure_mutable(item: Item) -> None:
    if item.status is ItemStatus.DISCONTINUED:
        raise ItemDiscontinuedError(item.id)


def prepare_new_item(candidate: Item) -> Item:
    """Normalises a creation candidate: default status and default stock."""
    status = resolve_settable_status(candidate.status) or ItemStatus.ACTIVE
    stock = 0 if candidate.stock is None else candidate.stock
    new_item = replace(candidate, id=None, status=status, stock=stock, version=0)
    validate_item(new_item)
    return new_item


def apply_update(item: Item, patch: UpdateItemDTO) -> Item:
    """Merges the provided patch fields onto the item, leaving the rest untouched."""
    ensure_mutable(item)

    changes = {}
    if patch.name is not None:
        changes["name"] = patch.name
    if patch.description is not None:
        changes["description"] = patch.description
    if patch.market is not None:
        changes["market"] = patch.market
    if patch.price is not None:
        changes["price"] = patch.price
    if patch.stock is not None:
        changes["stock"] = patch.stock
    if patch.status is not None:
        changes["status"] = resolve_settable_status(patch.status)

    updated = replace(item, **changes)
    validate_item(updated)
    return updated


def apply_restock(item: Item, quantity: int) -> Item:
    ensure_mutable(item)
    return replace(item, stock=item.stock + quantity)


def apply_dispatch(item: Item, quantity: int) -> Item:
    """Removes quantity from stock. Never clamps: asking for too much is an error."""
    ensure_mutable(item)
    if quantity > item.stock:
        raise InsufficientStockError(item.id, quantity, item.stock)
    return replace(item, stock=item.stock - quantity)


def apply_discontinue(item: Item) -> Item:
    return replace(item, status=ItemStatus.DISCONTINUED)
