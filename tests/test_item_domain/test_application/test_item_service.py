# tests/test_item_domain/test_application/test_item_service.py
"""Tests for the Item Application Service (stock lifecycle manager)."""

import dataclasses
import uuid
from dataclasses import replace
from decimal import Decimal

import pytest

from src.common.dtos.item_dtos import UpdateItemDTO
from src.common.exceptions.custom_exceptions import (
    DatabaseError,
    InsufficientStockError,
    InvalidEnumValueError,
    InvalidQuantityError,
    ItemDiscontinuedError,
    ItemNotFoundError,
    ValidationFailedError,
)
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus

# Fixtures (mock_item_repository, item_service, in_memory_item_service, sample_item,
# sample_candidate) are available from conftest.py


def _fields(item: Item) -> dict:
    return dataclasses.asdict(item)


class TestCreate:
    def test_create_assigns_id_and_defaults(self, item_service, mock_item_repository, sample_candidate) -> None:
        created = item_service.create(sample_candidate)

        mock_item_repository.insert_item.assert_called_once()
        inserted = mock_item_repository.insert_item.call_args[0][0]
        assert str(uuid.UUID(inserted.id)) == inserted.id
        assert inserted.status is ItemStatus.ACTIVE
        assert inserted.version == 0
        assert inserted.created_at is not None
        assert inserted.created_at == inserted.updated_at
        assert created is inserted

    def test_create_does_not_touch_the_candidate(self, item_service, sample_candidate) -> None:
        item_service.create(sample_candidate)

        assert sample_candidate.id is None
        assert sample_candidate.status is None

    def test_create_ignores_caller_supplied_id(self, item_service, sample_candidate) -> None:
        created = item_service.create(replace(sample_candidate, id="chosen-by-caller"))

        assert created.id != "chosen-by-caller"

    @pytest.mark.parametrize(
        "changes",
        [{"price": Decimal("0")}, {"price": Decimal("-5")}, {"stock": -1}, {"name": " "}, {"market": "Germany"}],
    )
    def test_create_rejects_invalid_candidates(
        self, item_service, mock_item_repository, sample_candidate, changes
    ) -> None:
        with pytest.raises(ValidationFailedError):
            item_service.create(replace(sample_candidate, **changes))

        mock_item_repository.insert_item.assert_not_called()

    def test_create_propagates_storage_failures(self, item_service, mock_item_repository, sample_candidate) -> None:
        mock_item_repository.insert_item.side_effect = DatabaseError("insert failed")

        with pytest.raises(DatabaseError):
            item_service.create(sample_candidate)

    def test_create_then_find_returns_same_fields(self, in_memory_item_service, sample_candidate) -> None:
        created = in_memory_item_service.create(sample_candidate)
        found = in_memory_item_service.find_by_id(created.id)

        assert _fields(found) == _fields(created)
        expected = _fields(sample_candidate)
        for key in ("name", "description", "market", "price", "stock"):
            assert _fields(found)[key] == expected[key]


class TestFindAndDelete:
    def test_find_by_id_returns_item(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        assert item_service.find_by_id(sample_item.id) is sample_item
        mock_item_repository.get_item_by_id.assert_called_once_with(sample_item.id)

    def test_find_by_id_raises_not_found(self, item_service, mock_item_repository) -> None:
        mock_item_repository.get_item_by_id.return_value = None

        with pytest.raises(ItemNotFoundError) as exc_info:
            item_service.find_by_id("missing")

        assert exc_info.value.item_id == "missing"

    def test_delete_by_id_removes_item(self, item_service, mock_item_repository) -> None:
        mock_item_repository.delete_item_by_id.return_value = True

        item_service.delete_by_id("some-id")

        mock_item_repository.delete_item_by_id.assert_called_once_with("some-id")

    def test_delete_missing_item_raises_not_found(self, item_service, mock_item_repository) -> None:
        mock_item_repository.delete_item_by_id.return_value = False

        with pytest.raises(ItemNotFoundError):
            item_service.delete_by_id("missing")

    def test_delete_then_find_raises_not_found(self, in_memory_item_service, sample_candidate) -> None:
        created = in_memory_item_service.create(sample_candidate)

        in_memory_item_service.delete_by_id(created.id)

        with pytest.raises(ItemNotFoundError):
            in_memory_item_service.find_by_id(created.id)


class TestUpdate:
    def test_update_merges_only_provided_fields(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        updated = item_service.update(sample_item.id, UpdateItemDTO(name="Trail Runner 43", status="INACTIVE"))

        written = mock_item_repository.replace_item.call_args[0][0]
        assert written.id == sample_item.id
        assert written.version == sample_item.version
        assert written.name == "Trail Runner 43"
        assert written.status is ItemStatus.INACTIVE
        assert written.description == sample_item.description
        assert written.market == sample_item.market
        assert written.price == sample_item.price
        assert written.stock == sample_item.stock
        assert updated.version == sample_item.version + 1

    def test_update_never_changes_id(self, in_memory_item_service, sample_candidate) -> None:
        created = in_memory_item_service.create(sample_candidate)

        updated = in_memory_item_service.update(
            created.id, UpdateItemDTO(name="Renamed", market="ES", price=Decimal("12.00"), stock=3)
        )

        assert updated.id == created.id
        assert in_memory_item_service.find_by_id(created.id).name == "Renamed"

    def test_update_missing_item_raises_not_found(self, item_service, mock_item_repository) -> None:
        mock_item_repository.get_item_by_id.return_value = None

        with pytest.raises(ItemNotFoundError):
            item_service.update("missing", UpdateItemDTO(name="x"))

        mock_item_repository.replace_item.assert_not_called()

    def test_update_rejects_unknown_status(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        with pytest.raises(InvalidEnumValueError):
            item_service.update(sample_item.id, UpdateItemDTO(status="SOLD_OUT"))

        mock_item_repository.replace_item.assert_not_called()

    def test_update_rejects_invalid_price(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        with pytest.raises(ValidationFailedError):
            item_service.update(sample_item.id, UpdateItemDTO(price=Decimal("0")))

        mock_item_repository.replace_item.assert_not_called()


class TestRestockAndDispatch:
    def test_restock_adds_to_stock(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        updated = item_service.restock(sample_item.id, 5)

        assert updated.stock == 15
        written = mock_item_repository.replace_item.call_args[0][0]
        assert written.stock == 15
        assert written.name == sample_item.name
        assert written.price == sample_item.price

    def test_dispatch_subtracts_from_stock(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        assert item_service.dispatch(sample_item.id, 3).stock == 7

    def test_dispatch_more_than_stock_is_rejected(self, item_service, mock_item_repository, sample_item) -> None:
        mock_item_repository.get_item_by_id.return_value = sample_item

        with pytest.raises(InsufficientStockError):
            item_service.dispatch(sample_item.id, 11)

        mock_item_repository.replace_item.assert_not_called()

    @pytest.mark.parametrize("quantity", [0, -4])
    def test_non_positive_quantities_are_rejected_before_reading(
        self, item_service, mock_item_repository, quantity
    ) -> None:
        with pytest.raises(InvalidQuantityError):
            item_service.restock("some-id", quantity)
        with pytest.raises(InvalidQuantityError):
            item_service.dispatch("some-id", quantity)

        mock_item_repository.get_item_by_id.assert_not_called()
        mock_item_repository.replace_item.assert_not_called()

    def test_restock_missing_item_raises_not_found(self, item_service, mock_item_repository) -> None:
        mock_item_repository.get_item_by_id.return_value = None

        with pytest.raises(ItemNotFoundError):
            item_service.restock("missing", 1)

    def test_dispatch_missing_item_raises_not_found(self, item_service, mock_item_repository) -> None:
        mock_item_repository.get_item_by_id.return_value = None

        with pytest.raises(ItemNotFoundError):
            item_service.dispatch("missing", 1)

    def test_stock_walkthrough(self, in_memory_item_service, sample_candidate) -> None:
        """10 units, restock 5, a too-large dispatch fails, then the rest is dispatched."""
        item = in_memory_item_service.create(replace(sample_candidate, stock=10))

        assert in_memory_item_service.restock(item.id, 5).stock == 15

        with pytest.raises(InsufficientStockError):
            in_memory_item_service.dispatch(item.id, 20)
        assert in_memory_item_service.find_by_id(item.id).stock == 15

        assert in_memory_item_service.dispatch(item.id, 15).stock == 0
        assert in_memory_item_service.find_by_id(item.id).stock == 0

    def test_rejected_quantity_leaves_state_unchanged(self, in_memory_item_service, sample_candidate) -> None:
        item = in_memory_item_service.create(sample_candidate)

        with pytest.raises(InvalidQuantityError):
            in_memory_item_service.dispatch(item.id, 0)
        with pytest.raises(InvalidQuantityError):
            in_memory_item_service.restock(item.id, -2)

        stored = in_memory_item_service.find_by_id(item.id)
        assert stored.stock == sample_candidate.stock
        assert stored.version == 0


class TestDiscontinue:
    def test_discontinue_blocks_further_mutations(self, in_memory_item_service, sample_candidate) -> None:
        item = in_memory_item_service.create(sample_candidate)

        discontinued = in_memory_item_service.discontinue(item.id)

        assert discontinued.status is ItemStatus.DISCONTINUED
        with pytest.raises(ItemDiscontinuedError):
            in_memory_item_service.restock(item.id, 1)
        with pytest.raises(ItemDiscontinuedError):
            in_memory_item_service.dispatch(item.id, 1)
        with pytest.raises(ItemDiscontinuedError):
            in_memory_item_service.update(item.id, UpdateItemDTO(status="ACTIVE"))

    def test_discontinue_twice_is_a_no_op(self, in_memory_item_service, sample_candidate) -> None:
        item = in_memory_item_service.create(sample_candidate)
        first = in_memory_item_service.discontinue(item.id)

        second = in_memory_item_service.discontinue(item.id)

        assert second.version == first.version
        assert second.status is ItemStatus.DISCONTINUED

    def test_discontinued_item_can_still_be_deleted(self, in_memory_item_service, sample_candidate) -> None:
        item = in_memory_item_service.create(sample_candidate)
        in_memory_item_service.discontinue(item.id)

        in_memory_item_service.delete_by_id(item.id)

        with pytest.raises(ItemNotFoundError):
            in_memory_item_service.find_by_id(item.id)
