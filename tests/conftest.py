# tests/conftest.py
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
import pytz

from src.common.config.settings import settings
from src.item_domain.application.item_query_service import ItemQueryApplicationService
from src.item_domain.application.item_service import ItemApplicationService
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus
from src.item_domain.infrastructure.persistence.in_memory_item_repository import InMemoryItemRepository
from src.item_domain.infrastructure.persistence.mysql_item_repository import MySQLItemRepository


@pytest.fixture(autouse=True)
def mock_settings_item_defaults(mocker) -> None:
    """Pins the listing and retry settings so tests do not depend on the environment."""
    mocker.patch.object(settings, "ITEM_DEFAULT_PAGE_SIZE", 20)
    mocker.patch.object(settings, "STOCK_WRITE_MAX_RETRIES", 3)


@pytest.fixture
def mock_item_repository() -> Mock:
    """Mock for MySQLItemRepository whose replace_item behaves like a successful conditional write."""
    repo = Mock(spec=MySQLItemRepository)
    repo.insert_item.side_effect = lambda item: item
    repo.replace_item.side_effect = lambda item: replace(item, version=item.version + 1)
    return repo


@pytest.fixture
def item_service(mock_item_repository) -> ItemApplicationService:
    """Instance of ItemApplicationService with a mocked repository."""
    return ItemApplicationService(item_repo=mock_item_repository)


@pytest.fixture
def item_query_service(mock_item_repository) -> ItemQueryApplicationService:
    """Instance of ItemQueryApplicationService with a mocked repository."""
    return ItemQueryApplicationService(item_repo=mock_item_repository)


@pytest.fixture
def in_memory_repository() -> InMemoryItemRepository:
    return InMemoryItemRepository()


@pytest.fixture
def in_memory_item_service(in_memory_repository) -> ItemApplicationService:
    """ItemApplicationService backed by the real in-memory repository."""
    return ItemApplicationService(item_repo=in_memory_repository)


@pytest.fixture
def sample_item() -> Item:
    """A stored, active item with ten units in stock."""
    return Item(
        id="0b6f4f0e-5d55-4c4f-9a57-0d2c3c1b7a11",
        name="Trail Runner 42",
        description="Lightweight trail running shoe",
        market="DE",
        price=Decimal("89.90"),
        stock=10,
        status=ItemStatus.ACTIVE,
        version=4,
        created_at=datetime(2024, 1, 1, 10, 0, 0, tzinfo=pytz.utc),
        updated_at=datetime(2024, 1, 2, 10, 0, 0, tzinfo=pytz.utc),
    )


@pytest.fixture
def sample_candidate() -> Item:
    """An item as submitted for creation: no id, no status."""
    return Item(name="Canvas Sneaker", description="Low-top sneaker", market="PT", price=Decimal("49.00"), stock=7)
