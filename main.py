"""Main application entry point for the Item Storage service."""

import logging
from decimal import Decimal

from src.common.exceptions.custom_exceptions import (
    ApplicationError,
    DatabaseError,
    InsufficientStockError,
)
from src.common.logger_config import setup_logging
from src.item_domain.application.item_query_service import ItemQueryApplicationService
from src.item_domain.application.item_service import ItemApplicationService
from src.item_domain.domain.entities.item import Item
from src.item_domain.infrastructure.persistence.mysql_item_repository import MySQLItemRepository

logger = logging.getLogger(__name__)


def setup_item_dependencies() -> tuple[ItemApplicationService, ItemQueryApplicationService]:
    """Initializes and wires up Item domain dependencies."""
    item_repository = MySQLItemRepository()
    item_service = ItemApplicationService(item_repo=item_repository)
    item_query_service = ItemQueryApplicationService(item_repo=item_repository)
    return item_service, item_query_service


def create_item_db_tables() -> None:
    """Creates tables for the Item domain."""
    item_repo = MySQLItemRepository()
    try:
        item_repo.create_tables()
    except DatabaseError as e:
        logger.error(f"Error creating Item database tables: {e}")
        raise
    finally:
        # Ensure connection is closed if not managed by a connection pool
        del item_repo


def run_stock_lifecycle_walkthrough() -> None:
    """Creates an item and walks it through restock and dispatch, including a rejected dispatch."""
    create_item_db_tables()
    item_service, item_query_service = setup_item_dependencies()

    item = item_service.create(Item(name="Trail Runner 42", market="DE", price=Decimal("89.90"), stock=10))
    logger.info(f"Created [bold]{item.name}[/bold] with id {item.id}, stock {item.stock}")

    item = item_service.restock(item.id, 5)
    logger.info(f"After restock: stock {item.stock}")

    try:
        item_service.dispatch(item.id, 20)
    except InsufficientStockError as e:
        logger.warning(f"Dispatch rejected as expected: {e}")

    item = item_service.dispatch(item.id, 15)
    logger.info(f"After dispatch: stock {item.stock}")

    page = item_query_service.find_items(market="DE", status="ACTIVE", size=5)
    logger.info(f"Active DE items: {page.total_elements} across {page.total_pages} page(s)")
    for listed in page.items:
        logger.info(f"  {listed.id}  {listed.name}  {listed.price}  stock={listed.stock}  {listed.status.value}")


if __name__ == "__main__":
    setup_logging()
    logger.info("Item Storage service started.")

    try:
        run_stock_lifecycle_walkthrough()
    except ApplicationError as e:
        logger.error(f"An error occurred during the stock lifecycle walkthrough: {e}")
