# src/item_domain/infrastructure/persistence/mysql_item_repository.py
"""MySQL implementation of the Item repository."""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Optional

import mysql.connector
from mysql.connector import Error

from src.common.config.settings import settings
from src.common.dtos.item_dtos import (
    SORTABLE_ITEM_FIELDS,
    ItemFilterDTO,
    ItemPageDTO,
    PageRequestDTO,
)
from src.common.exceptions.custom_exceptions import (
    DatabaseError,
    ItemNotFoundError,
    StaleItemError,
    ValidationFailedError,
)
from src.common.utils.date_utils import format_datetime_for_db, parse_datetime_from_db
from src.item_domain.domain.entities.item import Item
from src.item_domain.domain.entities.item_status import ItemStatus
from src.item_domain.domain.repositories.item_repository import IItemRepository

logger = logging.getLogger(__name__)

ITEM_COLUMNS = "id, name, description, market, price, stock, status, version, created_at, updated_at"


class MySQLItemRepository(IItemRepository):
    """MySQL implementation of the Item Repository."""

    def __init__(self) -> None:
        """Initializes the repository."""
        self._connection = None

    def _get_connection(self):
        """Establishes or returns an active MySQL database connection."""
        if not self._connection or not self._connection.is_connected():
            try:
                self._connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,
                    charset="utf8mb4",
                    use_unicode=True,
                )
            except Error as e:
                raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)
        return self._connection

    @staticmethod
    def _row_to_item(row: dict) -> Item:
        return Item(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            market=row["market"],
            price=Decimal(row["price"]),
            stock=int(row["stock"]),  # DECIMAL(65,0) comes back as Decimal
            status=ItemStatus(row["status"]),
            version=row["version"],
            created_at=parse_datetime_from_db(row["created_at"]),
            updated_at=parse_datetime_from_db(row["updated_at"]),
        )

    def create_tables(self) -> None:
        """Creates the items table with the 'iss_' prefix."""
        create_items_table_query = """
        CREATE TABLE IF NOT EXISTS iss_items (
            id CHAR(36) PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            description TEXT,
            market CHAR(2) NOT NULL,
            price DECIMAL(19, 4) NOT NULL,
            stock DECIMAL(65, 0) NOT NULL DEFAULT 0,
            status VARCHAR(20) NOT NULL,
            version INT UNSIGNED NOT NULL DEFAULT 0,
            created_at DATETIME,
            updated_at DATETIME,
            CONSTRAINT chk_iss_items_price CHECK (price > 0),
            CONSTRAINT chk_iss_items_stock CHECK (stock >= 0),
            INDEX idx_name (name),
            INDEX idx_market_status (market, status)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_items_table_query)
            conn.commit()
            logger.info("ISS items table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating ISS items table: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_item_by_id(self, item_id: str) -> Optional[Item]:
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {ITEM_COLUMNS} FROM iss_items WHERE id = %s LIMIT 1", (item_id,))
            row = cursor.fetchone()
            conn.rollback()  # End the read so the next one sees a fresh snapshot
            return self._row_to_item(row) if row else None
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error fetching item {item_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def insert_item(self, item: Item) -> Item:
        stored = replace(item, id=item.id or str(uuid.uuid4()), version=0)
        conn = self._get_connection()
        cursor = conn.cursor()

        insert_query = f"""
        INSERT INTO iss_items ({ITEM_COLUMNS})
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params = (
            stored.id,
            stored.name,
            stored.description,
            stored.market,
            stored.price,
            stored.stock,
            stored.status.value,
            stored.version,
            format_datetime_for_db(stored.created_at),
            format_datetime_for_db(stored.updated_at),
        )

        try:
            cursor.execute(insert_query, params)
            conn.commit()
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error inserting item {stored.id}: {e}", original_exception=e)
        finally:
            cursor.close()
        return stored

    def replace_item(self, item: Item) -> Item:
        """Writes the item only if the stored version still matches, bumping the version."""
        conn = self._get_connection()
        cursor = conn.cursor()

        update_query = """
        UPDATE iss_items
        SET name = %s, description = %s, market = %s, price = %s, stock = %s, status = %s,
            version = version + 1, updated_at = %s
        WHERE id = %s AND version = %s
        """
        params = (
            item.name,
            item.description,
            item.market,
            item.price,
            item.stock,
            item.status.value,
            format_datetime_for_db(item.updated_at),
            item.id,
            item.version,
        )

        try:
            cursor.execute(update_query, params)
            if cursor.rowcount == 0:
                conn.rollback()
                cursor.execute("SELECT version FROM iss_items WHERE id = %s", (item.id,))
                if cursor.fetchone() is None:
                    raise ItemNotFoundError(item.id)
                raise StaleItemError(item.id, item.version)
            conn.commit()
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error replacing item {item.id}: {e}", original_exception=e)
        finally:
            cursor.close()
        return replace(item, version=item.version + 1)

    def delete_item_by_id(self, item_id: str) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM iss_items WHERE id = %s", (item_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
            return deleted
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error deleting item {item_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_items_page(self, item_filter: ItemFilterDTO, page_request: PageRequestDTO) -> ItemPageDTO:
        """Retrieves one ordered page of items together with the total match count."""
        if page_request.sort_by not in SORTABLE_ITEM_FIELDS:
            raise ValidationFailedError("sortBy", f"unsupported sort field {page_request.sort_by}")

        conditions = []
        params: list = []
        if item_filter.name is not None:
            conditions.append("name = %s")
            params.append(item_filter.name)
        if item_filter.market is not None:
            conditions.append("market = %s")
            params.append(item_filter.market)
        if item_filter.status is not None:
            conditions.append("status = %s")
            params.append(item_filter.status.value)
        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        # Column name and direction are whitelisted above, so interpolation is safe here
        order_clause = f"ORDER BY {page_request.sort_by} {page_request.direction.value}, id ASC"

        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT COUNT(*) AS total FROM iss_items {where_clause}", tuple(params))
            total = cursor.fetchone()["total"]

            cursor.execute(
                f"SELECT {ITEM_COLUMNS} FROM iss_items {where_clause} {order_clause} LIMIT %s OFFSET %s",
                tuple(params) + (page_request.size, page_request.page * page_request.size),
            )
            items = [self._row_to_item(row) for row in cursor.fetchall()]
            conn.rollback()  # End the read so the next one sees a fresh snapshot
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error fetching items page {page_request.page}: {e}", original_exception=e)
        finally:
            cursor.close()

        return ItemPageDTO(items=items, page=page_request.page, size=page_request.size, total_elements=int(total))

    def __del__(self) -> None:
        """Closes the database connection when the object is destroyed."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
