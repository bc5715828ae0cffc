# src/item_domain/application/item_query_service.py
"""Application service for filtered, paginated item listings."""

import logging
from typing import Optional

from src.common.config.settings import settings
from src.common.dtos.item_dtos import (
    SORTABLE_ITEM_FIELDS,
    ItemFilterDTO,
    ItemPageDTO,
    PageRequestDTO,
    SortDirection,
)
from src.common.exceptions.custom_exceptions import ValidationFailedError
from src.item_domain.domain.entities.item_status import ItemStatus
from src.item_domain.domain.repositories.item_repository import IItemRepository

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


class ItemQueryApplicationService:
    """Turns raw listing parameters into a filter and page request and delegates to the repository."""

    def __init__(self, item_repo: IItemRepository) -> None:
        self.item_repo = item_repo

    def build_filter(
        self, name: Optional[str] = None, market: Optional[str] = None, status: Optional[str] = None
    ) -> ItemFilterDTO:
        """Empty or missing values leave the corresponding field unfiltered."""
        market = _blank_to_none(market)
        return ItemFilterDTO(
            name=_blank_to_none(name),
            market=market.upper() if market else None,
            status=ItemStatus.from_name(status),
        )

    def build_page_request(
        self, page: int = 0, size: Optional[int] = None, sort_by: str = "id", direction: Optional[str] = "ASC"
    ) -> PageRequestDTO:
        if size is None:
            size = settings.ITEM_DEFAULT_PAGE_SIZE
        if page < 0:
            raise ValidationFailedError("page", "must be zero or greater")
        if size < 1:
            raise ValidationFailedError("size", "must be one or greater")
        sort_by = _blank_to_none(sort_by) or "id"
        if sort_by not in SORTABLE_ITEM_FIELDS:
            raise ValidationFailedError("sortBy", f"must be one of {', '.join(SORTABLE_ITEM_FIELDS)}")
        return PageRequestDTO(page=page, size=size, sort_by=sort_by, direction=SortDirection.from_name(direction))

    def find_items(
        self,
        name: Optional[str] = None,
        market: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 0,
        size: Optional[int] = None,
        sort_by: str = "id",
        direction: Optional[str] = "ASC",
    ) -> ItemPageDTO:
        """Retrieves one page of items matching the optional name, market and status filters."""
        item_filter = self.build_filter(name=name, market=market, status=status)
        page_request = self.build_page_request(page=page, size=size, sort_by=sort_by, direction=direction)

        logger.debug(f"Listing items with {item_filter} and {page_request}")
        item_page = self.item_repo.get_items_page(item_filter, page_request)
        logger.info(
            f"Found {item_page.number_of_elements} items on page {item_page.page} "
            f"({item_page.total_elements} in total)"
        )
        return item_page
