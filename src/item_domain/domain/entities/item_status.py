"""Item status enumeration."""

from enum import Enum
from typing import Optional

from src.common.exceptions.custom_exceptions import InvalidEnumValueError


class ItemStatus(str, Enum):
    """Lifecycle status of an item. DISCONTINUED is terminal and internal only."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCONTINUED = "DISCONTINUED"

    @classmethod
    def from_name(cls, value: Optional[str]) -> Optional["ItemStatus"]:
        """Case-insensitive lookup. Absent or blank values mean "no status"."""
        if value is None or not value.strip():
            return None
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise InvalidEnumValueError(cls.__name__, value)

    def is_settable(self) -> bool:
        """Whether callers may assign this status directly."""
        return self in SETTABLE_ITEM_STATUSES


SETTABLE_ITEM_STATUSES = frozenset({ItemStatus.ACTIVE, ItemStatus.INACTIVE})
