"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class ItemNotFoundError(ApplicationError):
    """Raised when no item exists for the requested id."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id


class InvalidQuantityError(ApplicationError):
    """Raised when a restock or dispatch quantity is not a positive integer."""

    def __init__(self, quantity) -> None:
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class InsufficientStockError(ApplicationError):
    """Raised when a dispatch asks for more units than the item holds."""

    def __init__(self, item_id: str, requested: int, available: int) -> None:
        super().__init__(f"Cannot dispatch {requested} units of item {item_id}: only {available} in stock")
        self.item_id = item_id
        self.requested = requested
        self.available = available


class InvalidEnumValueError(ApplicationError):
    """Raised when a string does not name a member of the expected enumeration."""

    def __init__(self, enum_name: str, value: str) -> None:
        super().__init__(f"Invalid {enum_name} value: {value!r}")
        self.enum_name = enum_name
        self.value = value


class ValidationFailedError(ApplicationError):
    """Raised when a field violates an item constraint."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Validation failed for '{field}': {message}")
        self.field = field


class ItemDiscontinuedError(ApplicationError):
    """Raised when mutating an item that has reached the terminal DISCONTINUED status."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item {item_id} is discontinued and can no longer be modified")
        self.item_id = item_id


class StaleItemError(ApplicationError):
    """Raised by a repository when a conditional write finds a newer version stored."""

    def __init__(self, item_id: str, expected_version: int) -> None:
        super().__init__(f"Item {item_id} was modified concurrently (expected version {expected_version})")
        self.item_id = item_id
        self.expected_version = expected_version


class ConcurrentModificationError(ApplicationError):
    """Raised when a read-modify-write keeps losing the race against other writers."""

    def __init__(self, item_id: str, attempts: int) -> None:
        super().__init__(f"Item {item_id} could not be updated after {attempts} attempts due to concurrent writes")
        self.item_id = item_id
        self.attempts = attempts
