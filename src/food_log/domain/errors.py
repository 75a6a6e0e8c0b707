"""Error types raised by the food log core."""


class FoodLogError(Exception):
    """Base class for food log errors."""


class ValidationError(FoodLogError, ValueError):
    """Raised when user input is rejected before any store mutation."""


class StorageError(FoodLogError, RuntimeError):
    """Raised when the underlying store fails to read or write."""


class CatalogConflictError(StorageError):
    """Raised when a catalog insert violates the unique name constraint."""
