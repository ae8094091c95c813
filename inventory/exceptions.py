class InventoryError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    status_code = 404


class InsufficientStockError(InventoryError):
    status_code = 400

    def __init__(self, available: int, requested: int):
        super().__init__(f"Insufficient stock. Available: {available}")
        self.available = available
        self.requested = requested


class DuplicateKeyError(InventoryError):
    status_code = 409
