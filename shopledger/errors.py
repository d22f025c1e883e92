class LedgerError(Exception):
    """Base class for rejected ledger actions. The ledger is left unchanged."""


class ValidationError(LedgerError):
    """Required input is missing or malformed."""


class NotFoundError(LedgerError):
    """A referenced product id does not resolve."""

    def __init__(self, kind: str, item_id):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found: {item_id}")


class InsufficientStockError(LedgerError):
    """The requested sale quantity exceeds what is on the shelf."""

    def __init__(self, product_name: str, requested: int, available: int):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(f"Only {available} units of {product_name} available")
