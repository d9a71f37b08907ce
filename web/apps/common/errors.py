"""Error taxonomy shared by every app.

Domain code raises these; the DRF exception handler in
``gateway.exceptions`` turns them into the JSON envelope with the
matching HTTP status. Each error carries a human-readable message that is
returned to the caller as-is.
"""


class StoreError(Exception):
    """Base class for failures surfaced to API callers.

    Attributes:
        message: Human-readable description returned in the envelope.
        status_code: HTTP status the failure maps to.
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StoreError):
    """Missing or malformed input."""

    status_code = 400


class NotFound(StoreError):
    """The referenced entity does not exist."""

    status_code = 404


class Conflict(StoreError):
    """Unique-key collision or an illegal state transition."""

    status_code = 409


class InsufficientStock(StoreError):
    """A line item asks for more units than are in stock.

    Attributes:
        product_id: Identifier of the offending product.
    """

    status_code = 409

    def __init__(self, product_id: int, product_name: str | None = None):
        label = product_name or f"#{product_id}"
        super().__init__(f"Insufficient stock for product {label}")
        self.product_id = product_id


class StorageError(StoreError):
    """The database rejected or failed a write."""

    status_code = 500


class UpstreamUnavailable(StoreError):
    """The payment provider could not be reached."""

    status_code = 503
