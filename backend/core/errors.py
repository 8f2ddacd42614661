"""
core/errors.py — Domain error taxonomy.

Services raise these; core.app maps them to HTTP responses of the form
{"detail": message}. Row-level failures inside imports and batches are
caught and tallied by the caller instead of propagating.
"""


class InventoryError(Exception):
    """Base class. Subclasses pin the HTTP status the API answers with."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Missing or malformed field on a request or row."""
    status_code = 400


class InUseError(ValidationError):
    """A category value is still referenced by inventory records."""


class TransportError(InventoryError):
    """Request body could not be decoded into the expected shape."""
    status_code = 400


class NotFoundError(InventoryError):
    """Id or owner absent, or owned by someone else."""
    status_code = 404


class ConflictError(InventoryError):
    status_code = 409
