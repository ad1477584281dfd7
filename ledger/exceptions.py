"""Domain-specific exceptions for the ledger core."""

class ValidationError(ValueError):
    """Raised when caller-supplied input or filter criteria are unusable."""


class PersistenceError(IOError):
    """Raised when the storage adapter cannot read or write the ledger blob."""
