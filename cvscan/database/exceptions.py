class PersistenceError(Exception):
    """Raised when the scan record store rejects an insert, update or delete."""


class ScanNotFoundError(PersistenceError):
    """Raised when no scan row matches (or is still eligible for) an operation."""
