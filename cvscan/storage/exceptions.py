class StoreError(Exception):
    """Raised when the object store cannot write, read or delete an object."""


class InvalidObjectPathError(StoreError):
    """Raised when an object path is empty or escapes the bucket."""
