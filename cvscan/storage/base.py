from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Contract for durable storage of uploaded document bytes."""

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``path``.

        Raises:
            StoreError: if the object cannot be written.
        """

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at ``path``. Deleting a missing object is not an error.

        Raises:
            StoreError: if the object exists but cannot be removed.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if an object is stored under ``path``."""

    @abstractmethod
    def load(self, path: str) -> bytes:
        """Read back the bytes stored under ``path``.

        Raises:
            StoreError: if the object is missing or unreadable.
        """
