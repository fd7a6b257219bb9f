"""Interface shared by the relational backends that hold upload records."""
from abc import ABC, abstractmethod
from typing import Any, Dict

UPLOADS_TABLE = "uploads"


class UploadsDatabase(ABC):
    """
    One database session scoped to a single request.

    ``connect`` is called once, ``insert_upload`` at most once and ``close``
    exactly once, even when ``connect`` failed. ``close`` must never raise.
    """

    @abstractmethod
    def connect(self) -> None:
        ...

    @abstractmethod
    def insert_upload(self, filename: str, filepath: str) -> Dict[str, Any]:
        """Insert one upload record and return the stored row."""

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def init_schema(self) -> None:
        """Create the uploads table if it does not exist."""
