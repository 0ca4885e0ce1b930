"""
Contract: Document Repository

Persistence of registered documents and of the per-year
sequence counters used to issue numbers and identifiers.
"""

from abc import ABC, abstractmethod

from cndes.core.entities.document import Document


class IDocumentRepository(ABC):
    """
    Port: Document Repository

    Implementation can be SQLAlchemy (SQLite/PostgreSQL) or in-memory.
    """

    @abstractmethod
    def list_documents(self, doc_type: str | None = None) -> list[Document]:
        """Documents (optionally of one type), most recently registered first."""
        ...

    @abstractmethod
    def get(self, doc_id: str) -> Document | None:
        ...

    @abstractmethod
    def add(self, document: Document) -> Document:
        """
        Inserts a new document.

        Raises:
            DuplicateEntryError: the identifier is already taken.
        """
        ...

    @abstractmethod
    def update(self, doc_id: str, document: Document) -> int:
        """Replaces every mutable field. Returns the number of rows changed."""
        ...

    @abstractmethod
    def delete(self, doc_id: str) -> int:
        """Returns the number of rows deleted (0 for unknown ids)."""
        ...

    @abstractmethod
    def list_ids(self) -> list[str]:
        ...

    @abstractmethod
    def current_sequence(self, kind: str, year: int) -> int | None:
        """Last value issued by the counter, None if it was never used."""
        ...

    @abstractmethod
    def reserve_sequence(self, kind: str, year: int, floor: int = 0) -> int:
        """
        Atomically reserves the next value of a (kind, year) counter.

        Args:
            kind: Counter key, e.g. "SAL", "INT", "REG".
            year: Calendar year the counter belongs to.
            floor: Highest value already present in stored data;
                the reserved value is always greater than it.

        Returns:
            The reserved value, unique for (kind, year).

        Raises:
            SequenceConflictError: lost every optimistic attempt.
        """
        ...

    @abstractmethod
    def is_url_referenced(self, url: str, exclude_id: str | None = None) -> bool:
        """True if any document other than exclude_id lists an attachment at url."""
        ...
