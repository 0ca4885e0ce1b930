"""
Contract: Catalog Repository

Append-only name lists (departments, external entities)
used as origin/destination values.
"""

from abc import ABC, abstractmethod


class ICatalogRepository(ABC):

    @abstractmethod
    def list_names(self) -> list[str]:
        """Names in alphabetical order."""
        ...

    @abstractmethod
    def add(self, name: str) -> str:
        """
        Appends a name.

        Raises:
            DuplicateEntryError: the name already exists.
        """
        ...
