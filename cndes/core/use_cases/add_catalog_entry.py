"""
Use Case: Add Catalog Entry

Appends a department or external entity name.
"""

from cndes.core.exceptions import InvalidInputError
from cndes.core.interfaces.catalog_repository import ICatalogRepository

MAX_NAME_LENGTH = 255


def normalize_catalog_name(name: str | None) -> str:
    """Trims and collapses inner whitespace; rejects blank or oversized names."""
    normalized = " ".join((name or "").split())
    if not normalized:
        raise InvalidInputError("Name is required")
    if len(normalized) > MAX_NAME_LENGTH:
        raise InvalidInputError(f"Name must be at most {MAX_NAME_LENGTH} characters long")
    return normalized


class AddCatalogEntryUseCase:

    def __init__(self, repository: ICatalogRepository):
        self._repo = repository

    def execute(self, name: str | None) -> str:
        """
        Raises:
            InvalidInputError: blank name.
            DuplicateEntryError: name already in the catalog.
        """
        return self._repo.add(normalize_catalog_name(name))
