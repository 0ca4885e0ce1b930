"""
Use Case: Assign Document Number

Salida and Interno documents receive a system number
CNDES/{SAL|INT}/{year}/{NNN}; Entrada numbers are free text.

The deriver (pure functions below) computes the next number from the
stored documents. Issuing goes through the repository's atomic counter,
seeded and lifted by the deriver's floor, so two concurrent submissions
can never receive the same number.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from cndes.core.entities.document import DocType, Document
from cndes.core.interfaces.document_repository import IDocumentRepository

DEFAULT_PREFIX = "CNDES"
REGISTRY_ID_KIND = "REG"

_REGISTRY_ID = re.compile(r"^(\d{4})-(\d+)$")


@dataclass(frozen=True)
class ParsedDocNumber:
    prefix: str
    kind: str
    year: int
    sequence: int


def parse_doc_number(value: str | None) -> ParsedDocNumber | None:
    """Parses PREFIX/KIND/YEAR/SEQ. Anything else returns None."""
    if not value:
        return None
    parts = value.split("/")
    if len(parts) != 4:
        return None
    prefix, kind, year, seq = (p.strip() for p in parts)
    if not (year.isdigit() and seq.isdigit()):
        return None
    return ParsedDocNumber(prefix=prefix, kind=kind, year=int(year), sequence=int(seq))


def format_doc_number(doc_type: DocType, year: int, sequence: int, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}/{doc_type.kind_code}/{year}/{sequence:03d}"


def highest_sequence(documents: Iterable[Document], doc_type: DocType, year: int) -> int:
    """Max SEQ among well-formed numbers of doc_type in year (0 if none)."""
    best = 0
    for doc in documents:
        if doc.type != doc_type.value:
            continue
        parsed = parse_doc_number(doc.doc_number)
        if parsed is None or parsed.year != year:
            continue
        best = max(best, parsed.sequence)
    return best


def derive_next_doc_number(
    documents: Iterable[Document],
    doc_type: DocType | str,
    year: int,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """
    Next number for a system-numbered type, derived from existing documents.

    Raises:
        ValueError: doc_type is not Salida or Interno.
    """
    doc_type = DocType(doc_type)
    if not doc_type.is_auto_numbered:
        raise ValueError(f"{doc_type.value} documents are not numbered by the system")
    return format_doc_number(doc_type, year, highest_sequence(documents, doc_type, year) + 1, prefix)


def format_registry_id(year: int, sequence: int) -> str:
    return f"{year}-{sequence:03d}"


def highest_registry_id(ids: Iterable[str], year: int) -> int:
    best = 0
    for doc_id in ids:
        match = _REGISTRY_ID.match(doc_id or "")
        if match and int(match.group(1)) == year:
            best = max(best, int(match.group(2)))
    return best


class AssignDocNumberUseCase:
    """Previews and reserves document numbers and registry identifiers."""

    def __init__(
        self,
        repository: IDocumentRepository,
        prefix: str = DEFAULT_PREFIX,
        today: Callable[[], date] = date.today,
    ):
        self._repo = repository
        self._prefix = prefix
        self._today = today

    def preview(self, doc_type: DocType | str) -> str:
        """Number the next submission would get. Reserves nothing."""
        doc_type = DocType(doc_type)
        year = self._today().year
        documents = self._repo.list_documents(doc_type.value)
        derived = derive_next_doc_number(documents, doc_type, year, self._prefix)
        counter = self._repo.current_sequence(doc_type.kind_code, year)
        if counter is None or counter < highest_sequence(documents, doc_type, year):
            return derived
        return format_doc_number(doc_type, year, counter + 1, self._prefix)

    def reserve(self, doc_type: DocType | str) -> str:
        """Issues a number that no other submission will receive."""
        doc_type = DocType(doc_type)
        if not doc_type.is_auto_numbered:
            raise ValueError(f"{doc_type.value} documents are not numbered by the system")
        year = self._today().year
        floor = highest_sequence(self._repo.list_documents(doc_type.value), doc_type, year)
        sequence = self._repo.reserve_sequence(doc_type.kind_code, year, floor)
        return format_doc_number(doc_type, year, sequence, self._prefix)

    def reserve_registry_id(self) -> str:
        """Issues the next registry identifier ({year}-{NNN})."""
        year = self._today().year
        floor = highest_registry_id(self._repo.list_ids(), year)
        return format_registry_id(year, self._repo.reserve_sequence(REGISTRY_ID_KIND, year, floor))
