from datetime import date

import pytest

from cndes.core.entities.document import DocType, Document
from cndes.core.use_cases.assign_doc_number import (
    derive_next_doc_number,
    format_doc_number,
    highest_registry_id,
    highest_sequence,
    parse_doc_number,
)


def _doc(doc_type, number):
    return Document(type=doc_type, doc_number=number, registration_date=date(2026, 1, 1))


def test_first_number_of_the_year_is_001():
    assert derive_next_doc_number([], DocType.SALIDA, 2026) == "CNDES/SAL/2026/001"
    assert derive_next_doc_number([], "Interno", 2026) == "CNDES/INT/2026/001"


def test_next_number_follows_highest_sequence_of_same_type_and_year():
    docs = [
        _doc("Salida", "CNDES/SAL/2026/004"),
        _doc("Salida", "CNDES/SAL/2026/012"),
        _doc("Salida", "CNDES/SAL/2025/300"),
        _doc("Interno", "CNDES/INT/2026/040"),
    ]
    assert derive_next_doc_number(docs, DocType.SALIDA, 2026) == "CNDES/SAL/2026/013"
    assert derive_next_doc_number(docs, DocType.INTERNO, 2026) == "CNDES/INT/2026/041"


def test_year_rollover_restarts_sequence():
    docs = [_doc("Salida", "CNDES/SAL/2025/087")]
    assert derive_next_doc_number(docs, DocType.SALIDA, 2026) == "CNDES/SAL/2026/001"


@pytest.mark.parametrize("number", [
    "SAL-2026-001",
    "CNDES/SAL/2026",
    "CNDES/SAL/2026/001/extra",
    "CNDES/SAL/20x6/900",
    "CNDES/SAL/2026/abc",
    "",
])
def test_malformed_numbers_are_ignored(number):
    docs = [_doc("Salida", number), _doc("Salida", "CNDES/SAL/2026/002")]
    assert highest_sequence(docs, DocType.SALIDA, 2026) == 2


def test_sequence_past_999_is_not_truncated():
    docs = [_doc("Salida", "CNDES/SAL/2026/999")]
    assert derive_next_doc_number(docs, DocType.SALIDA, 2026) == "CNDES/SAL/2026/1000"


def test_entrada_has_no_derived_number():
    with pytest.raises(ValueError):
        derive_next_doc_number([], DocType.ENTRADA, 2026)


def test_parse_and_format():
    parsed = parse_doc_number("CNDES/INT/2026/007")
    assert (parsed.prefix, parsed.kind, parsed.year, parsed.sequence) == ("CNDES", "INT", 2026, 7)
    assert format_doc_number(DocType.INTERNO, 2026, 7, prefix="CNDES") == "CNDES/INT/2026/007"
    assert parse_doc_number(None) is None


def test_highest_registry_id_only_counts_the_year():
    ids = ["2026-001", "2026-010", "2025-099", "legacy", "2026-x"]
    assert highest_registry_id(ids, 2026) == 10
    assert highest_registry_id(ids, 2027) == 0
