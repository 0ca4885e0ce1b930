from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy.orm import Query

from cndes.core.entities.document import Document
from cndes.core.exceptions import SequenceConflictError
from cndes.core.use_cases.assign_doc_number import AssignDocNumberUseCase
from cndes.infrastructure.db.repository import DocumentRepository
from cndes.infrastructure.db.seed import load_demo_documents

TODAY = date(2026, 3, 2)


@pytest.fixture
def repo(database):
    return DocumentRepository()


@pytest.fixture
def numbering(repo):
    return AssignDocNumberUseCase(repo, today=lambda: TODAY)


def _store(repo, doc_id, doc_type, number):
    repo.add(Document(
        id=doc_id,
        type=doc_type,
        doc_number=number,
        registration_date=TODAY,
        origin="Secretaría General",
        destination="Pleno",
        summary="Circular",
    ))


def test_counter_starts_at_floor_plus_one(repo):
    assert repo.current_sequence("SAL", 2026) is None
    assert repo.reserve_sequence("SAL", 2026) == 1
    assert repo.reserve_sequence("SAL", 2026) == 2
    assert repo.current_sequence("SAL", 2026) == 2


def test_floor_lifts_the_counter(repo):
    assert repo.reserve_sequence("INT", 2026, floor=7) == 8
    assert repo.reserve_sequence("INT", 2026, floor=20) == 21
    assert repo.reserve_sequence("INT", 2026, floor=3) == 22


def test_counters_are_independent_per_kind_and_year(repo):
    assert repo.reserve_sequence("SAL", 2026) == 1
    assert repo.reserve_sequence("INT", 2026) == 1
    assert repo.reserve_sequence("SAL", 2027) == 1
    assert repo.reserve_sequence("SAL", 2026) == 2


def test_concurrent_reservations_never_repeat(database):
    repo = DocumentRepository(max_attempts=200)

    def reserve_many(_):
        return [repo.reserve_sequence("SAL", 2026) for _ in range(10)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        values = [v for batch in pool.map(reserve_many, range(4)) for v in batch]

    assert sorted(values) == list(range(1, 41))


def test_exhausted_attempts_raise_conflict(database, monkeypatch):
    repo = DocumentRepository(max_attempts=2)
    repo.reserve_sequence("SAL", 2026)

    # every conditional update loses the race
    monkeypatch.setattr(Query, "update", lambda self, *a, **kw: 0)

    with pytest.raises(SequenceConflictError):
        repo.reserve_sequence("SAL", 2026)


def test_preview_does_not_reserve(numbering, repo):
    assert numbering.preview("Salida") == "CNDES/SAL/2026/001"
    assert numbering.preview("Salida") == "CNDES/SAL/2026/001"
    assert repo.current_sequence("SAL", 2026) is None


def test_legacy_numbers_set_the_floor(numbering, repo):
    _store(repo, "2026-001", "Salida", "CNDES/SAL/2026/007")
    _store(repo, "2026-002", "Salida", "SAL-2026-050")

    assert numbering.preview("Salida") == "CNDES/SAL/2026/008"
    assert numbering.reserve("Salida") == "CNDES/SAL/2026/008"
    assert numbering.preview("Salida") == "CNDES/SAL/2026/009"
    assert numbering.reserve("Interno") == "CNDES/INT/2026/001"


def test_reserved_numbers_survive_deletes(numbering, repo):
    first = numbering.reserve("Salida")
    _store(repo, "2026-001", "Salida", first)
    repo.delete("2026-001")

    assert numbering.reserve("Salida") == "CNDES/SAL/2026/002"


def test_registry_ids_continue_after_demo_data(numbering, repo):
    assert load_demo_documents(repo) == 10
    assert numbering.reserve_registry_id() == "2026-011"
    assert numbering.reserve_registry_id() == "2026-012"


def test_demo_documents_load_only_into_an_empty_registry(repo):
    assert load_demo_documents(repo) == 10
    assert load_demo_documents(repo) == 0
    assert len(repo.list_ids()) == 10
