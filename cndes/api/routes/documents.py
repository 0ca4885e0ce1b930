"""
Routes: /api/documents (correspondence CRUD, number preview).
"""

from fastapi import APIRouter, Depends, Query

from cndes.api.dependencies import Container, get_container, get_current_user
from cndes.api.schemas.requests import DocumentIn
from cndes.api.schemas.responses import (
    ChangesResponse,
    DocumentCreatedResponse,
    DocumentListResponse,
    DocumentOut,
    DocumentResponse,
    DocumentUpdatedResponse,
    NextNumber,
    NextNumberResponse,
)
from cndes.core.entities.document import DocType
from cndes.core.exceptions import InvalidInputError, NotFoundError

router = APIRouter(prefix="/documents", dependencies=[Depends(get_current_user)])


@router.get("", response_model=DocumentListResponse)
def list_documents(container: Container = Depends(get_container)):
    """All documents, newest registration first."""
    documents = container.documents.list_documents()
    return DocumentListResponse(data=[DocumentOut.from_entity(d) for d in documents])


@router.get("/next-number", response_model=NextNumberResponse)
def next_number(type: str = Query(...), container: Container = Depends(get_container)):
    """
    Number the next Salida/Interno submission would receive.

    Informational only: the number is reserved when the document is saved.
    """
    doc_type = DocType.parse(type)
    if doc_type is None or not doc_type.is_auto_numbered:
        raise InvalidInputError("type must be Salida or Interno")
    return NextNumberResponse(
        data=NextNumber(type=doc_type.value, doc_number=container.numbering.preview(doc_type)),
    )


@router.get("/{doc_id}", response_model=DocumentResponse)
def get_document(doc_id: str, container: Container = Depends(get_container)):
    document = container.documents.get(doc_id)
    if document is None:
        raise NotFoundError(f"Document {doc_id} not found")
    return DocumentResponse(data=DocumentOut.from_entity(document))


@router.post("", response_model=DocumentCreatedResponse)
def create_document(body: DocumentIn, container: Container = Depends(get_container)):
    """
    Register a document.

    - id: kept when sent, otherwise issued as {year}-{NNN} (e.g. 2026-007),
      counted per calendar year
    - Salida / Interno: the server issues CNDES/{SAL|INT}/{year}/{NNN}
    - Entrada: docNumber is stored as sent
    - Inline attachments are written to /uploads
    """
    stored = container.register_document.execute(body.to_entity())
    return DocumentCreatedResponse(data=DocumentOut.from_entity(stored), id=stored.id)


@router.put("/{doc_id}", response_model=DocumentUpdatedResponse)
def update_document(doc_id: str, body: DocumentIn, container: Container = Depends(get_container)):
    document, changes = container.update_document.execute(doc_id, body.to_entity())
    return DocumentUpdatedResponse(data=DocumentOut.from_entity(document), changes=changes)


@router.delete("/{doc_id}", response_model=ChangesResponse)
def delete_document(doc_id: str, container: Container = Depends(get_container)):
    changes = container.delete_document.execute(doc_id)
    return ChangesResponse(message="deleted", changes=changes)
