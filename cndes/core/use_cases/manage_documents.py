"""
Use Cases: Register / Update Document

Orchestrates: Rules -> Identifier -> Number -> Attachments -> Repository
Nothing is written (disk or database) until the rules pass.
"""

import logging
from dataclasses import replace

from cndes.core.entities.document import Document
from cndes.core.exceptions import DocumentValidationError, DuplicateEntryError
from cndes.core.interfaces.document_repository import IDocumentRepository
from cndes.core.interfaces.rules_engine import IRulesEngine
from cndes.core.use_cases.assign_doc_number import AssignDocNumberUseCase
from cndes.core.use_cases.persist_attachments import PersistAttachmentsUseCase

logger = logging.getLogger(__name__)


def _validate(rules: IRulesEngine, document: Document) -> None:
    result = rules.apply(document)
    if not result.is_valid:
        raise DocumentValidationError(result.violations)


def _default_file_name(document: Document) -> None:
    # legacy column: name of the first attachment
    if not document.file_name and document.attachments:
        document.file_name = document.attachments[0].name


class RegisterDocumentUseCase:
    """
    Use Case: new submission -> stored document.

    Dependency Injection: every collaborator comes through the constructor.
    """

    def __init__(
        self,
        repository: IDocumentRepository,
        rules_engine: IRulesEngine,
        numbering: AssignDocNumberUseCase,
        attachments: PersistAttachmentsUseCase,
    ):
        self._repo = repository
        self._rules = rules_engine
        self._numbering = numbering
        self._attachments = attachments

    def execute(self, document: Document) -> Document:
        """
        1. Rules: reject invalid submissions with every violation found
        2. Identifier: keep the client's, otherwise reserve {year}-{NNN}
        3. Number: Salida/Interno always get a freshly reserved number
        4. Attachments: inline payloads written to storage
        5. Insert
        """
        _validate(self._rules, document)

        if document.id and self._repo.get(document.id) is not None:
            raise DuplicateEntryError(f"Document {document.id} already exists")

        doc = replace(document, attachments=list(document.attachments))
        if not doc.id:
            doc.id = self._numbering.reserve_registry_id()

        doc_type = doc.doc_type
        if doc_type.is_auto_numbered:
            if document.doc_number:
                logger.debug(f"Replacing client number {document.doc_number!r} for {doc_type.value} document")
            doc.doc_number = self._numbering.reserve(doc_type)

        doc.attachments = self._attachments.execute(doc.attachments)
        _default_file_name(doc)

        stored = self._repo.add(doc)
        logger.info(f"Registered document {stored.id} [{stored.type}] {stored.doc_number}")
        return stored


class UpdateDocumentUseCase:
    """Use Case: full-record update of an existing document."""

    def __init__(
        self,
        repository: IDocumentRepository,
        rules_engine: IRulesEngine,
        numbering: AssignDocNumberUseCase,
        attachments: PersistAttachmentsUseCase,
    ):
        self._repo = repository
        self._rules = rules_engine
        self._numbering = numbering
        self._attachments = attachments

    def execute(self, doc_id: str, document: Document) -> tuple[Document, int]:
        """
        Returns the document as stored and the number of rows changed.
        Unknown ids change nothing and report 0.
        """
        _validate(self._rules, document)

        existing = self._repo.get(doc_id)
        if existing is None:
            logger.info(f"Update skipped, document {doc_id} does not exist")
            return replace(document, id=doc_id), 0

        doc = replace(document, id=doc_id, created_at=existing.created_at, attachments=list(document.attachments))

        doc_type = doc.doc_type
        if doc_type.is_auto_numbered:
            if existing.type == doc.type and existing.doc_number:
                doc.doc_number = existing.doc_number
            else:
                doc.doc_number = self._numbering.reserve(doc_type)

        doc.attachments = self._attachments.execute(doc.attachments)
        _default_file_name(doc)

        changes = self._repo.update(doc_id, doc)
        logger.info(f"Updated document {doc_id} ({changes} row(s))")
        return doc, changes


class DeleteDocumentUseCase:
    """Use Case: delete a document and its stored attachment files."""

    def __init__(self, repository: IDocumentRepository, attachments: PersistAttachmentsUseCase):
        self._repo = repository
        self._attachments = attachments

    def execute(self, doc_id: str) -> int:
        """
        Removes the row, then the stored files no other document points at.
        A registration may reuse another document's /uploads reference.
        """
        existing = self._repo.get(doc_id)
        changes = self._repo.delete(doc_id)
        if changes and existing is not None:
            orphaned = [
                a for a in existing.attachments
                if not (a.url and self._repo.is_url_referenced(a.url, exclude_id=doc_id))
            ]
            removed = self._attachments.discard(orphaned)
            kept = len(existing.attachments) - len(orphaned)
            logger.info(f"Deleted document {doc_id}, removed {removed} stored file(s), {kept} still shared")
        return changes
