"""
Repositories — SQLAlchemy implementations of the core ports.

Handles:
  - Document CRUD (attachments JSON-encoded in the row)
  - Atomic per-year sequence reservation
  - Department / external entity catalogs
  - Users
"""

import logging
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError

from cndes.core.entities.document import Document
from cndes.core.entities.user import User
from cndes.core.exceptions import DuplicateEntryError, SequenceConflictError
from cndes.core.interfaces.catalog_repository import ICatalogRepository
from cndes.core.interfaces.document_repository import IDocumentRepository
from cndes.core.interfaces.user_repository import IUserRepository
from cndes.infrastructure.db.database import get_db
from cndes.infrastructure.db.models import (
    DocSequenceRecord,
    DocumentRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)


class DocumentRepository(IDocumentRepository):
    """Repository for registered documents."""

    def __init__(self, max_attempts: int = 5):
        self._max_attempts = max_attempts

    def list_documents(self, doc_type: Optional[str] = None) -> list[Document]:
        with get_db() as db:
            query = db.query(DocumentRecord)
            if doc_type:
                query = query.filter_by(type=doc_type)
            records = query.order_by(
                desc(DocumentRecord.registration_date),
                desc(DocumentRecord.created_at),
            ).all()
            return [r.to_entity() for r in records]

    def get(self, doc_id: str) -> Optional[Document]:
        with get_db() as db:
            record = db.get(DocumentRecord, doc_id)
            return record.to_entity() if record else None

    def add(self, document: Document) -> Document:
        try:
            with get_db() as db:
                record = DocumentRecord.from_entity(document)
                db.add(record)
                db.flush()
                logger.info(f"Saved document {record.id} [{record.type}]")
                return record.to_entity()
        except IntegrityError as e:
            raise DuplicateEntryError(f"Document {document.id} already exists") from e

    def update(self, doc_id: str, document: Document) -> int:
        with get_db() as db:
            record = db.get(DocumentRecord, doc_id)
            if record is None:
                return 0
            record.apply(document)
            return 1

    def delete(self, doc_id: str) -> int:
        with get_db() as db:
            changes = db.query(DocumentRecord).filter_by(id=doc_id).delete(synchronize_session=False)
            if changes:
                logger.info(f"Deleted document {doc_id}")
            return changes

    def list_ids(self) -> list[str]:
        with get_db() as db:
            return [doc_id for (doc_id,) in db.query(DocumentRecord.id).all()]

    def is_url_referenced(self, url: str, exclude_id: Optional[str] = None) -> bool:
        # attachments live in a JSON column, so the match happens here
        with get_db() as db:
            query = db.query(DocumentRecord.attachments)
            if exclude_id is not None:
                query = query.filter(DocumentRecord.id != exclude_id)
            return any(
                isinstance(item, dict) and item.get("url") == url
                for (attachments,) in query.all()
                for item in attachments or []
            )

    def current_sequence(self, kind: str, year: int) -> Optional[int]:
        with get_db() as db:
            return db.query(DocSequenceRecord.last_value).filter_by(kind=kind, year=year).scalar()

    def reserve_sequence(self, kind: str, year: int, floor: int = 0) -> int:
        """
        Optimistic counter: insert the row if missing, otherwise a
        conditional UPDATE ... WHERE last_value = <value read>. Losing
        either race (insert conflict / zero rows updated) retries.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                with get_db() as db:
                    current = (
                        db.query(DocSequenceRecord.last_value)
                        .filter_by(kind=kind, year=year)
                        .scalar()
                    )
                    if current is None:
                        value = floor + 1
                        db.add(DocSequenceRecord(kind=kind, year=year, last_value=value))
                        db.flush()
                        return value

                    value = max(current, floor) + 1
                    changed = (
                        db.query(DocSequenceRecord)
                        .filter_by(kind=kind, year=year, last_value=current)
                        .update({DocSequenceRecord.last_value: value}, synchronize_session=False)
                    )
                    if changed == 1:
                        return value
            except IntegrityError:
                pass
            logger.debug(f"Sequence {kind}/{year} changed concurrently, retrying (attempt {attempt})")

        raise SequenceConflictError(
            f"Could not reserve a {kind} number for {year} after {self._max_attempts} attempts"
        )


class CatalogRepository(ICatalogRepository):
    """Name catalog backed by one table (departments or external_entities)."""

    def __init__(self, model, label: str):
        self._model = model
        self._label = label

    def list_names(self) -> list[str]:
        with get_db() as db:
            return [name for (name,) in db.query(self._model.name).order_by(self._model.name.asc()).all()]

    def add(self, name: str) -> str:
        try:
            with get_db() as db:
                db.add(self._model(name=name))
                db.flush()
        except IntegrityError as e:
            raise DuplicateEntryError(f"{self._label} {name!r} already exists") from e
        logger.info(f"Added {self._label.lower()} {name!r}")
        return name


class UserRepository(IUserRepository):

    def list_users(self) -> list[User]:
        with get_db() as db:
            return [r.to_entity() for r in db.query(UserRecord).order_by(UserRecord.username.asc()).all()]

    def get(self, username: str) -> Optional[User]:
        with get_db() as db:
            record = db.query(UserRecord).filter_by(username=username).first()
            return record.to_entity() if record else None

    def add(self, user: User) -> User:
        try:
            with get_db() as db:
                db.add(UserRecord(
                    username=user.username,
                    password_hash=user.password_hash,
                    role=user.role,
                    name=user.name,
                    token_version=user.token_version,
                ))
                db.flush()
        except IntegrityError as e:
            raise DuplicateEntryError(f"User {user.username!r} already exists") from e
        logger.info(f"Created user {user.username} [{user.role}]")
        return user

    def set_password_hash(self, username: str, password_hash: str, revoke_sessions: bool = True) -> int:
        values = {UserRecord.password_hash: password_hash}
        if revoke_sessions:
            values[UserRecord.token_version] = UserRecord.token_version + 1
        with get_db() as db:
            return (
                db.query(UserRecord)
                .filter_by(username=username)
                .update(values, synchronize_session=False)
            )
