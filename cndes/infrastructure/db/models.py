"""
Database Models — SQLAlchemy.

Tables:
  - documents: registered correspondence (attachments as JSON)
  - departments / external_entities: catalog names
  - users: operators (bcrypt password hashes)
  - doc_sequences: per-year counters for numbers and identifiers
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Text, JSON,
)
from sqlalchemy.orm import DeclarativeBase

from cndes.core.entities.document import Attachment, Document
from cndes.core.entities.user import User


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class DocumentRecord(Base):
    """Stores every registered document."""
    __tablename__ = "documents"

    id = Column(String(32), primary_key=True)
    registration_date = Column(Date, nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    doc_number = Column(String(120), nullable=False, default="", index=True)
    doc_date = Column(Date, nullable=True)

    origin = Column(String(255), nullable=False, default="")
    destination = Column(String(255), nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    observations = Column(Text, nullable=False, default="")
    status = Column(String(30), nullable=False, default="Pendiente")

    # Legacy: name of the first attachment
    file_name = Column(String(255), nullable=True)
    # Ordered list of attachment dicts (camelCase keys, as the client sends them)
    attachments = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<Document {self.id} [{self.type}] {self.doc_number}>"

    @classmethod
    def from_entity(cls, doc: Document) -> "DocumentRecord":
        record = cls(id=doc.id, created_at=doc.created_at or utcnow())
        record.apply(doc)
        return record

    def apply(self, doc: Document) -> None:
        """Copies every mutable field from the entity."""
        self.registration_date = doc.registration_date
        self.type = doc.type
        self.doc_number = doc.doc_number or ""
        self.doc_date = doc.doc_date
        self.origin = doc.origin or ""
        self.destination = doc.destination or ""
        self.summary = doc.summary or ""
        self.observations = doc.observations or ""
        self.status = doc.status
        self.file_name = doc.file_name
        self.attachments = [a.to_dict() for a in doc.attachments]

    def to_entity(self) -> Document:
        return Document(
            id=self.id,
            registration_date=self.registration_date,
            type=self.type,
            doc_number=self.doc_number or "",
            doc_date=self.doc_date,
            origin=self.origin or "",
            destination=self.destination or "",
            summary=self.summary or "",
            observations=self.observations or "",
            status=self.status,
            file_name=self.file_name,
            attachments=[Attachment.from_dict(a) for a in self.attachments or [] if isinstance(a, dict)],
            created_at=self.created_at,
        )


class DepartmentRecord(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)


class ExternalEntityRecord(Base):
    __tablename__ = "external_entities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    # bcrypt hash; rows imported from the old registry may still be plain text
    password_hash = Column(String(255), nullable=False)
    role = Column(String(30), nullable=False, default="Usuario")
    name = Column(String(120), nullable=False, default="")
    token_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<User {self.username} [{self.role}]>"

    def to_entity(self) -> User:
        return User(
            username=self.username,
            name=self.name or "",
            role=self.role,
            password_hash=self.password_hash,
            token_version=self.token_version or 0,
        )


class DocSequenceRecord(Base):
    """Last value issued per (kind, year). kind: SAL, INT, REG."""
    __tablename__ = "doc_sequences"

    kind = Column(String(10), primary_key=True)
    year = Column(Integer, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Sequence {self.kind}/{self.year}={self.last_value}>"
