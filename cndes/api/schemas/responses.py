"""
Pydantic schemas — Response models for the API.

Every response is an envelope with a "message" plus the payload.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from cndes.api.schemas.requests import CamelModel
from cndes.core.entities.document import Attachment, Document
from cndes.core.entities.user import User


class AttachmentOut(CamelModel):
    name: str
    size: int = 0
    type: str = ""
    last_modified: int | None = None
    url: str = ""
    saved_to_disk: bool = False

    @classmethod
    def from_entity(cls, attachment: Attachment) -> "AttachmentOut":
        return cls(
            name=attachment.name,
            size=attachment.size,
            type=attachment.type,
            last_modified=attachment.last_modified,
            url=attachment.url,
            saved_to_disk=attachment.saved_to_disk,
        )


class DocumentOut(CamelModel):
    id: str
    registration_date: date | None = None
    type: str
    doc_number: str = ""
    doc_date: date | None = None
    origin: str = ""
    destination: str = ""
    summary: str = ""
    observations: str = ""
    status: str = ""
    file_name: str | None = None
    attachments: list[AttachmentOut] = []
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, doc: Document) -> "DocumentOut":
        return cls(
            id=doc.id,
            registration_date=doc.registration_date,
            type=doc.type,
            doc_number=doc.doc_number,
            doc_date=doc.doc_date,
            origin=doc.origin,
            destination=doc.destination,
            summary=doc.summary,
            observations=doc.observations,
            status=doc.status,
            file_name=doc.file_name,
            attachments=[AttachmentOut.from_entity(a) for a in doc.attachments],
            created_at=doc.created_at,
        )


class UserOut(BaseModel):
    username: str
    role: str
    name: str

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(**user.public_view())


class DocumentListResponse(BaseModel):
    message: str = "success"
    data: list[DocumentOut]


class DocumentResponse(BaseModel):
    message: str = "success"
    data: DocumentOut


class DocumentCreatedResponse(DocumentResponse):
    id: str = Field(
        description="Identifier sent by the client, or {year}-{NNN} issued by the server (e.g. 2026-007)",
    )


class DocumentUpdatedResponse(DocumentResponse):
    changes: int


class ChangesResponse(BaseModel):
    message: str
    changes: int


class NextNumber(CamelModel):
    type: str
    doc_number: str


class NextNumberResponse(BaseModel):
    message: str = "success"
    data: NextNumber


class CatalogListResponse(BaseModel):
    message: str = "success"
    data: list[str]


class CatalogEntryResponse(BaseModel):
    message: str = "success"
    name: str


class UserListResponse(BaseModel):
    message: str = "success"
    data: list[UserOut]


class LoginResponse(CamelModel):
    message: str = "success"
    user: UserOut
    token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    message: str = "success"
    user: UserOut
