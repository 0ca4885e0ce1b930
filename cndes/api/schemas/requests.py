"""
Pydantic schemas for request bodies.

Field names follow the web client (camelCase); snake_case is accepted too.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from cndes.core.entities.document import Attachment, DocStatus, Document


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttachmentIn(CamelModel):
    name: str = ""
    size: int | None = 0
    type: str | None = ""
    last_modified: int | None = None
    url: str | None = ""
    saved_to_disk: bool = False

    def to_entity(self) -> Attachment:
        return Attachment(
            name=self.name,
            size=self.size or 0,
            type=self.type or "",
            last_modified=self.last_modified,
            url=self.url or "",
            saved_to_disk=self.saved_to_disk,
        )


class DocumentIn(CamelModel):
    """
    Submission body for create and update.

    type and status stay plain strings: the rules engine reports
    unknown values together with every other problem.
    """
    id: str | None = None
    registration_date: date | None = None
    type: str = ""
    doc_number: str | None = ""
    doc_date: date | None = None
    origin: str | None = ""
    destination: str | None = ""
    summary: str | None = ""
    observations: str | None = ""
    status: str | None = None
    file_name: str | None = None
    attachments: list[AttachmentIn] | None = None

    @field_validator("registration_date", "doc_date", mode="before")
    @classmethod
    def _blank_date(cls, value):
        # date inputs left empty in the form arrive as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_entity(self) -> Document:
        return Document(
            id=self.id,
            registration_date=self.registration_date,
            type=self.type,
            doc_number=(self.doc_number or "").strip(),
            doc_date=self.doc_date,
            origin=self.origin or "",
            destination=self.destination or "",
            summary=self.summary or "",
            observations=self.observations or "",
            status=self.status or DocStatus.PENDIENTE.value,
            file_name=self.file_name,
            attachments=[a.to_entity() for a in self.attachments or []],
        )


class CatalogEntryIn(BaseModel):
    name: str | None = None


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class PasswordUpdate(BaseModel):
    password: str = ""
