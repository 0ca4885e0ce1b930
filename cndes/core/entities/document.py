"""
Entity: Document

A correspondence record tracked by the registry.
Pure model: no framework or database dependency.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

INLINE_DATA_PREFIX = "data:"


class DocType(str, Enum):
    ENTRADA = "Entrada"
    SALIDA = "Salida"
    INTERNO = "Interno"

    @property
    def kind_code(self) -> str | None:
        """Segment used in system-assigned numbers (CNDES/SAL/...)."""
        return {DocType.SALIDA: "SAL", DocType.INTERNO: "INT"}.get(self)

    @property
    def is_auto_numbered(self) -> bool:
        return self.kind_code is not None

    @classmethod
    def parse(cls, value) -> "DocType | None":
        try:
            return cls(value)
        except ValueError:
            return None


class DocStatus(str, Enum):
    PENDIENTE = "Pendiente"
    EN_PROCESO = "En Proceso"
    COMPLETADO = "Completado"
    ENVIADO = "Enviado"
    BORRADOR = "Borrador"


@dataclass
class Attachment:
    """A file tied to a document: inline (base64 data URL) or stored on disk."""
    name: str
    size: int = 0
    type: str = ""                      # MIME type
    last_modified: int | None = None    # epoch millis, as sent by the browser
    url: str = ""                       # data:<mime>;base64,... or /uploads/<name>
    saved_to_disk: bool = False

    @property
    def is_inline(self) -> bool:
        return self.url.startswith(INLINE_DATA_PREFIX)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "size": self.size,
            "type": self.type,
            "lastModified": self.last_modified,
            "url": self.url,
            "savedToDisk": self.saved_to_disk,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        return cls(
            name=data.get("name") or "",
            size=data.get("size") or 0,
            type=data.get("type") or "",
            last_modified=data.get("lastModified"),
            url=data.get("url") or "",
            saved_to_disk=bool(data.get("savedToDisk", False)),
        )

    def persisted_as(self, url: str, **changes) -> "Attachment":
        return replace(self, url=url, saved_to_disk=True, **changes)


@dataclass
class Document:
    """Domain entity: registered correspondence."""
    type: str
    id: str | None = None
    registration_date: date | None = None
    doc_number: str = ""
    doc_date: date | None = None
    origin: str = ""
    destination: str = ""
    summary: str = ""
    observations: str = ""
    status: str = DocStatus.PENDIENTE.value
    file_name: str | None = None
    attachments: list[Attachment] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def doc_type(self) -> DocType | None:
        return DocType.parse(self.type)
