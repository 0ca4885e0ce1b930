"""
Contract: Storage Service

Stores attachment bytes (local filesystem today,
object storage later) and hands back a public reference.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class StorageRef:
    """Reference to a stored file."""
    key: str              # generated file name
    url: str              # public path, e.g. /uploads/<key>
    size_bytes: int
    sha256: str
    content_type: str


class IStorageService(ABC):
    """
    Port: Storage Service

    Persists binary attachments. Implementation can be the local
    uploads directory, MinIO, S3, etc.
    """

    @abstractmethod
    def upload(self, data: bytes, key: str, content_type: str = "application/octet-stream") -> StorageRef:
        """
        Stores a file under a new key.

        Args:
            data: File content.
            key: File name to create.
            content_type: MIME type.

        Returns:
            StorageRef with public url and hash.

        Raises:
            FileExistsError: the key is already taken.
            OSError: the write failed.
        """
        ...

    @abstractmethod
    def download(self, key: str) -> bytes:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Removes a stored file. Returns False when it did not exist."""
        ...

    @abstractmethod
    def key_from_url(self, url: str) -> str | None:
        """Inverse of StorageRef.url; None for urls this storage did not issue."""
        ...
