"""
Adapter: Local Storage Service

Concrete IStorageService over a directory on the server's disk,
served to clients under /uploads by the API.
"""

import hashlib
import logging
from pathlib import Path

from cndes.core.interfaces.storage_service import IStorageService, StorageRef

logger = logging.getLogger(__name__)


class LocalStorageService(IStorageService):
    """
    Attachment storage in the uploads directory.

    Moving to MinIO/S3 later only means another IStorageService;
    stored urls keep the /uploads/<key> shape.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self._root = Path(root)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def upload(self, data: bytes, key: str, content_type: str = "application/octet-stream") -> StorageRef:
        path = self._path_for(key)
        self.ensure_root()
        # "xb": never overwrite another attachment with the same generated name
        with path.open("xb") as f:
            f.write(data)
        return StorageRef(
            key=key,
            url=f"{self._url_prefix}/{key}",
            size_bytes=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            content_type=content_type,
        )

    def download(self, key: str) -> bytes:
        return self._path_for(key).read_bytes()

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def key_from_url(self, url: str) -> str | None:
        prefix = f"{self._url_prefix}/"
        if not url or not url.startswith(prefix):
            return None
        key = url[len(prefix):]
        return key if self._is_safe_key(key) else None

    def _path_for(self, key: str) -> Path:
        if not self._is_safe_key(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / key

    @staticmethod
    def _is_safe_key(key: str) -> bool:
        return bool(key) and "/" not in key and "\\" not in key and key not in (".", "..")
