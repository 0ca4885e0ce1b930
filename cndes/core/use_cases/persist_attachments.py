"""
Use Case: Persist Attachments

Turns inline base64 data URLs into files on the storage service and
replaces the payload with the stored file's public url.

A failure on one attachment never aborts the batch: that attachment is
returned as received and the error is logged.
"""

import base64
import binascii
import logging
import re
import time
from typing import Callable, Iterable

from cndes.core.entities.document import Attachment
from cndes.core.interfaces.storage_service import IStorageService, StorageRef

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)
UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
WHITESPACE = re.compile(r"\s+")


def sanitize_file_name(name: str | None) -> str:
    """Replaces everything outside [A-Za-z0-9.-] with '_'."""
    return UNSAFE_NAME_CHARS.sub("_", name or "") or "archivo"


def build_stored_name(name: str | None, epoch_millis: int) -> str:
    return f"{epoch_millis}_{sanitize_file_name(name)}"


class PersistAttachmentsUseCase:
    """
    Use Case: inline attachments -> stored files.

    Idempotent: attachments without a data: url (already persisted or
    externally referenced) pass through untouched, so it runs on both
    create and update.
    """

    MAX_NAME_ATTEMPTS = 20

    def __init__(self, storage: IStorageService, clock: Callable[[], float] = time.time):
        self._storage = storage
        self._clock = clock

    def execute(self, attachments: Iterable[Attachment] | None) -> list[Attachment]:
        return [self._persist_one(a) for a in attachments or []]

    def discard(self, attachments: Iterable[Attachment]) -> int:
        """Removes the stored files of persisted attachments. Best-effort."""
        removed = 0
        for attachment in attachments:
            if not attachment.saved_to_disk:
                continue
            key = self._storage.key_from_url(attachment.url)
            if key is None:
                continue
            try:
                if self._storage.delete(key):
                    removed += 1
            except OSError as e:
                logger.warning(f"Could not remove stored file {key}: {e}")
        return removed

    def _persist_one(self, attachment: Attachment) -> Attachment:
        if not attachment.is_inline:
            return attachment

        match = DATA_URL_PATTERN.match(attachment.url)
        if not match:
            logger.warning(f"Attachment {attachment.name!r} has a data url without base64 payload, left inline")
            return attachment
        mime, payload = match.groups()

        try:
            # MIME encoders wrap the payload every 76 characters
            data = base64.b64decode(WHITESPACE.sub("", payload), validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Could not decode attachment {attachment.name!r}: {e}")
            return attachment

        try:
            ref = self._store(data, attachment.name, mime)
        except OSError as e:
            logger.error(f"Could not write attachment {attachment.name!r}: {e}")
            return attachment

        logger.info(f"Stored attachment {attachment.name!r} as {ref.key} ({ref.size_bytes} bytes)")
        return attachment.persisted_as(
            ref.url,
            type=attachment.type or mime,
            size=attachment.size or ref.size_bytes,
        )

    def _store(self, data: bytes, name: str, mime: str) -> StorageRef:
        millis = int(self._clock() * 1000)
        for attempt in range(self.MAX_NAME_ATTEMPTS):
            key = build_stored_name(name, millis + attempt)
            try:
                return self._storage.upload(data, key, content_type=mime)
            except FileExistsError:
                continue
        raise FileExistsError(f"No free file name for {name!r}")
