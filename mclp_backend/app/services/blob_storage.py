"""
Local disk storage for document blobs.

Blobs are written under generated names; the client-supplied file name is
never used on disk.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from mclp_backend.app.core.config import settings
from mclp_backend.app.core.exceptions import BlobStorageError, ValidationError

logger = logging.getLogger("mclp.storage")

CHUNK_SIZE = 1024 * 1024

ALLOWED_MIME_TYPES = {
    "pdf": {"application/pdf"},
    "jpg": {"image/jpeg", "image/jpg", "image/pjpeg"},
    "jpeg": {"image/jpeg", "image/jpg", "image/pjpeg"},
    "png": {"image/png"},
    "doc": {"application/msword"},
    "docx": {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"},
    "xls": {"application/vnd.ms-excel"},
    "xlsx": {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"},
}

UNSUPPORTED_TYPE_MESSAGE = "Only PDF, images, and office documents are allowed"

# Longest original file name kept on a document record
MAX_NAME_LENGTH = 255


@dataclass
class StoredBlob:
    name: str
    path: str
    size: int


def file_extension(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def clip_filename(filename: str, limit: int = MAX_NAME_LENGTH) -> str:
    """Shorten ``filename`` to at most ``limit`` characters, keeping its extension."""
    if len(filename) <= limit:
        return filename
    suffix = Path(filename).suffix
    if not suffix or len(suffix) >= limit:
        return filename[:limit]
    return filename[:limit - len(suffix)] + suffix


def check_allowed_type(filename: str, content_type: Optional[str], allowed_extensions: Iterable[str]) -> None:
    """
    Reject uploads whose extension or MIME type is not allow-listed.

    Raises:
        ValidationError: field "file", reason "type"
    """
    extension = file_extension(filename)
    allowed = {ext.lower() for ext in allowed_extensions}
    allowed_mimes = set()
    for ext in allowed:
        allowed_mimes |= ALLOWED_MIME_TYPES.get(ext, set())

    mime = (content_type or "").split(";")[0].strip().lower()
    if extension not in allowed or mime not in allowed_mimes:
        raise ValidationError(field="file", reason="type", message=UNSUPPORTED_TYPE_MESSAGE)


class LocalBlobStorage:
    """Stores blobs as flat files inside ``base_dir``."""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def ensure_dir(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_name(self, original_name: str) -> str:
        """Collision-resistant name that keeps only the original extension."""
        extension = file_extension(original_name)
        suffix = f".{extension}" if extension else ""
        return f"{uuid.uuid4().hex}{suffix}"

    async def save(self, upload: UploadFile, max_bytes: int) -> StoredBlob:
        """
        Stream ``upload`` to disk.

        A partially written blob is removed before any error propagates,
        including cancellation of the request.

        Raises:
            ValidationError: the upload exceeds ``max_bytes``
            BlobStorageError: the file could not be written
        """
        self.ensure_dir()
        name = self.generate_name(upload.filename or "")
        path = self.base_dir / name
        size = 0
        written = False

        try:
            with open(path, "wb") as handle:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > max_bytes:
                        raise ValidationError(
                            field="file",
                            reason="too_large",
                            message=f"File exceeds the maximum size of {max_bytes} bytes"
                        )
                    handle.write(chunk)
            written = True
        except OSError as exc:
            logger.error("Blob write failed", exc_info=True, extra={"entity_id": name})
            raise BlobStorageError("Could not store the uploaded file") from exc
        finally:
            if not written:
                self.discard(str(path))

        return StoredBlob(name=name, path=str(path), size=size)

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def remove(self, path: str) -> bool:
        """
        Delete a blob. Returns False if it was already gone.

        Raises:
            OSError: the blob exists but could not be removed
        """
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        return True

    def discard(self, path: str) -> None:
        """Best-effort removal used for cleanup; failures are only logged."""
        try:
            self.remove(path)
        except OSError:
            logger.warning("Blob cleanup failed", exc_info=True, extra={"entity_id": path})


def get_blob_storage() -> LocalBlobStorage:
    """FastAPI dependency returning the configured blob storage."""
    return LocalBlobStorage(settings.upload_dir)
