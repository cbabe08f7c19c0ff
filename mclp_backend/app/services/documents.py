"""
Document lifecycle service.

Keeps every document record paired with exactly one blob on disk:
uploads that fail after the blob is written remove the blob, and
deletions remove the blob only once the record is gone.
"""

import logging
from typing import Optional, Sequence

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from mclp_backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from mclp_backend.app.models.document import DocumentRecord
from mclp_backend.app.services.blob_storage import LocalBlobStorage, check_allowed_type, clip_filename
from mclp_backend.app.services.repository import OwnedRepository
from mclp_backend.app.services.validation import EntityKind

logger = logging.getLogger("mclp.documents")

RESOURCE_NAME = "Document"


class DocumentService:
    """Upload, download and delete documents for one caller at a time."""

    def __init__(
        self,
        session: AsyncSession,
        storage: LocalBlobStorage,
        max_file_size: int,
        allowed_extensions: Sequence[str],
    ):
        self.repository = OwnedRepository(
            session,
            DocumentRecord,
            entity_kind=EntityKind.DOCUMENT,
            resource_name=RESOURCE_NAME,
            date_field="uploaded_at",
            created_field="uploaded_at",
        )
        self.storage = storage
        self.max_file_size = max_file_size
        self.allowed_extensions = allowed_extensions

    async def list(self, caller: str, category: Optional[str] = None) -> Sequence[DocumentRecord]:
        return await self.repository.list(caller, filters={"category": category})

    async def get(self, caller: str, document_id: str) -> DocumentRecord:
        return await self.repository.get(caller, document_id)

    async def upload(self, caller: str, upload: Optional[UploadFile], category: Optional[str]) -> DocumentRecord:
        """
        Store an uploaded file and create its record.

        Raises:
            ValidationError: no file, disallowed type, too large, or a
                missing/unknown category
            StoreError: the record could not be saved
        """
        if upload is None or not upload.filename:
            raise ValidationError(field="file", reason="required", message="Please upload a file")

        check_allowed_type(upload.filename, upload.content_type, self.allowed_extensions)

        blob = await self.storage.save(upload, self.max_file_size)
        document = None
        try:
            if not category:
                raise ValidationError(field="category", reason="required", message="Category is required")

            document = await self.repository.create(caller, {
                "stored_name": blob.name,
                "original_name": clip_filename(upload.filename),
                "storage_path": blob.path,
                "size_bytes": blob.size,
                "mime_type": upload.content_type,
                "category": category,
            })
        finally:
            # Also runs when the request is cancelled mid-upload
            if document is None:
                logger.info("Removing blob of failed upload", extra={"entity_id": blob.name})
                self.storage.discard(blob.path)

        return document

    async def get_for_download(self, caller: str, document_id: str) -> DocumentRecord:
        """
        Resolve a document whose blob is present on disk.

        Raises:
            ResourceNotFoundError: unknown/foreign id, or the blob is missing
        """
        document = await self.repository.get(caller, document_id)

        if not self.storage.exists(document.storage_path):
            logger.warning(
                "Blob missing for document",
                extra={"entity_id": document.id, "metadata": {"storage_path": document.storage_path}}
            )
            raise ResourceNotFoundError(RESOURCE_NAME, message="File not found on server")

        return document

    async def delete(self, caller: str, document_id: str) -> Optional[str]:
        """
        Delete a document record, then its blob.

        Returns:
            A warning message if the blob could not be removed, else None
        """
        document = await self.repository.delete(caller, document_id)

        try:
            removed = self.storage.remove(document.storage_path)
        except OSError:
            logger.warning(
                "Blob removal failed after record deletion",
                exc_info=True,
                extra={"entity_id": document.id}
            )
            return "Document record deleted but its file could not be removed from storage"

        if not removed:
            logger.warning("Blob already missing at deletion", extra={"entity_id": document.id})
        return None
