"""
Document API Endpoints.

Upload, list, download and delete the caller's documents.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, Path, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from mclp_backend.app.core.config import settings
from mclp_backend.app.core.dependencies import get_caller_id
from mclp_backend.app.db.session import get_db
from mclp_backend.app.models.enums import DocumentCategory
from mclp_backend.app.schemas.common import DataResponse, DeleteResponse, ListResponse, MutationResponse
from mclp_backend.app.schemas.document import DocumentResponse
from mclp_backend.app.services.audit import log_event, AuditAction
from mclp_backend.app.services.blob_storage import LocalBlobStorage, get_blob_storage
from mclp_backend.app.services.documents import DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])


def get_document_service(
    db: AsyncSession = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_blob_storage)
) -> DocumentService:
    return DocumentService(
        db,
        storage,
        max_file_size=settings.max_file_size,
        allowed_extensions=settings.allowed_extensions,
    )


@router.get("", response_model=ListResponse[DocumentResponse])
async def list_documents(
    category: Optional[DocumentCategory] = Query(None),
    caller_id: str = Depends(get_caller_id),
    service: DocumentService = Depends(get_document_service)
):
    """List the caller's documents, most recently uploaded first."""
    documents = await service.list(caller_id, category=category)
    return ListResponse[DocumentResponse](
        count=len(documents),
        data=[DocumentResponse.model_validate(d) for d in documents]
    )


@router.post("/upload", response_model=MutationResponse[DocumentResponse], status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    category: Optional[str] = Form(None),
    caller_id: str = Depends(get_caller_id),
    service: DocumentService = Depends(get_document_service)
):
    """
    Upload a document (multipart form with ``file`` and ``category``).

    Allowed types: PDF, JPEG/PNG images, Word and Excel documents.
    """
    document = await service.upload(caller_id, file, category)

    log_event(
        AuditAction.DOCUMENT_UPLOADED,
        actor_id=caller_id,
        entity_id=document.id,
        metadata={"category": document.category.value, "size_bytes": document.size_bytes}
    )

    return MutationResponse[DocumentResponse](
        message="Document uploaded successfully",
        data=DocumentResponse.model_validate(document)
    )


@router.get("/download/{document_id}", response_class=FileResponse)
async def download_document(
    document_id: str = Path(..., description="Document ID"),
    caller_id: str = Depends(get_caller_id),
    service: DocumentService = Depends(get_document_service)
):
    """Stream the document back under its original file name."""
    document = await service.get_for_download(caller_id, document_id)
    return FileResponse(
        document.storage_path,
        media_type=document.mime_type,
        filename=document.original_name
    )


@router.get("/{document_id}", response_model=DataResponse[DocumentResponse])
async def get_document(
    document_id: str = Path(..., description="Document ID"),
    caller_id: str = Depends(get_caller_id),
    service: DocumentService = Depends(get_document_service)
):
    document = await service.get(caller_id, document_id)
    return DataResponse[DocumentResponse](data=DocumentResponse.model_validate(document))


@router.delete("/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str = Path(..., description="Document ID"),
    caller_id: str = Depends(get_caller_id),
    service: DocumentService = Depends(get_document_service)
):
    """Delete the document record and then its file."""
    warning = await service.delete(caller_id, document_id)

    log_event(AuditAction.DOCUMENT_DELETED, actor_id=caller_id, entity_id=document_id)

    return DeleteResponse(message="Document deleted successfully", warning=warning)
