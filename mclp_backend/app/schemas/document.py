"""
Document Pydantic schemas.
"""

from datetime import datetime
from pydantic import Field
from mclp_backend.app.models.enums import DocumentCategory
from mclp_backend.app.schemas.common import CamelModel, NonEmptyStr


class DocumentRecordCreate(CamelModel):
    """Metadata of a blob that has already been written to storage."""
    stored_name: NonEmptyStr
    original_name: NonEmptyStr
    storage_path: str = Field(..., min_length=1, max_length=1024)
    size_bytes: int = Field(..., ge=0)
    mime_type: NonEmptyStr
    category: DocumentCategory


class DocumentResponse(CamelModel):
    """Schema for document response."""
    id: str
    owner_id: str
    stored_name: str
    original_name: str
    storage_path: str
    size_bytes: int
    mime_type: str
    category: DocumentCategory
    uploaded_at: datetime
