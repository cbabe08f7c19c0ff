"""
Document database model.

Metadata for an uploaded file; the bytes live on disk at ``storage_path``.
"""

import uuid
from sqlalchemy import Column, String, Integer, DateTime, Enum
from mclp_backend.app.db.session import Base
from mclp_backend.app.models.enums import DocumentCategory, enum_values


class DocumentRecord(Base):
    """
    Document model.

    Exactly one record per stored blob. ``stored_name`` is the generated
    on-disk name; ``original_name`` is only used for downloads.
    """
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership
    owner_id = Column(String(64), nullable=False, index=True)

    # Blob metadata
    stored_name = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    storage_path = Column(String(1024), nullable=False)
    size_bytes = Column(Integer, nullable=False)
    mime_type = Column(String(255), nullable=False)

    category = Column(
        Enum(DocumentCategory, values_callable=enum_values, native_enum=False, length=32),
        nullable=False,
        index=True
    )

    # Timestamps
    uploaded_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<DocumentRecord(id={self.id}, name='{self.original_name}', category='{self.category}')>"
