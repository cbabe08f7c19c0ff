"""
Land File database model.

A land file tracks one survey parcel through approval work.
"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Enum, Text, JSON, Index
from mclp_backend.app.db.session import Base
from mclp_backend.app.models.enums import (
    FileCategory, ExtentUnit, ProjectStatus,
    FileStatus, DwgStatus, FormsStatus, OnlineStatus, enum_values
)


def _enum(enum_cls):
    return Enum(enum_cls, values_callable=enum_values, native_enum=False, length=32)


class LandFile(Base):
    """
    Land File model.

    ``owners`` holds the ordered list of land owners as
    ``[{"name": ..., "mobile": ...}]``.
    """
    __tablename__ = "land_files"
    __table_args__ = (
        Index("ix_land_files_location", "district", "taluk", "village"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership
    owner_id = Column(String(64), nullable=False, index=True)

    # Basic file information
    category = Column(_enum(FileCategory), nullable=False)
    survey_number = Column(String(100), nullable=False, index=True)

    # Location
    map_link = Column(String(1000), nullable=False, default="")
    district = Column(String(100), nullable=False)
    taluk = Column(String(100), nullable=False)
    village = Column(String(100), nullable=False)

    # Land information
    extent = Column(Float, nullable=False)
    extent_unit = Column(_enum(ExtentUnit), nullable=False)

    # Land owners and contact person
    owners = Column(JSON, nullable=False, default=list)
    contact_name = Column(String(255), nullable=False)
    contact_mobile = Column(String(10), nullable=False)

    # Project status and handling sub-statuses
    project_status = Column(_enum(ProjectStatus), nullable=False, default=ProjectStatus.NEW, index=True)
    file_status = Column(_enum(FileStatus), nullable=False, default=FileStatus.UNSET)
    dwg_status = Column(_enum(DwgStatus), nullable=False, default=DwgStatus.UNSET)
    forms_status = Column(_enum(FormsStatus), nullable=False, default=FormsStatus.UNSET)
    online_status = Column(_enum(OnlineStatus), nullable=False, default=OnlineStatus.UNSET)

    remarks = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<LandFile(id={self.id}, survey='{self.survey_number}', status='{self.project_status}')>"
