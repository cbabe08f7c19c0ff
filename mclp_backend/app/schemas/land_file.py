"""
Land file Pydantic schemas.

Defines request and response models for land file management.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field
from mclp_backend.app.models.enums import (
    FileCategory, ExtentUnit, ProjectStatus,
    FileStatus, DwgStatus, FormsStatus, OnlineStatus
)
from mclp_backend.app.schemas.common import CamelModel, NonEmptyStr, MobileNumber


class LandOwner(CamelModel):
    """One registered owner of the land."""
    name: NonEmptyStr
    mobile: MobileNumber


class LandFileCreate(CamelModel):
    """
    Schema for creating a land file.

    ``projectStatus`` is not accepted here: new files always start as "new".
    """
    category: FileCategory
    survey_number: NonEmptyStr = Field(..., description="Survey number of the parcel")
    map_link: str = Field(default="", max_length=1000)
    district: NonEmptyStr
    taluk: NonEmptyStr
    village: NonEmptyStr
    extent: float = Field(..., ge=0)
    extent_unit: ExtentUnit
    owners: List[LandOwner] = Field(default_factory=list)
    contact_name: NonEmptyStr
    contact_mobile: MobileNumber
    file_status: FileStatus = FileStatus.UNSET
    dwg_status: DwgStatus = DwgStatus.UNSET
    forms_status: FormsStatus = FormsStatus.UNSET
    online_status: OnlineStatus = OnlineStatus.UNSET
    remarks: str = ""
    notes: str = ""


class LandFileRecord(LandFileCreate):
    """Full validated state of a land file, as persisted."""
    project_status: ProjectStatus = ProjectStatus.NEW


class LandFileUpdate(CamelModel):
    """Schema for partially updating a land file's details."""
    category: Optional[FileCategory] = None
    survey_number: Optional[NonEmptyStr] = None
    map_link: Optional[str] = Field(default=None, max_length=1000)
    district: Optional[NonEmptyStr] = None
    taluk: Optional[NonEmptyStr] = None
    village: Optional[NonEmptyStr] = None
    extent: Optional[float] = Field(default=None, ge=0)
    extent_unit: Optional[ExtentUnit] = None
    owners: Optional[List[LandOwner]] = None
    contact_name: Optional[NonEmptyStr] = None
    contact_mobile: Optional[MobileNumber] = None
    file_status: Optional[FileStatus] = None
    dwg_status: Optional[DwgStatus] = None
    forms_status: Optional[FormsStatus] = None
    online_status: Optional[OnlineStatus] = None
    remarks: Optional[str] = None
    notes: Optional[str] = None


class ProjectStatusUpdate(CamelModel):
    """Schema for the dedicated project status operation."""
    project_status: ProjectStatus


class HandlingStatusUpdate(CamelModel):
    """
    Schema for updating handling details.

    Only keys present in the request are applied; an explicit empty
    string clears a sub-status.
    """
    file_status: Optional[FileStatus] = None
    remarks: Optional[str] = None
    dwg_status: Optional[DwgStatus] = None
    forms_status: Optional[FormsStatus] = None
    online_status: Optional[OnlineStatus] = None


class LandFileResponse(CamelModel):
    """Schema for land file response."""
    id: str
    owner_id: str
    category: FileCategory
    survey_number: str
    map_link: str
    district: str
    taluk: str
    village: str
    extent: float
    extent_unit: ExtentUnit
    owners: List[LandOwner]
    contact_name: str
    contact_mobile: str
    project_status: ProjectStatus
    file_status: FileStatus
    dwg_status: DwgStatus
    forms_status: FormsStatus
    online_status: OnlineStatus
    remarks: str
    notes: str
    created_at: datetime
    updated_at: datetime
