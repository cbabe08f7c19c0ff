"""
Land File Management API Endpoints.

Callers manage their own land files; files of other callers behave as if
they did not exist.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from mclp_backend.app.db.session import get_db
from mclp_backend.app.core.dependencies import get_caller_id
from mclp_backend.app.models.enums import FileCategory, ProjectStatus
from mclp_backend.app.models.land_file import LandFile
from mclp_backend.app.schemas.common import DataResponse, DeleteResponse, ListResponse, MutationResponse
from mclp_backend.app.schemas.land_file import (
    LandFileCreate, LandFileUpdate, LandFileResponse, ProjectStatusUpdate, HandlingStatusUpdate
)
from mclp_backend.app.schemas.summary import FileDashboard
from mclp_backend.app.services.aggregates import file_dashboard
from mclp_backend.app.services.audit import log_event, AuditAction
from mclp_backend.app.services.repository import OwnedRepository
from mclp_backend.app.services.validation import EntityKind

router = APIRouter(prefix="/files", tags=["Files"])


def get_file_repository(db: AsyncSession = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(
        db,
        LandFile,
        entity_kind=EntityKind.LAND_FILE,
        resource_name="File",
        date_field="created_at",
    )


@router.get("", response_model=ListResponse[LandFileResponse])
async def list_files(
    project_status: Optional[ProjectStatus] = Query(None, alias="projectStatus"),
    category: Optional[FileCategory] = Query(None),
    district: Optional[str] = Query(None),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """List the caller's land files, newest first."""
    files = await repository.list(
        caller_id,
        filters={"project_status": project_status, "category": category, "district": district}
    )
    return ListResponse[LandFileResponse](
        count=len(files),
        data=[LandFileResponse.model_validate(f) for f in files]
    )


@router.get("/stats/dashboard", response_model=DataResponse[FileDashboard])
async def get_dashboard(
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """Project counts by status for the caller's files."""
    files = await repository.list(caller_id)
    return DataResponse[FileDashboard](data=file_dashboard(files))


@router.get("/{file_id}", response_model=DataResponse[LandFileResponse])
async def get_file(
    file_id: str = Path(..., description="Land file ID"),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    land_file = await repository.get(caller_id, file_id)
    return DataResponse[LandFileResponse](data=LandFileResponse.model_validate(land_file))


@router.post("", response_model=MutationResponse[LandFileResponse], status_code=status.HTTP_201_CREATED)
async def create_file(
    file_data: LandFileCreate,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """
    Create a land file.

    The project status always starts as "new".
    """
    land_file = await repository.create(caller_id, file_data.model_dump(), project_status=ProjectStatus.NEW)

    log_event(
        AuditAction.FILE_CREATED,
        actor_id=caller_id,
        entity_id=land_file.id,
        metadata={"survey_number": land_file.survey_number, "district": land_file.district}
    )

    return MutationResponse[LandFileResponse](
        message="File created successfully",
        data=LandFileResponse.model_validate(land_file)
    )


@router.api_route("/{file_id}", methods=["PUT", "PATCH"], response_model=MutationResponse[LandFileResponse])
async def update_file(
    file_id: str = Path(..., description="Land file ID"),
    file_data: LandFileUpdate = ...,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """
    Update land file details.

    Only fields present in the body change. The project status has its
    own endpoint.
    """
    update_data = file_data.model_dump(exclude_unset=True)
    land_file = await repository.update(caller_id, file_id, update_data)

    log_event(
        AuditAction.FILE_UPDATED,
        actor_id=caller_id,
        entity_id=land_file.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return MutationResponse[LandFileResponse](
        message="File updated successfully",
        data=LandFileResponse.model_validate(land_file)
    )


@router.put("/{file_id}/status", response_model=MutationResponse[LandFileResponse])
async def update_project_status(
    file_id: str = Path(..., description="Land file ID"),
    status_data: ProjectStatusUpdate = ...,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """Set the project status. Any status may follow any other."""
    land_file = await repository.update(caller_id, file_id, {"project_status": status_data.project_status})

    log_event(
        AuditAction.FILE_STATUS_CHANGED,
        actor_id=caller_id,
        entity_id=land_file.id,
        metadata={"project_status": land_file.project_status.value}
    )

    return MutationResponse[LandFileResponse](
        message="Project status updated successfully",
        data=LandFileResponse.model_validate(land_file)
    )


@router.put("/{file_id}/handling-status", response_model=MutationResponse[LandFileResponse])
async def update_handling_status(
    file_id: str = Path(..., description="Land file ID"),
    handling_data: HandlingStatusUpdate = ...,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    """
    Update handling details (file status, remarks, documentation statuses).

    Keys missing from the body keep their value; an empty string clears
    a sub-status.
    """
    update_data = {
        field: value
        for field, value in handling_data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    land_file = await repository.update(caller_id, file_id, update_data)

    log_event(
        AuditAction.FILE_HANDLING_UPDATED,
        actor_id=caller_id,
        entity_id=land_file.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return MutationResponse[LandFileResponse](
        message="Handling status updated successfully",
        data=LandFileResponse.model_validate(land_file)
    )


@router.delete("/{file_id}", response_model=DeleteResponse)
async def delete_file(
    file_id: str = Path(..., description="Land file ID"),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_file_repository)
):
    await repository.delete(caller_id, file_id)

    log_event(AuditAction.FILE_DELETED, actor_id=caller_id, entity_id=file_id)

    return DeleteResponse(message="File deleted successfully")
