"""
Accounts (ledger) API Endpoints.

Every route works on the authenticated caller's own ledger entries only.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from mclp_backend.app.db.session import get_db
from mclp_backend.app.core.dependencies import get_caller_id
from mclp_backend.app.models.enums import LedgerCategory
from mclp_backend.app.models.ledger_entry import LedgerEntry
from mclp_backend.app.schemas.common import DataResponse, DeleteResponse, MutationResponse
from mclp_backend.app.schemas.ledger import LedgerEntryCreate, LedgerEntryUpdate, LedgerEntryResponse
from mclp_backend.app.schemas.summary import LedgerListResponse, LedgerSummary
from mclp_backend.app.services.aggregates import ledger_summary, ledger_totals
from mclp_backend.app.services.audit import log_event, AuditAction
from mclp_backend.app.services.repository import OwnedRepository
from mclp_backend.app.services.validation import EntityKind

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def get_ledger_repository(db: AsyncSession = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(
        db,
        LedgerEntry,
        entity_kind=EntityKind.LEDGER_ENTRY,
        resource_name="Account entry",
        date_field="date",
    )


@router.get("", response_model=LedgerListResponse)
async def list_entries(
    category: Optional[LedgerCategory] = Query(None, description="Filter by category"),
    start_date: Optional[date] = Query(None, alias="startDate", description="Earliest entry date (inclusive)"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Latest entry date (inclusive)"),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    """
    List the caller's ledger entries, newest first.

    The response also carries credit/debit totals of the listed entries.
    """
    criteria = []
    if start_date:
        criteria.append(LedgerEntry.date >= start_date)
    if end_date:
        criteria.append(LedgerEntry.date <= end_date)

    entries = await repository.list(caller_id, filters={"category": category}, criteria=criteria)

    return LedgerListResponse(
        count=len(entries),
        summary=ledger_totals(entries),
        data=[LedgerEntryResponse.model_validate(e) for e in entries]
    )


@router.get("/stats/summary", response_model=DataResponse[LedgerSummary])
async def get_summary(
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    """Totals, balance and per-category breakdown over all of the caller's entries."""
    entries = await repository.list(caller_id)
    return DataResponse[LedgerSummary](data=ledger_summary(entries))


@router.get("/{entry_id}", response_model=DataResponse[LedgerEntryResponse])
async def get_entry(
    entry_id: str = Path(..., description="Ledger entry ID"),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    entry = await repository.get(caller_id, entry_id)
    return DataResponse[LedgerEntryResponse](data=LedgerEntryResponse.model_validate(entry))


@router.post("", response_model=MutationResponse[LedgerEntryResponse], status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_data: LedgerEntryCreate,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    """
    Create a ledger entry.

    Exactly one of credit/debit must be greater than zero.
    """
    entry = await repository.create(caller_id, entry_data.model_dump())

    log_event(
        AuditAction.LEDGER_ENTRY_CREATED,
        actor_id=caller_id,
        entity_id=entry.id,
        metadata={"category": entry.category.value, "credit": entry.credit, "debit": entry.debit}
    )

    return MutationResponse[LedgerEntryResponse](
        message="Account entry created successfully",
        data=LedgerEntryResponse.model_validate(entry)
    )


@router.api_route("/{entry_id}", methods=["PUT", "PATCH"], response_model=MutationResponse[LedgerEntryResponse])
async def update_entry(
    entry_id: str = Path(..., description="Ledger entry ID"),
    entry_data: LedgerEntryUpdate = ...,
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    """
    Update a ledger entry.

    Only fields present in the body change; the merged entry must still
    satisfy the credit/debit rule.
    """
    update_data = entry_data.model_dump(exclude_unset=True)
    entry = await repository.update(caller_id, entry_id, update_data)

    log_event(
        AuditAction.LEDGER_ENTRY_UPDATED,
        actor_id=caller_id,
        entity_id=entry.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return MutationResponse[LedgerEntryResponse](
        message="Account entry updated successfully",
        data=LedgerEntryResponse.model_validate(entry)
    )


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_entry(
    entry_id: str = Path(..., description="Ledger entry ID"),
    caller_id: str = Depends(get_caller_id),
    repository: OwnedRepository = Depends(get_ledger_repository)
):
    await repository.delete(caller_id, entry_id)

    log_event(AuditAction.LEDGER_ENTRY_DELETED, actor_id=caller_id, entity_id=entry_id)

    return DeleteResponse(message="Account entry deleted successfully")
