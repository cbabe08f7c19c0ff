"""
Summary schemas for the ledger and the files dashboard.
"""

from typing import Dict, List
from pydantic import BaseModel, Field
from mclp_backend.app.schemas.common import CamelModel
from mclp_backend.app.schemas.ledger import LedgerEntryResponse


class CategoryTotals(CamelModel):
    credit: float = 0.0
    debit: float = 0.0


class LedgerTotals(CamelModel):
    """Credit/debit totals and resulting balance."""
    total_credit: float = 0.0
    total_debit: float = 0.0
    balance: float = 0.0


class LedgerSummary(LedgerTotals):
    """Totals plus per-category breakdown (only categories present)."""
    category_breakdown: Dict[str, CategoryTotals] = Field(default_factory=dict)


class FileDashboard(CamelModel):
    """Project counts for the dashboard."""
    total_files: int = 0
    new_projects: int = 0
    handling_projects: int = 0
    completed_projects: int = 0


class LedgerListResponse(BaseModel):
    """List envelope for ledger entries, with totals of the listed rows."""
    success: bool = True
    count: int
    summary: LedgerTotals
    data: List[LedgerEntryResponse]
