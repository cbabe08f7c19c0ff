"""
Aggregate calculations for dashboards and ledger summaries.

Pure functions over entities the caller already fetched (and that are
already filtered to one owner). They never query the database.
"""

from typing import Any, Dict, Iterable

from mclp_backend.app.models.enums import ProjectStatus
from mclp_backend.app.schemas.summary import CategoryTotals, FileDashboard, LedgerSummary, LedgerTotals


def _value(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def _label(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


def ledger_totals(entries: Iterable[Any]) -> LedgerTotals:
    """Sum credit and debit over ``entries``; balance = credit - debit."""
    total_credit = 0.0
    total_debit = 0.0
    for entry in entries:
        total_credit += _value(entry, "credit") or 0
        total_debit += _value(entry, "debit") or 0

    return LedgerTotals(
        total_credit=total_credit,
        total_debit=total_debit,
        balance=total_credit - total_debit,
    )


def ledger_summary(entries: Iterable[Any]) -> LedgerSummary:
    """
    Totals plus a per-category breakdown.

    Only categories that occur in ``entries`` get a key; an empty input
    gives zero totals and an empty breakdown.
    """
    entries = list(entries)
    totals = ledger_totals(entries)

    breakdown: Dict[str, CategoryTotals] = {}
    for entry in entries:
        category = _label(_value(entry, "category"))
        bucket = breakdown.setdefault(category, CategoryTotals())
        bucket.credit += _value(entry, "credit") or 0
        bucket.debit += _value(entry, "debit") or 0

    return LedgerSummary(**totals.model_dump(), category_breakdown=breakdown)


def file_dashboard(files: Iterable[Any]) -> FileDashboard:
    """
    Count files by project status.

    Statuses without their own bucket (e.g. "hold") only count towards
    ``total_files``.
    """
    dashboard = FileDashboard()
    buckets = {
        ProjectStatus.NEW.value: "new_projects",
        ProjectStatus.HANDLING.value: "handling_projects",
        ProjectStatus.COMPLETED.value: "completed_projects",
    }
    for land_file in files:
        dashboard.total_files += 1
        bucket = buckets.get(_label(_value(land_file, "project_status")))
        if bucket:
            setattr(dashboard, bucket, getattr(dashboard, bucket) + 1)
    return dashboard
