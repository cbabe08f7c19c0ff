"""
Unit tests for ledger summaries and the files dashboard.
"""

import random
from mclp_backend.app.models.enums import LedgerCategory, ProjectStatus
from mclp_backend.app.models.land_file import LandFile
from mclp_backend.app.models.ledger_entry import LedgerEntry
from mclp_backend.app.services.aggregates import file_dashboard, ledger_summary, ledger_totals


def test_ledger_summary_example():
    entries = [
        {"credit": 100, "debit": 0, "category": "A"},
        {"credit": 0, "debit": 40, "category": "A"},
        {"credit": 0, "debit": 10, "category": "B"},
    ]

    summary = ledger_summary(entries).model_dump(by_alias=True)

    assert summary == {
        "totalCredit": 100,
        "totalDebit": 50,
        "balance": 50,
        "categoryBreakdown": {
            "A": {"credit": 100, "debit": 40},
            "B": {"credit": 0, "debit": 10},
        },
    }


def test_ledger_summary_over_models_uses_category_values():
    entries = [
        LedgerEntry(credit=250.0, debit=0.0, category=LedgerCategory.REVENUE),
        LedgerEntry(credit=0.0, debit=75.5, category=LedgerCategory.OPERATIONAL),
    ]

    summary = ledger_summary(entries)

    assert summary.balance == 174.5
    assert set(summary.category_breakdown) == {"Revenue", "Operational"}
    assert "Expenses" not in summary.category_breakdown


def test_ledger_summary_is_order_independent():
    entries = [
        {"credit": 10 * i, "debit": 0, "category": "Revenue"} for i in range(1, 6)
    ] + [
        {"credit": 0, "debit": 3 * i, "category": "Expenses"} for i in range(1, 6)
    ]
    shuffled = list(entries)
    random.Random(7).shuffle(shuffled)

    assert ledger_summary(entries) == ledger_summary(shuffled)


def test_ledger_totals_empty():
    totals = ledger_totals([])
    assert totals.total_credit == 0
    assert totals.total_debit == 0
    assert totals.balance == 0


def test_ledger_summary_empty():
    summary = ledger_summary([])
    assert summary.total_credit == 0
    assert summary.total_debit == 0
    assert summary.balance == 0
    assert summary.category_breakdown == {}


def test_file_dashboard_example():
    statuses = ["new", "new", "handling", "completed", "hold"]
    files = [LandFile(project_status=ProjectStatus(s)) for s in statuses]

    dashboard = file_dashboard(files).model_dump(by_alias=True)

    assert dashboard == {
        "totalFiles": 5,
        "newProjects": 2,
        "handlingProjects": 1,
        "completedProjects": 1,
    }


def test_file_dashboard_accepts_plain_values():
    files = [{"project_status": "hold"}, {"project_status": "completed"}]
    dashboard = file_dashboard(files)

    assert dashboard.total_files == 2
    assert dashboard.completed_projects == 1
    assert dashboard.new_projects == 0


def test_file_dashboard_empty():
    dashboard = file_dashboard([])
    assert dashboard.total_files == 0
    assert dashboard.new_projects == 0
    assert dashboard.handling_projects == 0
    assert dashboard.completed_projects == 0
