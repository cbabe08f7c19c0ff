"""
Audit logging service for tracking changes to caller-owned records.

Audit events are written as structured lines on the ``mclp.audit``
logger, one per successful mutation.
"""

import logging
from typing import Any, Dict, Optional

audit_logger = logging.getLogger("mclp.audit")


class AuditAction:
    """Standardized audit action constants."""

    # Land files
    FILE_CREATED = "FILE_CREATED"
    FILE_UPDATED = "FILE_UPDATED"
    FILE_STATUS_CHANGED = "FILE_STATUS_CHANGED"
    FILE_HANDLING_UPDATED = "FILE_HANDLING_UPDATED"
    FILE_DELETED = "FILE_DELETED"

    # Ledger
    LEDGER_ENTRY_CREATED = "LEDGER_ENTRY_CREATED"
    LEDGER_ENTRY_UPDATED = "LEDGER_ENTRY_UPDATED"
    LEDGER_ENTRY_DELETED = "LEDGER_ENTRY_DELETED"

    # Documents
    DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"


def log_event(
    action: str,
    actor_id: str,
    entity_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an audit event.

    Args:
        action: Action being performed (use AuditAction constants)
        actor_id: Caller performing the action
        entity_id: ID of the affected record
        metadata: Additional context
    """
    audit_logger.info(
        action,
        extra={
            "action": action,
            "actor_id": actor_id,
            "entity_id": entity_id,
            "metadata": metadata or {},
        }
    )
