"""
Audit Service - records who changed what, inside the caller's transaction
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from sparestock.models import AuditLog

TABLE_LABELS = {
    "sparepart": "Sparepart",
    "heavy_equipment": "Heavy Equipment",
    "employee": "Employee",
    "supplier": "Supplier",
    "stock_in": "Stock In",
    "stock_out": "Stock Out",
    "stock_opname": "Stock Opname",
    "warranty": "Warranty",
}


def describe(action: str, table_name: str, identifier: Optional[str] = None) -> str:
    """Human readable line for the activity log, e.g. 'Approve Stock Out: FLT-001 (-5)'"""
    label = TABLE_LABELS.get(table_name, table_name)
    verb = action.capitalize()
    return f"{verb} {label}: {identifier}" if identifier else f"{verb} {label}"


def record(
    db: Session,
    table_name: str,
    record_id: Any,
    action: str,
    performed_by: Optional[str] = None,
    before: Optional[Dict] = None,
    after: Optional[Dict] = None,
    identifier: Optional[str] = None,
) -> AuditLog:
    """Add an audit row; committed or rolled back together with the mutation it describes."""
    entry = AuditLog(
        table_name=table_name,
        record_id=str(record_id),
        action=action,
        performed_by=performed_by,
        before_data=before,
        after_data=after,
        description=describe(action, table_name, identifier),
    )
    db.add(entry)
    return entry
