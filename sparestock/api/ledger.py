"""
Ledger API - stock consistency check
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime

from sparestock.core import get_db
from sparestock.services import LedgerService

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("/drift")
def ledger_drift(db: Session = Depends(get_db)):
    """
    Spareparts whose current stock differs from initial stock plus movements.
    An empty list means the ledger is consistent.
    """
    drift = LedgerService.find_drift(db)
    return {
        "consistent": not drift,
        "drift": drift,
        "checked_at": datetime.now().isoformat()
    }
