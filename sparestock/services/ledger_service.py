"""
Ledger Service - recompute stock from movements and report drift.

    expected = initial_stock + stock in - approved stock out + opname differences
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List
from uuid import UUID
import logging

from sparestock.models import Sparepart, StockIn, StockOpnameItem, StockOut, StockOutStatus
from sparestock.services.master_service import MasterService

logger = logging.getLogger(__name__)


class LedgerService:
    """Stock ledger consistency checks"""

    @staticmethod
    def _movement_totals(db: Session) -> Dict[str, Dict[UUID, int]]:
        """Per-sparepart sums of each movement type, one grouped query each"""
        stock_in = db.query(StockIn.sparepart_id, func.sum(StockIn.quantity))\
            .group_by(StockIn.sparepart_id).all()
        stock_out = db.query(StockOut.sparepart_id, func.sum(StockOut.quantity))\
            .filter(StockOut.status == StockOutStatus.APPROVED.value)\
            .group_by(StockOut.sparepart_id).all()
        opname = db.query(StockOpnameItem.sparepart_id, func.sum(StockOpnameItem.difference))\
            .group_by(StockOpnameItem.sparepart_id).all()

        return {
            "stock_in": {sid: int(total or 0) for sid, total in stock_in},
            "stock_out": {sid: int(total or 0) for sid, total in stock_out},
            "opname": {sid: int(total or 0) for sid, total in opname},
        }

    @staticmethod
    def expected_stock(db: Session, sparepart_id: UUID) -> int:
        """Stock the movement history says this sparepart should hold"""
        sparepart = MasterService.get_sparepart(db, sparepart_id)

        stock_in = db.query(func.coalesce(func.sum(StockIn.quantity), 0))\
            .filter(StockIn.sparepart_id == sparepart_id).scalar()
        stock_out = db.query(func.coalesce(func.sum(StockOut.quantity), 0))\
            .filter(
                StockOut.sparepart_id == sparepart_id,
                StockOut.status == StockOutStatus.APPROVED.value
            ).scalar()
        opname = db.query(func.coalesce(func.sum(StockOpnameItem.difference), 0))\
            .filter(StockOpnameItem.sparepart_id == sparepart_id).scalar()

        return sparepart.initial_stock + int(stock_in) - int(stock_out) + int(opname)

    @staticmethod
    def find_drift(db: Session) -> List[dict]:
        """
        Spareparts whose current_stock disagrees with their movement history.
        An empty list means the ledger is consistent.
        """
        totals = LedgerService._movement_totals(db)
        drift = []

        for sparepart in db.query(Sparepart).order_by(Sparepart.code).all():
            expected = (
                sparepart.initial_stock
                + totals["stock_in"].get(sparepart.id, 0)
                - totals["stock_out"].get(sparepart.id, 0)
                + totals["opname"].get(sparepart.id, 0)
            )
            if expected != sparepart.current_stock:
                drift.append({
                    "sparepart_id": sparepart.id,
                    "code": sparepart.code,
                    "current_stock": sparepart.current_stock,
                    "expected_stock": expected,
                    "difference": sparepart.current_stock - expected,
                })

        if drift:
            logger.warning(f"Ledger drift on {len(drift)} sparepart(s): {[d['code'] for d in drift]}")
        return drift
