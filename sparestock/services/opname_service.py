"""
Stock Opname Service - reconcile system stock with a physical count.

A submitted batch is processed in one transaction: every counted part is
snapshotted and recorded (zero differences included, for the audit trail),
and each part whose count differs is set to the counted value. Any missing
part or concurrent stock change aborts the whole batch.
"""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import List, Optional, Tuple
from uuid import UUID
from datetime import date
import logging

from sparestock.core.exceptions import NotFoundError, SpareStockError, StockConflictError, ValidationError
from sparestock.models import OpnameStatus, Sparepart, StockOpname, StockOpnameItem
from sparestock.schemas.opname import OpnameSubmit
from sparestock.services import audit_service

logger = logging.getLogger(__name__)


class OpnameService:
    """Stock opname business logic"""

    @staticmethod
    def get_opname_sheet(
        db: Session,
        category_id: Optional[UUID] = None,
        search: Optional[str] = None
    ) -> List[Sparepart]:
        """Spareparts with their current stock, ordered by code, to count against"""
        query = db.query(Sparepart)

        if category_id:
            query = query.filter(Sparepart.category_id == category_id)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Sparepart.code.ilike(search_term),
                    Sparepart.name.ilike(search_term)
                )
            )

        return query.order_by(Sparepart.code).all()

    @staticmethod
    def _validate(data: OpnameSubmit):
        if not data.items:
            raise ValidationError("At least one counted item is required")

        seen = set()
        for item in data.items:
            if item.physical_stock is None or item.physical_stock < 0:
                raise ValidationError(f"Physical stock for {item.sparepart_id} must be zero or more")
            if item.sparepart_id in seen:
                raise ValidationError(f"Sparepart {item.sparepart_id} is counted more than once")
            seen.add(item.sparepart_id)

    @staticmethod
    def submit(db: Session, data: OpnameSubmit, performed_by: Optional[str] = None) -> dict:
        """
        Record an opname session and apply its corrections atomically.

        Returns the session id, the number of adjusted spareparts and the
        session counters.
        """
        OpnameService._validate(data)

        try:
            opname = StockOpname(
                opname_date=data.opname_date or date.today(),
                notes=data.notes or None,
                status=OpnameStatus.COMPLETED.value,
                created_by=performed_by
            )
            adjustments = []

            # Lock in id order so overlapping batches queue instead of deadlocking
            locked = db.query(Sparepart)\
                .filter(Sparepart.id.in_([item.sparepart_id for item in data.items]))\
                .order_by(Sparepart.id)\
                .with_for_update()\
                .all()
            spareparts = {sp.id: sp for sp in locked}

            for position, item in enumerate(data.items):
                sparepart = spareparts.get(item.sparepart_id)
                if not sparepart:
                    raise NotFoundError("Sparepart", item.sparepart_id)

                system_stock = sparepart.current_stock
                difference = item.physical_stock - system_stock

                opname.items.append(StockOpnameItem(
                    sparepart_id=sparepart.id,
                    position=position,
                    system_stock=system_stock,
                    physical_stock=item.physical_stock,
                    difference=difference,
                    notes=item.notes or None
                ))

                if difference != 0:
                    adjustments.append((sparepart, system_stock, item.physical_stock, difference))

            opname.total_items = len(opname.items)
            opname.total_selisih = len(adjustments)
            opname.total_plus = sum(1 for adj in adjustments if adj[3] > 0)
            opname.total_minus = sum(1 for adj in adjustments if adj[3] < 0)
            db.add(opname)
            db.flush()

            for sparepart, system_stock, physical_stock, difference in adjustments:
                # Set to the counted value, but only over the stock we snapshotted
                updated = db.query(Sparepart).filter(
                    Sparepart.id == sparepart.id,
                    Sparepart.current_stock == system_stock
                ).update(
                    {Sparepart.current_stock: physical_stock},
                    synchronize_session=False
                )
                if updated == 0:
                    raise StockConflictError(sparepart.id, system_stock)

            audit_service.record(
                db, "stock_opname", opname.id, "OPNAME",
                performed_by=performed_by,
                after={
                    "total_items": opname.total_items,
                    "adjusted": [
                        {"sparepart": sp.code, "system_stock": system, "physical_stock": physical}
                        for sp, system, physical, _ in adjustments
                    ],
                },
                identifier=f"{opname.total_items} items, {opname.total_selisih} adjusted"
            )
            db.commit()
        except SpareStockError as e:
            db.rollback()
            logger.warning(f"Opname batch rejected: {e}")
            raise
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Opname {opname.id}: {opname.total_items} counted, {opname.total_selisih} adjusted "
            f"(+{opname.total_plus} / -{opname.total_minus})"
        )
        return {
            "opname_id": opname.id,
            "adjusted_count": opname.total_selisih,
            "total_items": opname.total_items,
            "total_selisih": opname.total_selisih,
            "total_plus": opname.total_plus,
            "total_minus": opname.total_minus
        }

    @staticmethod
    def list_sessions(db: Session, page: int = 1, per_page: int = 20) -> Tuple[List[StockOpname], int]:
        """Opname history, newest first"""
        query = db.query(StockOpname)
        total = query.count()
        sessions = query.order_by(StockOpname.created_at.desc(), StockOpname.opname_date.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()
        return sessions, total

    @staticmethod
    def get_session(db: Session, opname_id: UUID) -> StockOpname:
        """One session with its counted items and their spareparts"""
        opname = db.query(StockOpname).options(
            joinedload(StockOpname.items).joinedload(StockOpnameItem.sparepart)
        ).filter(StockOpname.id == opname_id).first()
        if not opname:
            raise NotFoundError("StockOpname", opname_id)
        return opname
