"""
Stock-Out Service - issue requests that only touch stock once approved.

Request creation checks stock for information only: several requests may
queue against the same stock and the decision is made at approval time.
Approval claims the request and debits the sparepart with two conditional
UPDATEs in one transaction, so whichever approval commits first wins and a
later one sees the reduced stock.
"""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
from typing import List, Optional, Tuple
from uuid import UUID
from datetime import date, datetime, time, timezone
import logging

from sparestock.core.exceptions import (
    InsufficientStockError, InvalidStateError, NotFoundError, SpareStockError, ValidationError
)
from sparestock.models import Employee, HeavyEquipment, Sparepart, StockOut, StockOutStatus
from sparestock.schemas.stock import StockOutCreate
from sparestock.services import audit_service
from sparestock.services.approval import Approve, Reject, apply_decision, ensure_deletable, is_terminal
from sparestock.services.master_service import MasterService

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StockOutService:
    """Stock issue request and approval business logic"""

    @staticmethod
    def create_request(
        db: Session,
        data: StockOutCreate,
        performed_by: Optional[str] = None
    ) -> Tuple[StockOut, Optional[str]]:
        """
        Queue a pending request. Returns the request and a warning when the
        quantity exceeds what is on hand right now.
        """
        if data.quantity is None or data.quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")

        sparepart = MasterService.get_sparepart(db, data.sparepart_id)
        equipment = db.query(HeavyEquipment).filter(HeavyEquipment.id == data.equipment_id).first()
        if not equipment:
            raise NotFoundError("HeavyEquipment", data.equipment_id)
        if not db.query(Employee.id).filter(Employee.id == data.employee_id).first():
            raise NotFoundError("Employee", data.employee_id)

        warning = None
        if data.quantity > sparepart.current_stock:
            warning = (
                f"Requested {data.quantity} {sparepart.unit} but only "
                f"{sparepart.current_stock} {sparepart.unit} on hand"
            )

        try:
            stock_out = StockOut(
                sparepart_id=sparepart.id,
                equipment_id=equipment.id,
                employee_id=data.employee_id,
                quantity=data.quantity,
                purpose=data.purpose or None,
                scanned_barcode=data.scanned_barcode or None,
                status=StockOutStatus.PENDING.value,
                created_by=performed_by
            )
            db.add(stock_out)
            db.flush()
            audit_service.record(
                db, "stock_out", stock_out.id, "CREATE",
                performed_by=performed_by,
                after={"sparepart": sparepart.code, "quantity": data.quantity, "equipment": equipment.code},
                identifier=f"{sparepart.code} (-{data.quantity}) for {equipment.code}"
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(stock_out)
        logger.info(f"Stock out request {stock_out.id}: {sparepart.code} x{data.quantity} pending")
        return stock_out, warning

    @staticmethod
    def get_request(db: Session, stock_out_id: UUID) -> StockOut:
        stock_out = db.query(StockOut).options(
            joinedload(StockOut.sparepart),
            joinedload(StockOut.equipment),
            joinedload(StockOut.employee)
        ).filter(StockOut.id == stock_out_id).first()
        if not stock_out:
            raise NotFoundError("StockOut", stock_out_id)
        return stock_out

    @staticmethod
    def list_requests(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        per_page: int = 20
    ) -> Tuple[List[StockOut], int]:
        """Get requests with filters and pagination, newest first"""
        query = db.query(StockOut)\
            .join(Sparepart, StockOut.sparepart_id == Sparepart.id)\
            .join(Employee, StockOut.employee_id == Employee.id)

        if status and status != "all":
            query = query.filter(StockOut.status == StockOutStatus(status).value)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Sparepart.code.ilike(search_term),
                    Sparepart.name.ilike(search_term),
                    Employee.name.ilike(search_term)
                )
            )

        if date_from:
            query = query.filter(StockOut.created_at >= datetime.combine(date_from, time.min))
        if date_to:
            query = query.filter(StockOut.created_at <= datetime.combine(date_to, time.max))

        total = query.count()

        requests = query.options(
            joinedload(StockOut.sparepart),
            joinedload(StockOut.equipment),
            joinedload(StockOut.employee)
        ).order_by(StockOut.created_at.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()

        return requests, total

    @staticmethod
    def approve(db: Session, stock_out_id: UUID, performed_by: Optional[str] = None) -> Tuple[StockOut, int]:
        """
        Approve a pending request and debit stock. Returns the request and
        the new stock level.
        """
        stock_out = StockOutService.get_request(db, stock_out_id)
        decision = Approve(at=_now())
        new_status = apply_decision(stock_out.status, decision)
        sparepart_id = stock_out.sparepart_id
        quantity = stock_out.quantity

        try:
            claimed = db.query(StockOut).filter(
                StockOut.id == stock_out_id,
                StockOut.status == StockOutStatus.PENDING.value
            ).update({
                StockOut.status: new_status.value,
                StockOut.approved_at: decision.at,
                StockOut.decided_by: performed_by
            }, synchronize_session=False)
            if claimed == 0:
                raise InvalidStateError("Request was decided by someone else")

            debited = db.query(Sparepart).filter(
                Sparepart.id == sparepart_id,
                Sparepart.current_stock >= quantity
            ).update(
                {Sparepart.current_stock: Sparepart.current_stock - quantity},
                synchronize_session=False
            )
            if debited == 0:
                db.rollback()
                available, unit = db.query(Sparepart.current_stock, Sparepart.unit)\
                    .filter(Sparepart.id == sparepart_id).one()
                raise InsufficientStockError(sparepart_id, quantity, available, unit)

            audit_service.record(
                db, "stock_out", stock_out_id, "APPROVE",
                performed_by=performed_by,
                before={"status": StockOutStatus.PENDING.value},
                after={"status": new_status.value, "quantity": quantity},
                identifier=f"{stock_out.sparepart.code} (-{quantity})"
            )
            db.commit()
        except SpareStockError as e:
            db.rollback()
            logger.warning(f"Approval of stock out {stock_out_id} refused: {e}")
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(stock_out)
        new_stock = db.query(Sparepart.current_stock).filter(Sparepart.id == sparepart_id).scalar()
        logger.info(f"Stock out {stock_out_id} approved: {stock_out.sparepart.code} -{quantity} -> {new_stock}")
        return stock_out, new_stock

    @staticmethod
    def reject(db: Session, stock_out_id: UUID, reason: str, performed_by: Optional[str] = None) -> StockOut:
        """Reject a pending request with a reason; stock is untouched."""
        stock_out = StockOutService.get_request(db, stock_out_id)
        if is_terminal(stock_out.status):
            raise InvalidStateError(f"Only pending requests can be rejected; request is {stock_out.status}")
        decision = Reject(reason=reason, at=_now())
        new_status = apply_decision(stock_out.status, decision)

        try:
            claimed = db.query(StockOut).filter(
                StockOut.id == stock_out_id,
                StockOut.status == StockOutStatus.PENDING.value
            ).update({
                StockOut.status: new_status.value,
                StockOut.rejected_reason: decision.reason,
                StockOut.rejected_at: decision.at,
                StockOut.decided_by: performed_by
            }, synchronize_session=False)
            if claimed == 0:
                raise InvalidStateError("Request was decided by someone else")

            audit_service.record(
                db, "stock_out", stock_out_id, "REJECT",
                performed_by=performed_by,
                before={"status": StockOutStatus.PENDING.value},
                after={"status": new_status.value, "reason": decision.reason},
                identifier=stock_out.sparepart.code
            )
            db.commit()
        except SpareStockError as e:
            db.rollback()
            logger.warning(f"Rejection of stock out {stock_out_id} refused: {e}")
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(stock_out)
        logger.info(f"Stock out {stock_out_id} rejected: {decision.reason}")
        return stock_out

    @staticmethod
    def delete_request(db: Session, stock_out_id: UUID, performed_by: Optional[str] = None) -> None:
        """Withdraw a pending request; no stock effect."""
        stock_out = StockOutService.get_request(db, stock_out_id)
        ensure_deletable(stock_out.status)

        try:
            audit_service.record(
                db, "stock_out", stock_out_id, "DELETE",
                performed_by=performed_by,
                before={"status": stock_out.status, "quantity": stock_out.quantity},
                identifier=stock_out.sparepart.code
            )
            deleted = db.query(StockOut).filter(
                StockOut.id == stock_out_id,
                StockOut.status == StockOutStatus.PENDING.value
            ).delete(synchronize_session=False)
            if deleted == 0:
                raise InvalidStateError("Request was decided before it could be deleted")
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.expunge(stock_out)
        logger.info(f"Stock out request {stock_out_id} deleted")

    @staticmethod
    def get_approval_stats(db: Session) -> dict:
        """Queue size plus today's decisions"""
        start_of_day = datetime.combine(_now().date(), time.min, tzinfo=timezone.utc)

        total_pending = db.query(func.count(StockOut.id)).filter(
            StockOut.status == StockOutStatus.PENDING.value
        ).scalar()
        approved_today = db.query(func.count(StockOut.id)).filter(
            StockOut.status == StockOutStatus.APPROVED.value,
            StockOut.approved_at >= start_of_day
        ).scalar()
        rejected_today = db.query(func.count(StockOut.id)).filter(
            StockOut.status == StockOutStatus.REJECTED.value,
            StockOut.rejected_at >= start_of_day
        ).scalar()

        return {
            "total_pending": total_pending or 0,
            "approved_today": approved_today or 0,
            "rejected_today": rejected_today or 0
        }
