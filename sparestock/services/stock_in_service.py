"""
Stock-In Service - receipts that unconditionally increase stock
"""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import List, Optional, Tuple
from uuid import UUID
from datetime import date, datetime, time, timezone
import logging

from sparestock.core.exceptions import InsufficientStockError, InvalidStateError, NotFoundError, SpareStockError, ValidationError
from sparestock.models import Sparepart, StockIn, Supplier, Warranty
from sparestock.schemas.stock import StockInCreate
from sparestock.services import audit_service
from sparestock.services.master_service import MasterService

logger = logging.getLogger(__name__)


def _date_range(query, column, date_from: Optional[date], date_to: Optional[date]):
    if date_from:
        query = query.filter(column >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(column <= datetime.combine(date_to, time.max))
    return query


class StockInService:
    """Stock receipt business logic"""

    @staticmethod
    def create_stock_in(db: Session, data: StockInCreate, performed_by: Optional[str] = None) -> Tuple[StockIn, int]:
        """
        Record a receipt and credit the sparepart in one transaction.
        Returns the created record and the new stock level.
        """
        if data.quantity is None or data.quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")
        if data.purchase_price is not None and data.purchase_price < 0:
            raise ValidationError("Purchase price cannot be negative")

        sparepart = MasterService.get_sparepart(db, data.sparepart_id)
        if data.supplier_id and not db.query(Supplier.id).filter(Supplier.id == data.supplier_id).first():
            raise NotFoundError("Supplier", data.supplier_id)

        try:
            stock_in = StockIn(
                sparepart_id=sparepart.id,
                supplier_id=data.supplier_id,
                quantity=data.quantity,
                invoice_number=data.invoice_number or None,
                purchase_price=data.purchase_price,
                warranty_expiry=data.warranty_expiry,
                notes=data.notes or None,
                created_by=performed_by
            )
            db.add(stock_in)
            db.flush()

            if data.warranty_expiry:
                db.add(Warranty(
                    stock_in_id=stock_in.id,
                    sparepart_id=sparepart.id,
                    expiry_date=data.warranty_expiry,
                    claim_status="active"
                ))

            # Single UPDATE; concurrent receipts commute
            db.query(Sparepart).filter(Sparepart.id == sparepart.id).update(
                {Sparepart.current_stock: Sparepart.current_stock + data.quantity},
                synchronize_session=False
            )

            audit_service.record(
                db, "stock_in", stock_in.id, "CREATE",
                performed_by=performed_by,
                after={"sparepart": sparepart.code, "quantity": data.quantity,
                       "invoice_number": stock_in.invoice_number},
                identifier=f"{sparepart.code} (+{data.quantity})"
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(stock_in)
        db.refresh(sparepart)
        logger.info(f"Stock in {stock_in.id}: {sparepart.code} +{data.quantity} -> {sparepart.current_stock}")
        return stock_in, sparepart.current_stock

    @staticmethod
    def get_stock_in(db: Session, stock_in_id: UUID) -> StockIn:
        stock_in = db.query(StockIn).options(
            joinedload(StockIn.sparepart), joinedload(StockIn.supplier)
        ).filter(StockIn.id == stock_in_id).first()
        if not stock_in:
            raise NotFoundError("StockIn", stock_in_id)
        return stock_in

    @staticmethod
    def list_stock_ins(
        db: Session,
        search: Optional[str] = None,
        supplier_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        per_page: int = 20
    ) -> Tuple[List[StockIn], int]:
        """Get receipts with filters and pagination, newest first"""
        query = db.query(StockIn).join(Sparepart, StockIn.sparepart_id == Sparepart.id)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    StockIn.invoice_number.ilike(search_term),
                    Sparepart.code.ilike(search_term),
                    Sparepart.name.ilike(search_term)
                )
            )

        if supplier_id:
            query = query.filter(StockIn.supplier_id == supplier_id)

        query = _date_range(query, StockIn.created_at, date_from, date_to)

        total = query.count()

        stock_ins = query.options(joinedload(StockIn.sparepart))\
            .order_by(StockIn.created_at.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()

        return stock_ins, total

    @staticmethod
    def delete_stock_in(db: Session, stock_in_id: UUID, performed_by: Optional[str] = None) -> int:
        """
        Remove a receipt and take its quantity back out of stock.
        Fails with InsufficientStockError when that stock has already been
        issued; nothing changes in that case. Returns the new stock level.
        """
        stock_in = StockInService.get_stock_in(db, stock_in_id)
        sparepart = stock_in.sparepart
        quantity = stock_in.quantity

        try:
            updated = db.query(Sparepart).filter(
                Sparepart.id == sparepart.id,
                Sparepart.current_stock >= quantity
            ).update(
                {Sparepart.current_stock: Sparepart.current_stock - quantity},
                synchronize_session=False
            )
            if updated == 0:
                db.rollback()
                db.refresh(sparepart)
                raise InsufficientStockError(sparepart.id, quantity, sparepart.current_stock, sparepart.unit)

            audit_service.record(
                db, "stock_in", stock_in.id, "DELETE",
                performed_by=performed_by,
                before={"sparepart": sparepart.code, "quantity": quantity,
                        "invoice_number": stock_in.invoice_number},
                identifier=f"{sparepart.code} (-{quantity})"
            )
            db.delete(stock_in)
            db.commit()
        except InsufficientStockError:
            logger.warning(f"Stock in {stock_in_id} not deleted: stock of {sparepart.code} already issued")
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(sparepart)
        logger.info(f"Stock in {stock_in_id} deleted: {sparepart.code} -{quantity} -> {sparepart.current_stock}")
        return sparepart.current_stock

    @staticmethod
    def get_warranty(db: Session, warranty_id: UUID) -> Warranty:
        warranty = db.query(Warranty).filter(Warranty.id == warranty_id).first()
        if not warranty:
            raise NotFoundError("Warranty", warranty_id)
        return warranty

    @staticmethod
    def claim_warranty(
        db: Session,
        warranty_id: UUID,
        notes: Optional[str] = None,
        performed_by: Optional[str] = None
    ) -> Warranty:
        """Mark a warranty as claimed; a warranty can be claimed once."""
        warranty = StockInService.get_warranty(db, warranty_id)
        if warranty.claim_status != "active":
            raise InvalidStateError(f"Warranty {warranty_id} was already {warranty.claim_status}")

        claim_date = datetime.now(timezone.utc)
        try:
            claimed = db.query(Warranty).filter(
                Warranty.id == warranty_id,
                Warranty.claim_status == "active"
            ).update({
                Warranty.claim_status: "claimed",
                Warranty.claim_date: claim_date,
                Warranty.claim_notes: (notes or "").strip() or None
            }, synchronize_session=False)
            if claimed == 0:
                raise InvalidStateError(f"Warranty {warranty_id} was claimed by someone else")

            audit_service.record(
                db, "warranty", warranty_id, "CLAIM",
                performed_by=performed_by,
                before={"claim_status": "active"},
                after={"claim_status": "claimed", "notes": notes},
                identifier=str(warranty.stock_in_id)
            )
            db.commit()
        except SpareStockError as e:
            db.rollback()
            logger.warning(f"Warranty claim {warranty_id} refused: {e}")
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(warranty)
        logger.info(f"Warranty {warranty_id} claimed")
        return warranty
