"""
Stock-In API - receipts into the warehouse
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from sparestock.core import get_db, settings
from sparestock.api.deps import get_actor
from sparestock.schemas import StockInCreate, StockInResponse, WarrantyClaim, WarrantyResponse
from sparestock.services import StockInService

router = APIRouter(prefix="/stock-in", tags=["Stock In"])


def _row(stock_in) -> dict:
    data = StockInResponse.model_validate(stock_in).model_dump()
    data["sparepart_code"] = stock_in.sparepart.code if stock_in.sparepart else None
    data["sparepart_name"] = stock_in.sparepart.name if stock_in.sparepart else None
    data["warranty_id"] = stock_in.warranty.id if stock_in.warranty else None
    return data


@router.post("", status_code=201)
def create_stock_in(
    data: StockInCreate,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Record a receipt; stock increases immediately"""
    stock_in, new_stock = StockInService.create_stock_in(db, data, performed_by=actor)
    return {"stock_in": _row(stock_in), "new_stock": new_stock}


@router.get("")
def list_stock_ins(
    search: Optional[str] = Query(None),
    supplier_id: Optional[UUID] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    stock_ins, total = StockInService.list_stock_ins(db, search, supplier_id, date_from, date_to, page, per_page)
    return {
        "stock_ins": [_row(s) for s in stock_ins],
        "total": total,
        "page": page,
        "per_page": per_page
    }


@router.get("/{stock_in_id}")
def get_stock_in(stock_in_id: UUID, db: Session = Depends(get_db)):
    return _row(StockInService.get_stock_in(db, stock_in_id))


@router.delete("/{stock_in_id}")
def delete_stock_in(
    stock_in_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Remove a receipt and take its quantity back out of stock"""
    new_stock = StockInService.delete_stock_in(db, stock_in_id, performed_by=actor)
    return {"success": True, "new_stock": new_stock}


# ===================== WARRANTIES =====================

@router.get("/warranties/{warranty_id}", response_model=WarrantyResponse)
def get_warranty(warranty_id: UUID, db: Session = Depends(get_db)):
    return StockInService.get_warranty(db, warranty_id)


@router.post("/warranties/{warranty_id}/claim", response_model=WarrantyResponse)
def claim_warranty(
    warranty_id: UUID,
    data: WarrantyClaim,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Claim a receipt's warranty; a second claim is refused"""
    return StockInService.claim_warranty(db, warranty_id, data.notes, performed_by=actor)
