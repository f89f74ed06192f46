"""
Stock-Out API - issue requests and their decisions
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from sparestock.core import get_db, settings
from sparestock.api.deps import get_actor
from sparestock.schemas import StockOutCreate, StockOutReject, StockOutResponse
from sparestock.services import StockOutService

router = APIRouter(prefix="/stock-out", tags=["Stock Out"])


def stock_out_row(stock_out) -> dict:
    data = StockOutResponse.model_validate(stock_out).model_dump()
    data["sparepart_code"] = stock_out.sparepart.code
    data["sparepart_name"] = stock_out.sparepart.name
    data["unit"] = stock_out.sparepart.unit
    data["current_stock"] = stock_out.sparepart.current_stock
    data["equipment_code"] = stock_out.equipment.code
    data["employee_name"] = stock_out.employee.name
    return data


def list_response(status, search, date_from, date_to, page, per_page, db) -> dict:
    requests, total = StockOutService.list_requests(db, status, search, date_from, date_to, page, per_page)
    return {
        "requests": [stock_out_row(r) for r in requests],
        "total": total,
        "page": page,
        "per_page": per_page
    }


def approve_response(db: Session, stock_out_id: UUID, actor: Optional[str]) -> dict:
    stock_out, new_stock = StockOutService.approve(db, stock_out_id, performed_by=actor)
    return {"stock_out": stock_out_row(stock_out), "new_stock": new_stock}


def reject_response(db: Session, stock_out_id: UUID, data: StockOutReject, actor: Optional[str]) -> dict:
    stock_out = StockOutService.reject(db, stock_out_id, data.reason, performed_by=actor)
    return {"stock_out": stock_out_row(stock_out)}


@router.post("", status_code=201)
def create_request(
    data: StockOutCreate,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Queue a pending request; stock changes only on approval"""
    stock_out, warning = StockOutService.create_request(db, data, performed_by=actor)
    return {"stock_out": stock_out_row(stock_out), "warning": warning}


@router.get("")
def list_requests(
    status: Optional[str] = Query(None, pattern="^(all|pending|approved|rejected)$"),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return list_response(status, search, date_from, date_to, page, per_page, db)


@router.get("/{stock_out_id}")
def get_request(stock_out_id: UUID, db: Session = Depends(get_db)):
    return stock_out_row(StockOutService.get_request(db, stock_out_id))


@router.post("/{stock_out_id}/approve")
def approve_request(
    stock_out_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    return approve_response(db, stock_out_id, actor)


@router.post("/{stock_out_id}/reject")
def reject_request(
    stock_out_id: UUID,
    data: StockOutReject,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    return reject_response(db, stock_out_id, data, actor)


@router.delete("/{stock_out_id}")
def delete_request(
    stock_out_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Withdraw a request that is still pending"""
    StockOutService.delete_request(db, stock_out_id, performed_by=actor)
    return {"success": True}
