"""
Approval API - the pending stock-out queue for supervisors
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from sparestock.core import get_db, settings
from sparestock.api.deps import get_actor
from sparestock.api.stock_out import approve_response, list_response, reject_response
from sparestock.schemas import ApprovalStats, StockOutReject
from sparestock.services import StockOutService

router = APIRouter(prefix="/approvals", tags=["Approvals"])


@router.get("")
def list_approvals(
    status: str = Query("pending", pattern="^(all|pending|approved|rejected)$"),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Requests awaiting a decision unless another status is asked for"""
    return list_response(status, search, date_from, date_to, page, per_page, db)


@router.get("/stats", response_model=ApprovalStats)
def approval_stats(db: Session = Depends(get_db)):
    return StockOutService.get_approval_stats(db)


@router.post("/{stock_out_id}/approve")
def approve(
    stock_out_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    return approve_response(db, stock_out_id, actor)


@router.post("/{stock_out_id}/reject")
def reject(
    stock_out_id: UUID,
    data: StockOutReject,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    return reject_response(db, stock_out_id, data, actor)
