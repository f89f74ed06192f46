"""
Stock Opname API - count sheets, submissions and history
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from sparestock.core import get_db, settings
from sparestock.api.deps import get_actor
from sparestock.schemas import OpnameDetail, OpnameItemResponse, OpnameResult, OpnameSubmit, OpnameSummary
from sparestock.services import OpnameService

router = APIRouter(prefix="/opname", tags=["Stock Opname"])


@router.get("/sheet")
def opname_sheet(
    category_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Current system stock per sparepart, to be filled with physical counts"""
    spareparts = OpnameService.get_opname_sheet(db, category_id, search)
    return {
        "items": [
            {
                "sparepart_id": str(sp.id),
                "code": sp.code,
                "name": sp.name,
                "unit": sp.unit,
                "rack_location": sp.rack_location,
                "system_stock": sp.current_stock,
            }
            for sp in spareparts
        ],
        "total": len(spareparts)
    }


@router.post("", status_code=201, response_model=OpnameResult)
def submit_opname(
    data: OpnameSubmit,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    """Apply a physical count; all or nothing"""
    return OpnameService.submit(db, data, performed_by=actor)


@router.get("/history")
def opname_history(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db)
):
    sessions, total = OpnameService.list_sessions(db, page, per_page)
    return {
        "sessions": [OpnameSummary.model_validate(s) for s in sessions],
        "total": total,
        "page": page,
        "per_page": per_page
    }


@router.get("/history/{opname_id}", response_model=OpnameDetail)
def opname_detail(opname_id: UUID, db: Session = Depends(get_db)):
    opname = OpnameService.get_session(db, opname_id)
    items = [
        OpnameItemResponse(
            sparepart_id=item.sparepart_id,
            code=item.sparepart.code,
            name=item.sparepart.name,
            unit=item.sparepart.unit,
            system_stock=item.system_stock,
            physical_stock=item.physical_stock,
            difference=item.difference,
            notes=item.notes
        )
        for item in opname.items
    ]
    return OpnameDetail(**OpnameSummary.model_validate(opname).model_dump(), items=items)
