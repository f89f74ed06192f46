"""
Master Data API - registration and guarded deletion of reference records
"""
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from sparestock.core import get_db
from sparestock.api.deps import get_actor
from sparestock.schemas import (
    EmployeeCreate, EquipmentCreate, ReferenceReport, SparepartCreate, SparepartResponse, SupplierCreate
)
from sparestock.services import MasterService

router = APIRouter(prefix="/master", tags=["Master Data"])


# ===================== SPAREPARTS =====================

@router.post("/spareparts", status_code=201, response_model=SparepartResponse)
def create_sparepart(
    data: SparepartCreate,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    return MasterService.create_sparepart(db, data, performed_by=actor)


@router.get("/spareparts/{sparepart_id}", response_model=SparepartResponse)
def get_sparepart(sparepart_id: UUID, db: Session = Depends(get_db)):
    return MasterService.get_sparepart(db, sparepart_id)


@router.delete("/spareparts/{sparepart_id}")
def delete_sparepart(
    sparepart_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    MasterService.delete_sparepart(db, sparepart_id, performed_by=actor)
    return {"success": True}


# ===================== EQUIPMENT =====================

@router.post("/equipment", status_code=201)
def create_equipment(data: EquipmentCreate, db: Session = Depends(get_db)):
    equipment = MasterService.create_equipment(db, data)
    return {"id": str(equipment.id), "code": equipment.code, "name": equipment.name}


@router.delete("/equipment/{equipment_id}")
def delete_equipment(
    equipment_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    MasterService.delete_equipment(db, equipment_id, performed_by=actor)
    return {"success": True}


# ===================== EMPLOYEES =====================

@router.post("/employees", status_code=201)
def create_employee(data: EmployeeCreate, db: Session = Depends(get_db)):
    employee = MasterService.create_employee(db, data)
    return {"id": str(employee.id), "nik": employee.nik, "name": employee.name}


@router.delete("/employees/{employee_id}")
def delete_employee(
    employee_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    MasterService.delete_employee(db, employee_id, performed_by=actor)
    return {"success": True}


# ===================== SUPPLIERS =====================

@router.post("/suppliers", status_code=201)
def create_supplier(data: SupplierCreate, db: Session = Depends(get_db)):
    supplier = MasterService.create_supplier(db, data)
    return {"id": str(supplier.id), "name": supplier.name}


@router.delete("/suppliers/{supplier_id}")
def delete_supplier(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor)
):
    MasterService.delete_master(db, "supplier", supplier_id, performed_by=actor)
    return {"success": True}


# ===================== REFERENCES =====================

@router.get("/references/{kind}/{entity_id}", response_model=ReferenceReport)
def get_references(
    kind: str = Path(..., pattern="^(sparepart|equipment|employee|supplier)$"),
    entity_id: UUID = Path(...),
    db: Session = Depends(get_db)
):
    """How many movement records point at a master record, and whether it can go"""
    references = MasterService.find_references(db, kind, entity_id)
    return {
        "kind": kind,
        "id": entity_id,
        "references": references,
        "deletable": not any(references.values())
    }
