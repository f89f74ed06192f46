"""
Master Service - the reference data the stock ledger points at, and the
guard that keeps referenced records from being deleted
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, Optional
from uuid import UUID
import logging

from sparestock.core.exceptions import NotFoundError, ReferentialIntegrityError, ValidationError
from sparestock.models import (
    Category, Employee, HeavyEquipment, Sparepart, StockIn, StockOpnameItem, StockOut, Supplier
)
from sparestock.schemas.master import EmployeeCreate, EquipmentCreate, SparepartCreate, SupplierCreate
from sparestock.services import audit_service

logger = logging.getLogger(__name__)

# kind -> (model, label, {reference name: (movement model, fk column)})
REFERENCE_MAP = {
    "sparepart": (Sparepart, "Sparepart", {
        "stock_in": (StockIn, StockIn.sparepart_id),
        "stock_out": (StockOut, StockOut.sparepart_id),
        "opname_item": (StockOpnameItem, StockOpnameItem.sparepart_id),
    }),
    "equipment": (HeavyEquipment, "HeavyEquipment", {
        "stock_out": (StockOut, StockOut.equipment_id),
    }),
    "employee": (Employee, "Employee", {
        "stock_out": (StockOut, StockOut.employee_id),
    }),
    "supplier": (Supplier, "Supplier", {
        "stock_in": (StockIn, StockIn.supplier_id),
    }),
}


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class MasterService:
    """Master data business logic"""

    @staticmethod
    def get_sparepart(db: Session, sparepart_id: UUID) -> Sparepart:
        sparepart = db.query(Sparepart).filter(Sparepart.id == sparepart_id).first()
        if not sparepart:
            raise NotFoundError("Sparepart", sparepart_id)
        return sparepart

    @staticmethod
    def get_sparepart_by_code(db: Session, code: str) -> Optional[Sparepart]:
        return db.query(Sparepart).filter(Sparepart.code == normalize_code(code)).first()

    @staticmethod
    def create_sparepart(db: Session, data: SparepartCreate, performed_by: Optional[str] = None) -> Sparepart:
        """Register a sparepart; its initial stock is the first ledger balance."""
        code = normalize_code(data.code)
        name = (data.name or "").strip()
        if not code or not name:
            raise ValidationError("Sparepart code and name are required")
        if data.initial_stock < 0 or data.min_stock < 0:
            raise ValidationError("Stock values cannot be negative")
        if MasterService.get_sparepart_by_code(db, code):
            raise ValidationError(f"Sparepart code {code} already exists")
        if data.category_id and not db.query(Category.id).filter(Category.id == data.category_id).first():
            raise NotFoundError("Category", data.category_id)

        sparepart = Sparepart(
            code=code,
            name=name,
            category_id=data.category_id,
            brand=data.brand or None,
            unit=data.unit,
            min_stock=data.min_stock,
            rack_location=data.rack_location or None,
            initial_stock=data.initial_stock,
            current_stock=data.initial_stock
        )
        db.add(sparepart)
        db.flush()
        audit_service.record(
            db, "sparepart", sparepart.id, "CREATE",
            performed_by=performed_by,
            after={"code": code, "name": name, "initial_stock": data.initial_stock},
            identifier=code
        )
        db.commit()
        db.refresh(sparepart)
        return sparepart

    @staticmethod
    def create_equipment(db: Session, data: EquipmentCreate) -> HeavyEquipment:
        code = normalize_code(data.code)
        if not code or not data.name.strip():
            raise ValidationError("Equipment code and name are required")
        if db.query(HeavyEquipment.id).filter(HeavyEquipment.code == code).first():
            raise ValidationError(f"Equipment code {code} already exists")

        equipment = HeavyEquipment(code=code, name=data.name.strip(), type=data.type, brand=data.brand)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def create_employee(db: Session, data: EmployeeCreate) -> Employee:
        nik = normalize_code(data.nik)
        if not nik or not data.name.strip():
            raise ValidationError("Employee NIK and name are required")
        if db.query(Employee.id).filter(Employee.nik == nik).first():
            raise ValidationError(f"Employee NIK {nik} already exists")

        employee = Employee(nik=nik, name=data.name.strip(), position=data.position)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    @staticmethod
    def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
        if not data.name.strip():
            raise ValidationError("Supplier name is required")
        supplier = Supplier(name=data.name.strip(), phone=data.phone, address=data.address)
        db.add(supplier)
        db.commit()
        db.refresh(supplier)
        return supplier

    @staticmethod
    def find_references(db: Session, kind: str, entity_id: UUID) -> Dict[str, int]:
        """Count movement records that point at a master record."""
        if kind not in REFERENCE_MAP:
            raise ValidationError(f"Unknown master type: {kind}")

        model, label, references = REFERENCE_MAP[kind]
        if not db.query(model.id).filter(model.id == entity_id).first():
            raise NotFoundError(label, entity_id)

        return {
            name: db.query(func.count(movement.id)).filter(column == entity_id).scalar() or 0
            for name, (movement, column) in references.items()
        }

    @staticmethod
    def delete_master(db: Session, kind: str, entity_id: UUID, performed_by: Optional[str] = None) -> None:
        """Delete a master record that no movement references."""
        references = MasterService.find_references(db, kind, entity_id)
        model, label, _ = REFERENCE_MAP[kind]

        if any(references.values()):
            logger.warning(f"Refused to delete {label} {entity_id}: {references}")
            raise ReferentialIntegrityError(label, entity_id, references)

        entity = db.query(model).filter(model.id == entity_id).first()
        try:
            audit_service.record(
                db, model.__tablename__, entity_id, "DELETE",
                performed_by=performed_by,
                before={"name": entity.name},
                identifier=getattr(entity, "code", None) or getattr(entity, "nik", None) or entity.name
            )
            db.delete(entity)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Deleted {label} {entity_id}")

    @staticmethod
    def delete_sparepart(db: Session, sparepart_id: UUID, performed_by: Optional[str] = None) -> None:
        MasterService.delete_master(db, "sparepart", sparepart_id, performed_by)

    @staticmethod
    def delete_equipment(db: Session, equipment_id: UUID, performed_by: Optional[str] = None) -> None:
        MasterService.delete_master(db, "equipment", equipment_id, performed_by)

    @staticmethod
    def delete_employee(db: Session, employee_id: UUID, performed_by: Optional[str] = None) -> None:
        MasterService.delete_master(db, "employee", employee_id, performed_by)
