"""
Stock Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal

class StockInCreate(BaseModel):
    sparepart_id: UUID
    quantity: int
    supplier_id: Optional[UUID] = None
    invoice_number: Optional[str] = Field(None, max_length=100)
    purchase_price: Optional[Decimal] = None
    warranty_expiry: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=500)

class StockInResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sparepart_id: UUID
    supplier_id: Optional[UUID]
    quantity: int
    invoice_number: Optional[str]
    purchase_price: Optional[Decimal]
    warranty_expiry: Optional[date]
    notes: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]

class StockOutCreate(BaseModel):
    sparepart_id: UUID
    equipment_id: UUID
    employee_id: UUID
    quantity: int
    purpose: Optional[str] = Field(None, max_length=500)
    scanned_barcode: Optional[str] = Field(None, max_length=100)

class StockOutReject(BaseModel):
    reason: str = ""  # Trimmed and length-checked by the Reject decision

class StockOutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sparepart_id: UUID
    equipment_id: UUID
    employee_id: UUID
    quantity: int
    purpose: Optional[str]
    status: str
    rejected_reason: Optional[str]
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    decided_by: Optional[str]
    created_by: Optional[str]
    created_at: Optional[datetime]

class ApprovalStats(BaseModel):
    total_pending: int
    approved_today: int
    rejected_today: int

class WarrantyClaim(BaseModel):
    notes: Optional[str] = Field(None, max_length=500)

class WarrantyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    stock_in_id: UUID
    sparepart_id: UUID
    expiry_date: date
    claim_status: str
    claim_date: Optional[datetime]
    claim_notes: Optional[str]
