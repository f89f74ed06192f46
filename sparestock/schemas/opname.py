"""
Stock Opname Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from uuid import UUID
from datetime import date, datetime

class OpnameItemInput(BaseModel):
    sparepart_id: UUID
    physical_stock: int
    notes: Optional[str] = Field(None, max_length=500)

class OpnameSubmit(BaseModel):
    opname_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=500)
    items: List[OpnameItemInput]

class OpnameResult(BaseModel):
    opname_id: UUID
    adjusted_count: int
    total_items: int
    total_selisih: int
    total_plus: int
    total_minus: int

class OpnameSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    opname_date: date
    notes: Optional[str]
    status: str
    total_items: int
    total_selisih: int
    total_plus: int
    total_minus: int
    created_by: Optional[str]
    created_at: Optional[datetime]

class OpnameItemResponse(BaseModel):
    sparepart_id: UUID
    code: str
    name: str
    unit: str
    system_stock: int
    physical_stock: int
    difference: int
    notes: Optional[str]

class OpnameDetail(OpnameSummary):
    items: List[OpnameItemResponse] = []
