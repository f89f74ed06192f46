"""
Master Data Schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional
from uuid import UUID

class SparepartCreate(BaseModel):
    code: str = Field(..., max_length=50)
    name: str = Field(..., max_length=200)
    category_id: Optional[UUID] = None
    brand: Optional[str] = Field(None, max_length=50)
    unit: str = "pcs"
    min_stock: int = 0
    rack_location: Optional[str] = Field(None, max_length=50)
    initial_stock: int = 0

class SparepartResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    category_id: Optional[UUID]
    brand: Optional[str]
    unit: str
    min_stock: int
    rack_location: Optional[str]
    initial_stock: int
    current_stock: int
    stock_status: str

class EquipmentCreate(BaseModel):
    code: str = Field(..., max_length=50)
    name: str = Field(..., max_length=200)
    type: Optional[str] = None
    brand: Optional[str] = None

class EmployeeCreate(BaseModel):
    nik: str = Field(..., max_length=50)
    name: str = Field(..., max_length=200)
    position: Optional[str] = None

class SupplierCreate(BaseModel):
    name: str = Field(..., max_length=200)
    phone: Optional[str] = None
    address: Optional[str] = None

class ReferenceReport(BaseModel):
    kind: str
    id: UUID
    references: Dict[str, int]
    deletable: bool
