# Pydantic Schemas Package
from .stock import StockInCreate, StockInResponse, StockOutCreate, StockOutReject, StockOutResponse, ApprovalStats, WarrantyClaim, WarrantyResponse
from .opname import OpnameItemInput, OpnameSubmit, OpnameResult, OpnameSummary, OpnameItemResponse, OpnameDetail
from .master import SparepartCreate, SparepartResponse, EquipmentCreate, EmployeeCreate, SupplierCreate, ReferenceReport

__all__ = [
    "StockInCreate", "StockInResponse", "StockOutCreate", "StockOutReject", "StockOutResponse", "ApprovalStats", "WarrantyClaim", "WarrantyResponse",
    "OpnameItemInput", "OpnameSubmit", "OpnameResult", "OpnameSummary", "OpnameItemResponse", "OpnameDetail",
    "SparepartCreate", "SparepartResponse", "EquipmentCreate", "EmployeeCreate", "SupplierCreate", "ReferenceReport",
]
