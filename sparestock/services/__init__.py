# Services Package
from . import audit_service
from . import approval
from .master_service import MasterService
from .stock_in_service import StockInService
from .stock_out_service import StockOutService
from .opname_service import OpnameService
from .ledger_service import LedgerService

__all__ = [
    "audit_service",
    "approval",
    "MasterService",
    "StockInService",
    "StockOutService",
    "OpnameService",
    "LedgerService",
]
