from .base import RecordedMixin, TimestampMixin, UUIDMixin
from .master import Category, Supplier, HeavyEquipment, Employee
from .sparepart import Sparepart
from .stock import StockIn, StockOut, StockOutStatus, Warranty
from .opname import StockOpname, StockOpnameItem, OpnameStatus
from .audit import AuditLog

__all__ = [
    # Base
    "RecordedMixin", "TimestampMixin", "UUIDMixin",
    # Master
    "Category", "Supplier", "HeavyEquipment", "Employee",
    # Sparepart
    "Sparepart",
    # Stock
    "StockIn", "StockOut", "StockOutStatus", "Warranty",
    # Opname
    "StockOpname", "StockOpnameItem", "OpnameStatus",
    # Audit
    "AuditLog",
]
