"""
Stock Opname Models - physical count sessions and their per-part results
"""
from sqlalchemy import Column, String, Integer, Date, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
import enum

from sparestock.core import Base
from .base import RecordedMixin, UUIDMixin


class OpnameStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"


class StockOpname(Base, UUIDMixin, RecordedMixin):
    """Opname session header; written once, never edited"""
    __tablename__ = "stock_opname"

    opname_date = Column(Date, nullable=False)
    notes = Column(Text)
    status = Column(String(20), default=OpnameStatus.COMPLETED.value, nullable=False)

    # Counters
    total_items = Column(Integer, default=0, nullable=False)
    total_selisih = Column(Integer, default=0, nullable=False)  # Rows with a non-zero difference
    total_plus = Column(Integer, default=0, nullable=False)
    total_minus = Column(Integer, default=0, nullable=False)


    # Relationships
    items = relationship("StockOpnameItem", back_populates="opname", cascade="all, delete-orphan",
                         order_by="StockOpnameItem.position")


class StockOpnameItem(Base, UUIDMixin):
    """One counted sparepart inside an opname session"""
    __tablename__ = "stock_opname_item"

    opname_id = Column(Uuid(as_uuid=True), ForeignKey("stock_opname.id"), nullable=False, index=True)
    sparepart_id = Column(Uuid(as_uuid=True), ForeignKey("sparepart.id"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)  # Order as submitted

    system_stock = Column(Integer, nullable=False)  # Snapshot at processing time
    physical_stock = Column(Integer, nullable=False)
    difference = Column(Integer, nullable=False)  # physical - system
    notes = Column(Text)

    # Relationships
    opname = relationship("StockOpname", back_populates="items")
    sparepart = relationship("Sparepart", back_populates="opname_items")
