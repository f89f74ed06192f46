"""
Stock Movement Models: StockIn (receipt), StockOut (approval-gated issue), Warranty
"""
from sqlalchemy import Column, String, Integer, Numeric, Date, DateTime, ForeignKey, Text, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from sparestock.core import Base
from .base import RecordedMixin, UUIDMixin


class StockOutStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StockIn(Base, UUIDMixin, RecordedMixin):
    """Stock receipt (barang masuk) - increments stock when created"""
    __tablename__ = "stock_in"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_in_quantity_positive"),
    )

    sparepart_id = Column(Uuid(as_uuid=True), ForeignKey("sparepart.id"), nullable=False, index=True)
    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("supplier.id"))
    quantity = Column(Integer, nullable=False)

    # Purchase info
    invoice_number = Column(String(100))
    purchase_price = Column(Numeric(14, 2))
    warranty_expiry = Column(Date)

    # Metadata
    notes = Column(Text)

    # Relationships
    sparepart = relationship("Sparepart", back_populates="stock_ins")
    supplier = relationship("Supplier", back_populates="stock_ins")
    warranty = relationship("Warranty", back_populates="stock_in", uselist=False, cascade="all, delete-orphan")


class StockOut(Base, UUIDMixin, RecordedMixin):
    """Stock issue request (barang keluar) - decrements stock only on approval"""
    __tablename__ = "stock_out"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_out_quantity_positive"),
    )

    sparepart_id = Column(Uuid(as_uuid=True), ForeignKey("sparepart.id"), nullable=False, index=True)
    equipment_id = Column(Uuid(as_uuid=True), ForeignKey("heavy_equipment.id"), nullable=False, index=True)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employee.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)  # Fixed at creation
    purpose = Column(Text)
    scanned_barcode = Column(String(100))

    # Approval
    status = Column(String(20), default=StockOutStatus.PENDING.value, nullable=False, index=True)
    rejected_reason = Column(Text)
    approved_at = Column(DateTime(timezone=True))
    rejected_at = Column(DateTime(timezone=True))
    decided_by = Column(String(100))

    # Metadata

    # Relationships
    sparepart = relationship("Sparepart", back_populates="stock_outs")
    equipment = relationship("HeavyEquipment", back_populates="stock_outs")
    employee = relationship("Employee", back_populates="stock_outs")


class Warranty(Base, UUIDMixin):
    """Warranty registered from a stock-in with an expiry date"""
    __tablename__ = "warranty"

    stock_in_id = Column(Uuid(as_uuid=True), ForeignKey("stock_in.id", ondelete="CASCADE"), unique=True, nullable=False)
    sparepart_id = Column(Uuid(as_uuid=True), ForeignKey("sparepart.id"), nullable=False, index=True)
    expiry_date = Column(Date, nullable=False)
    claim_status = Column(String(20), default="active", nullable=False)  # active, claimed
    claim_date = Column(DateTime(timezone=True))
    claim_notes = Column(Text)

    # Relationships
    stock_in = relationship("StockIn", back_populates="warranty")
