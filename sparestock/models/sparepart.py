"""
Sparepart Model - the single source of truth for on-hand quantity
"""
from sqlalchemy import Column, String, Integer, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sparestock.core import Base
from .base import UUIDMixin, TimestampMixin

class Sparepart(Base, UUIDMixin, TimestampMixin):
    """Sparepart Master"""
    __tablename__ = "sparepart"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_sparepart_stock_non_negative"),
        CheckConstraint("initial_stock >= 0", name="ck_sparepart_initial_stock_non_negative"),
    )

    code = Column(String(50), unique=True, nullable=False, index=True)  # Upper-cased on write
    name = Column(String(200), nullable=False)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("category.id"))
    brand = Column(String(50))
    unit = Column(String(20), nullable=False, default="pcs")  # Display only
    min_stock = Column(Integer, default=0, nullable=False)  # Low stock threshold
    rack_location = Column(String(50))

    # Stock registered with the part; ledger replay starts here
    initial_stock = Column(Integer, default=0, nullable=False)
    # Only stock-in, stock-out approval and opname may write this column
    current_stock = Column(Integer, default=0, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="spareparts")
    stock_ins = relationship("StockIn", back_populates="sparepart")
    stock_outs = relationship("StockOut", back_populates="sparepart")
    opname_items = relationship("StockOpnameItem", back_populates="sparepart")

    @property
    def stock_status(self) -> str:
        if self.current_stock == 0:
            return "empty"
        if self.current_stock <= (self.min_stock or 0):
            return "low"
        return "normal"
