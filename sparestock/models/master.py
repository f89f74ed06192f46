"""
Master Tables: Category, Supplier, HeavyEquipment, Employee
"""
from sqlalchemy import Column, String, Boolean, Text
from sqlalchemy.orm import relationship
from sparestock.core import Base
from .base import UUIDMixin, TimestampMixin

class Category(Base, UUIDMixin, TimestampMixin):
    """Sparepart Category"""
    __tablename__ = "category"

    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    # Relationships
    spareparts = relationship("Sparepart", back_populates="category")

class Supplier(Base, UUIDMixin, TimestampMixin):
    """Supplier"""
    __tablename__ = "supplier"

    name = Column(String(200), nullable=False)
    phone = Column(String(50))
    address = Column(Text)

    # Relationships
    stock_ins = relationship("StockIn", back_populates="supplier")

class HeavyEquipment(Base, UUIDMixin, TimestampMixin):
    """Heavy equipment unit (alat berat) that consumes spareparts"""
    __tablename__ = "heavy_equipment"

    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    type = Column(String(100))
    brand = Column(String(100))
    is_active = Column(Boolean, default=True)

    # Relationships
    stock_outs = relationship("StockOut", back_populates="equipment")

class Employee(Base, UUIDMixin, TimestampMixin):
    """Employee (karyawan) who requests spareparts"""
    __tablename__ = "employee"

    nik = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    position = Column(String(100))
    is_active = Column(Boolean, default=True)

    # Relationships
    stock_outs = relationship("StockOut", back_populates="employee")
