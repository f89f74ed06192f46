"""
Base Model Mixins
"""
from sqlalchemy import Column, DateTime, String, Uuid, func
import uuid

class UUIDMixin:
    """Portable UUID primary key (native on Postgres, CHAR(32) on SQLite)"""
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

class TimestampMixin:
    """Master data: created_at and updated_at"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

class RecordedMixin:
    """Movement records are written once: who recorded them and when"""
    created_by = Column(String(100))  # X-User of the request
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
