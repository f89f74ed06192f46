"""
Typed errors for the stock ledger.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, so callers can tell "fix your input" apart from
"this action no longer applies".

    SpareStockError
    +-- ValidationError            400  VALIDATION_ERROR
    +-- NotFoundError              404  NOT_FOUND
    +-- InvalidStateError          409  INVALID_STATE
    |   +-- StockConflictError     409  STOCK_CONFLICT
    +-- InsufficientStockError     409  INSUFFICIENT_STOCK
    +-- ReferentialIntegrityError  409  REFERENCED
"""
from typing import Dict, Optional


class SpareStockError(Exception):
    """Base exception for all stock ledger errors."""

    code: str = "SPARESTOCK_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(SpareStockError):
    """Malformed input: non-positive quantity, empty reason, duplicate code."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(SpareStockError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = str(entity_id)
        super().__init__(f"{entity} {entity_id} not found")


class InvalidStateError(SpareStockError):
    """Transition attempted from a terminal or otherwise wrong state."""

    code = "INVALID_STATE"
    status_code = 409


class StockConflictError(InvalidStateError):
    """Stock moved between the opname snapshot and its corrective write."""

    code = "STOCK_CONFLICT"

    def __init__(self, sparepart_id, expected: int):
        self.sparepart_id = str(sparepart_id)
        self.expected = expected
        super().__init__(
            f"Stock of sparepart {sparepart_id} changed during reconciliation "
            f"(expected {expected}); submit the count again"
        )


class InsufficientStockError(SpareStockError):
    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, sparepart_id, requested: int, available: Optional[int] = None, unit: str = ""):
        self.sparepart_id = str(sparepart_id)
        self.requested = requested
        self.available = available
        if available is None:
            message = f"Insufficient stock for sparepart {sparepart_id}: requested {requested}"
        else:
            message = (
                f"Insufficient stock for sparepart {sparepart_id}: "
                f"requested {requested}, available {available} {unit}".rstrip()
            )
        super().__init__(message)


class ReferentialIntegrityError(SpareStockError):
    """Master record cannot be deleted while movement records reference it."""

    code = "REFERENCED"
    status_code = 409

    def __init__(self, entity: str, entity_id, references: Dict[str, int]):
        self.entity = entity
        self.entity_id = str(entity_id)
        self.references = references
        used_by = ", ".join(f"{name}={count}" for name, count in references.items() if count)
        super().__init__(f"{entity} {entity_id} cannot be deleted: referenced by {used_by}")

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data["references"] = self.references
        return data
