"""
Stock-out approval state machine.

    pending --approve--> approved (terminal)
    pending --reject---> rejected (terminal)

Decisions are values; ``apply_decision`` is the only place a new status is
computed, so an illegal transition cannot be expressed without raising.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from sparestock.core.exceptions import InvalidStateError, ValidationError
from sparestock.models.stock import StockOutStatus

TRANSITIONS = {
    StockOutStatus.PENDING: [StockOutStatus.APPROVED, StockOutStatus.REJECTED],
    StockOutStatus.APPROVED: [],
    StockOutStatus.REJECTED: [],
}

MAX_REASON_LENGTH = 500


@dataclass(frozen=True)
class Approve:
    at: datetime

    target = StockOutStatus.APPROVED


@dataclass(frozen=True)
class Reject:
    reason: str
    at: datetime

    target = StockOutStatus.REJECTED

    def __post_init__(self):
        reason = (self.reason or "").strip()
        if not reason:
            raise ValidationError("Rejection reason is required")
        if len(reason) > MAX_REASON_LENGTH:
            raise ValidationError(f"Rejection reason must be at most {MAX_REASON_LENGTH} characters")
        object.__setattr__(self, "reason", reason)


Decision = Union[Approve, Reject]


def is_terminal(status: StockOutStatus) -> bool:
    return not TRANSITIONS[StockOutStatus(status)]


def apply_decision(current: Union[StockOutStatus, str], decision: Decision) -> StockOutStatus:
    """Return the status ``decision`` leads to, or raise InvalidStateError."""
    current = StockOutStatus(current)
    if decision.target not in TRANSITIONS[current]:
        raise InvalidStateError(
            f"Only pending requests can be {decision.target.value}; request is {current.value}"
        )
    return decision.target


def ensure_deletable(current: Union[StockOutStatus, str]) -> None:
    """Decided requests are history and stay."""
    current = StockOutStatus(current)
    if current != StockOutStatus.PENDING:
        raise InvalidStateError(f"Only pending requests can be deleted; request is {current.value}")
