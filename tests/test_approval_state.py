from datetime import datetime, timezone

import pytest

from sparestock.core.exceptions import InvalidStateError, ValidationError
from sparestock.models import StockOutStatus
from sparestock.services.approval import Approve, Reject, apply_decision, ensure_deletable, is_terminal

NOW = datetime(2026, 10, 16, 8, 0, tzinfo=timezone.utc)


def test_pending_moves_to_either_terminal_state():
    assert apply_decision(StockOutStatus.PENDING, Approve(at=NOW)) == StockOutStatus.APPROVED
    assert apply_decision("pending", Reject(reason="damaged", at=NOW)) == StockOutStatus.REJECTED


@pytest.mark.parametrize("status", [StockOutStatus.APPROVED, StockOutStatus.REJECTED])
def test_terminal_states_refuse_every_decision(status):
    assert is_terminal(status)
    with pytest.raises(InvalidStateError):
        apply_decision(status, Approve(at=NOW))
    with pytest.raises(InvalidStateError):
        apply_decision(status, Reject(reason="again", at=NOW))
    with pytest.raises(InvalidStateError):
        ensure_deletable(status)


def test_pending_is_not_terminal_and_deletable():
    assert not is_terminal(StockOutStatus.PENDING)
    ensure_deletable(StockOutStatus.PENDING)


def test_reject_reason_is_trimmed_and_bounded():
    assert Reject(reason="  not in this month's plan  ", at=NOW).reason == "not in this month's plan"
    with pytest.raises(ValidationError):
        Reject(reason=None, at=NOW)
    with pytest.raises(ValidationError):
        Reject(reason="x" * 501, at=NOW)
    assert len(Reject(reason="x" * 500, at=NOW).reason) == 500
