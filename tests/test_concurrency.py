"""
Concurrent approvals against one sparepart, each thread on its own session
"""
import threading

from sparestock.core.exceptions import InsufficientStockError, InvalidStateError
from sparestock.models import Sparepart, StockOut, StockOutStatus
from sparestock.schemas import StockOutCreate
from sparestock.services import StockOutService


def _approve_in_parallel(session_factory, stock_out_ids):
    barrier = threading.Barrier(len(stock_out_ids))
    results = {}

    def worker(stock_out_id):
        session = session_factory()
        try:
            barrier.wait()
            StockOutService.approve(session, stock_out_id, performed_by=f"supervisor-{stock_out_id}")
            results[stock_out_id] = "approved"
        except (InsufficientStockError, InvalidStateError) as e:
            results[stock_out_id] = type(e).__name__
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(sid,)) for sid in stock_out_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


def _request(db, part, equipment, employee, quantity):
    stock_out, _ = StockOutService.create_request(
        db, StockOutCreate(sparepart_id=part.id, equipment_id=equipment.id, employee_id=employee.id, quantity=quantity)
    )
    return stock_out.id


def test_two_approvals_for_the_last_units(db, session_factory, make_sparepart, equipment, employee):
    part = make_sparepart(code="SEAL-5", name="Seal Kit", initial_stock=5)
    first = _request(db, part, equipment, employee, 5)
    second = _request(db, part, equipment, employee, 5)

    results = _approve_in_parallel(session_factory, [first, second])

    assert sorted(results.values()) == ["InsufficientStockError", "approved"]
    db.expire_all()
    assert db.get(Sparepart, part.id).current_stock == 0
    statuses = sorted(db.get(StockOut, sid).status for sid in (first, second))
    assert statuses == [StockOutStatus.APPROVED.value, StockOutStatus.PENDING.value]


def test_same_request_approved_twice_at_once(db, session_factory, make_sparepart, equipment, employee):
    part = make_sparepart(code="PIN-1", name="Bucket Pin", initial_stock=10)
    stock_out_id = _request(db, part, equipment, employee, 4)

    session_a, session_b = session_factory(), session_factory()
    barrier = threading.Barrier(2)
    outcomes = []

    def worker(session):
        try:
            barrier.wait()
            StockOutService.approve(session, stock_out_id)
            outcomes.append("approved")
        except InvalidStateError:
            outcomes.append("refused")
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(s,)) for s in (session_a, session_b)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert sorted(outcomes) == ["approved", "refused"]
    db.expire_all()
    assert db.get(Sparepart, part.id).current_stock == 6
