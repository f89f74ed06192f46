import uuid
from datetime import date

import pytest

from sparestock.core.exceptions import NotFoundError, ValidationError
from sparestock.models import Sparepart, StockOpname, StockOpnameItem
from sparestock.schemas import OpnameItemInput, OpnameSubmit, StockInCreate, StockOutCreate
from sparestock.services import OpnameService, StockInService, StockOutService


def _count(*pairs, **kwargs):
    return OpnameSubmit(
        items=[OpnameItemInput(sparepart_id=part.id, physical_stock=physical) for part, physical in pairs],
        **kwargs
    )


def test_opname_sets_counted_stock(db, make_sparepart):
    part = make_sparepart(code="FLT-100", name="Fuel Filter", initial_stock=100)

    result = OpnameService.submit(db, _count((part, 92)), performed_by="auditor")

    assert result["adjusted_count"] == 1
    assert result["total_minus"] == 1
    db.refresh(part)
    assert part.current_stock == 92

    item = db.query(StockOpnameItem).one()
    assert (item.system_stock, item.physical_stock, item.difference) == (100, 92, -8)


def test_zero_difference_session_is_recorded_without_changes(db, make_sparepart):
    a = make_sparepart(code="A-1", name="Part A", initial_stock=4)
    b = make_sparepart(code="B-1", name="Part B", initial_stock=0)

    result = OpnameService.submit(db, _count((a, 4), (b, 0), notes="Monthly count"))

    assert result["adjusted_count"] == 0
    assert result["total_items"] == 2
    assert result["total_selisih"] == 0
    opname = db.query(StockOpname).one()
    assert opname.notes == "Monthly count"
    assert [i.difference for i in opname.items] == [0, 0]
    db.refresh(a)
    db.refresh(b)
    assert (a.current_stock, b.current_stock) == (4, 0)


def test_opname_counters_and_item_order(db, make_sparepart):
    up = make_sparepart(code="UP-1", name="Counted high", initial_stock=5)
    down = make_sparepart(code="DN-1", name="Counted low", initial_stock=5)
    same = make_sparepart(code="EQ-1", name="Counted same", initial_stock=5)

    result = OpnameService.submit(db, _count((same, 5), (up, 7), (down, 1)))

    assert result == {
        "opname_id": result["opname_id"],
        "adjusted_count": 2,
        "total_items": 3,
        "total_selisih": 2,
        "total_plus": 1,
        "total_minus": 1
    }
    opname = OpnameService.get_session(db, result["opname_id"])
    assert [i.sparepart.code for i in opname.items] == ["EQ-1", "UP-1", "DN-1"]
    assert opname.opname_date == date.today()


def test_unknown_sparepart_aborts_whole_batch(db, make_sparepart):
    part = make_sparepart(code="KEEP-1", name="Untouched", initial_stock=10)

    with pytest.raises(NotFoundError):
        OpnameService.submit(db, OpnameSubmit(items=[
            OpnameItemInput(sparepart_id=part.id, physical_stock=3),
            OpnameItemInput(sparepart_id=uuid.uuid4(), physical_stock=1),
        ]))

    db.refresh(part)
    assert part.current_stock == 10
    assert db.query(StockOpname).count() == 0
    assert db.query(StockOpnameItem).count() == 0


def test_opname_input_validation(db, make_sparepart):
    part = make_sparepart(code="VAL-1", name="Validated", initial_stock=1)

    with pytest.raises(ValidationError):
        OpnameService.submit(db, OpnameSubmit(items=[]))
    with pytest.raises(ValidationError):
        OpnameService.submit(db, _count((part, -1)))
    with pytest.raises(ValidationError):
        OpnameService.submit(db, _count((part, 1), (part, 2)))

    assert db.query(StockOpname).count() == 0


def test_history_newest_first(db, make_sparepart):
    part = make_sparepart(code="HIS-1", name="History", initial_stock=1)
    OpnameService.submit(db, _count((part, 1), opname_date=date(2026, 1, 31)))
    OpnameService.submit(db, _count((part, 2), opname_date=date(2026, 2, 28)))

    sessions, total = OpnameService.list_sessions(db)

    assert total == 2
    assert {s.opname_date for s in sessions} == {date(2026, 1, 31), date(2026, 2, 28)}

    with pytest.raises(NotFoundError):
        OpnameService.get_session(db, uuid.uuid4())


def test_sheet_filters_by_search(db, make_sparepart):
    make_sparepart(code="SH-1", name="Track Shoe")
    make_sparepart(code="FL-1", name="Air Filter")

    sheet = OpnameService.get_opname_sheet(db, search="filter")

    assert [sp.code for sp in sheet] == ["FL-1"]


def test_full_day_in_the_warehouse(db, make_sparepart, equipment, employee):
    # receive 20, issue 5, reject 3, count 14
    part = make_sparepart(code="HYD-1", name="Hydraulic Oil", initial_stock=0, unit="liter")
    StockInService.create_stock_in(db, StockInCreate(sparepart_id=part.id, quantity=20))
    issued, _ = StockOutService.create_request(
        db, StockOutCreate(sparepart_id=part.id, equipment_id=equipment.id, employee_id=employee.id, quantity=5)
    )
    StockOutService.approve(db, issued.id)
    refused, _ = StockOutService.create_request(
        db, StockOutCreate(sparepart_id=part.id, equipment_id=equipment.id, employee_id=employee.id, quantity=3)
    )
    StockOutService.reject(db, refused.id, "wrong grade")

    result = OpnameService.submit(db, _count((part, 14)))

    assert result["adjusted_count"] == 1
    item = db.query(StockOpnameItem).one()
    assert (item.system_stock, item.difference) == (15, -1)
    assert db.get(Sparepart, part.id).current_stock == 14


def test_stock_moved_during_count_aborts(db, make_sparepart):
    from sqlalchemy import event, update
    from sparestock.core.exceptions import StockConflictError

    part = make_sparepart(code="RACE-1", name="Moving target", initial_stock=10)

    # Another writer changes the stock after the snapshot was taken
    def bump(session, flush_context):
        session.connection().execute(
            update(Sparepart).where(Sparepart.id == part.id).values(current_stock=11)
        )

    event.listen(db, "after_flush", bump, once=True)

    with pytest.raises(StockConflictError):
        OpnameService.submit(db, _count((part, 7)))

    db.refresh(part)
    assert part.current_stock == 10
    assert db.query(StockOpname).count() == 0


def test_batch_reads_parts_in_one_id_ordered_query(db, engine, make_sparepart):
    from sqlalchemy import event

    parts = sorted(
        [make_sparepart(code=f"ORD-{n}", name=f"Ordered {n}", initial_stock=5) for n in range(3)],
        key=lambda sp: sp.id, reverse=True
    )
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT") and "FROM sparepart" in statement:
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        result = OpnameService.submit(db, _count(*[(sp, 4) for sp in parts]))
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    assert len(statements) == 1
    assert "ORDER BY sparepart.id" in statements[0]
    opname = OpnameService.get_session(db, result["opname_id"])
    assert [i.sparepart_id for i in opname.items] == [sp.id for sp in parts]
