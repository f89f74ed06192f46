"""
Shared fixtures: a fresh SQLite file database per test, with the app's
get_db dependency pointed at it.
"""
import os

os.environ.setdefault("DB_URL", "sqlite:///./.pytest_sparestock.db")
os.environ["LEDGER_CHECK_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from sparestock.core import Base, get_db
from sparestock.core.database import create_db_engine
from sparestock.schemas import EmployeeCreate, EquipmentCreate, SparepartCreate, SupplierCreate
from sparestock.services import MasterService


@pytest.fixture
def engine(tmp_path):
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'sparestock.db'}")
    Base.metadata.create_all(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_sparepart(db):
    def _make(code="FLT-001", name="Oil Filter", initial_stock=0, min_stock=0, unit="pcs"):
        return MasterService.create_sparepart(
            db,
            SparepartCreate(code=code, name=name, initial_stock=initial_stock, min_stock=min_stock, unit=unit),
            performed_by="tester"
        )
    return _make


@pytest.fixture
def sparepart(make_sparepart):
    return make_sparepart(initial_stock=10)


@pytest.fixture
def equipment(db):
    return MasterService.create_equipment(db, EquipmentCreate(code="EXC-01", name="Excavator PC200"))


@pytest.fixture
def employee(db):
    return MasterService.create_employee(db, EmployeeCreate(nik="1001", name="Budi Santoso"))


@pytest.fixture
def supplier(db):
    return MasterService.create_supplier(db, SupplierCreate(name="PT Sumber Teknik"))
