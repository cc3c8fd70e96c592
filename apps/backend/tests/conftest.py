from __future__ import annotations

import os
import tempfile
from datetime import datetime
from typing import Generator, Any

import pytest
from sqlalchemy.orm import sessionmaker

from fleetledger.core.database import Base, get_db, make_engine
from fleetledger.main import app
from fleetledger import models


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    # Temporary SQLite file so the developer database is never touched
    fd, path = tempfile.mkstemp(prefix="fleetledger_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = make_engine(test_db_url)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            for tbl in Base.metadata.tables.values():
                conn.execute(tbl.delete())
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def refs(db_session) -> dict[str, Any]:
    """Two categories, one vehicle and one employee to hang transactions on."""
    wash = models.TransactionCategory(name="Yıkama")
    repair = models.TransactionCategory(name="Bakım")
    vehicle = models.Vehicle(plate="34ABC123", brand="Ford", model="Transit")
    person = models.Personnel(full_name="Ali Veli", username="ali")
    db_session.add_all([wash, repair, vehicle, person])
    db_session.commit()
    return {"wash": wash, "repair": repair, "vehicle": vehicle, "person": person}


@pytest.fixture()
def add_txn(db_session):
    """Factory inserting a transaction; ``when`` is a naive UTC datetime."""

    def _add(
        when: datetime,
        amount: float = 0,
        expense: float | None = None,
        *,
        category=None,
        vehicle=None,
        person=None,
        status: models.TransactionStatus = models.TransactionStatus.COMPLETED,
        description: str | None = None,
    ) -> models.Transaction:
        txn = models.Transaction(
            amount=amount,
            expense=expense,
            transaction_date=when,
            category_id=category.id if category else None,
            vehicle_id=vehicle.id if vehicle else None,
            personnel_id=person.id if person else None,
            status=status,
            description=description,
        )
        db_session.add(txn)
        db_session.commit()
        return txn

    return _add
