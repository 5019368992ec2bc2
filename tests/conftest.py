"""
conftest.py — Shared Test Fixtures for PharmaBroker

Provides an in-memory SQLite database, a FastAPI TestClient bound to it,
factory fixtures for the five tables, and a Loguru capture sink.

Business Rules:
- All tests run against an isolated in-memory DB (no prod data risk)
- Each test function gets fresh tables and a fresh Workspace, so sample
  data edits never leak between tests
- An empty table means the app serves sample data; tests that need live
  rows insert them through the factories

Called by: all test files via pytest autodiscovery
Depends on: app.models (Base), app.database (get_db), app.main
"""

import os
os.environ["TESTING"] = "1"  # Must be set before importing app modules

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Client, ClientRequirement, Deal, Supplier, SupplierProduct
from app.services.entity_book import Workspace
from app.table_store import SqlTableStore

# ── In-memory SQLite engine ──────────────────────────────────────────

TEST_DB_URL = "sqlite://"  # in-memory, fresh per session

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default — turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def store(db_session: Session) -> SqlTableStore:
    return SqlTableStore(db_session)


@pytest.fixture()
def workspace() -> Workspace:
    """Books seeded with the bundled sample data."""
    return Workspace()


@pytest.fixture()
def log_messages():
    """Capture Loguru output (message text) for assertions."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(str(m)), format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture()
def log_records():
    """Capture Loguru records, extras included."""
    records = []
    handler_id = logger.add(lambda m: records.append(m.record), format="{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture()
def test_client_row(db_session: Session) -> Client:
    """A live client in Germany."""
    row = Client(
        name="Rhein Apotheken GmbH",
        country="Germany",
        segment="distribution",
        contact_name="Anna Weber",
        contact_email="a.weber@rhein-apo.de",
        status="active",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def test_requirement_row(db_session: Session, test_client_row: Client) -> ClientRequirement:
    row = ClientRequirement(
        client_id=test_client_row.id,
        product_name="Amoxicillin Capsules",
        api_name="Amoxicillin Trihydrate",
        dosage_form="capsule",
        strength="250mg",
        annual_volume=200000,
        unit="pieces",
        budget_usd=25000,
        priority="high",
        status="open",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def test_supplier_row(db_session: Session) -> Supplier:
    """An active live supplier in the same country as test_client_row."""
    row = Supplier(
        name="Hansa Generics AG",
        country="Germany",
        contact_name="Jonas Krüger",
        contact_email="j.krueger@hansa-generics.de",
        contact_phone="+49-40-555-0100",
        status="active",
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def test_product_row(db_session: Session, test_supplier_row: Supplier) -> SupplierProduct:
    row = SupplierProduct(
        supplier_id=test_supplier_row.id,
        api_name="Amoxicillin Trihydrate",
        dosage_form="capsule",
        strength="250mg",
        pack_size="10x10",
        unit_price_usd=0.10,
        moq=50000,
        lead_time_days=21,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def test_deal_row(db_session: Session) -> Deal:
    row = Deal(
        title="Atorvastatin - Hansa Generics AG",
        client_name="Rhein Apotheken GmbH",
        supplier_name="Hansa Generics AG",
        product_name="Atorvastatin",
        quantity=10000,
        unit_price_usd=0.5,
        total_value_usd=5000,
        commission_rate=0.05,
        stage="lead",
        priority="high",
        created_at=datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc),
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def client(db_session: Session) -> TestClient:
    """FastAPI TestClient on the test DB with a fresh Workspace.

    Role defaults to editor; send X-User-Role: viewer for read-only calls.
    """
    from app.database import get_db
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db

    with TestClient(app) as c:
        app.state.workspace = Workspace()
        yield c

    app.dependency_overrides.clear()
