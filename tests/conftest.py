import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_agency.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["NOTIFY_WEBHOOK_URL"] = ""
os.environ["CONFLICT_RETRY_ATTEMPTS"] = "3"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from agency.main import app


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema and seed data
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from agency.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


# ============================================================================
# SUPPORTING RECORDS
# ============================================================================


@pytest.fixture(scope="function")
def agent(db: Session):
    from agency.services.company import create_agent

    return create_agent(db, name="Sami Haddad", phone_number="0599000111")


@pytest.fixture(scope="function")
def customer(db: Session):
    from agency.services.customer import create_customer

    return create_customer(
        db,
        first_name="Lina",
        last_name="Khoury",
        id_number="401234567",
        phone_number="0599123456",
        city="Ramallah",
    )


@pytest.fixture(scope="function")
def vehicle(db: Session, customer):
    from agency.services.customer import create_vehicle

    return create_vehicle(
        db,
        customer_id=customer.id,
        plate_number="12-345-67",
        model="Toyota Corolla",
        vehicle_type="car",
        manufacture_year=2015,
    )


@pytest.fixture(scope="function")
def second_vehicle(db: Session, customer):
    from agency.services.customer import create_vehicle

    return create_vehicle(
        db,
        customer_id=customer.id,
        plate_number="98-765-43",
        model="Kia Picanto",
        vehicle_type="car",
        manufacture_year=2005,
    )


@pytest.fixture(scope="function")
def other_customer_vehicle(db: Session):
    from agency.services.customer import create_customer, create_vehicle

    other = create_customer(
        db,
        first_name="Omar",
        last_name="Nassar",
        id_number="409876543",
        phone_number="0598765432",
    )
    return create_vehicle(
        db,
        customer_id=other.id,
        plate_number="55-555-55",
        model="Ford Transit",
        vehicle_type="truck",
    )


@pytest.fixture(scope="function")
def comprehensive_type(db: Session):
    from agency.services.company import create_insurance_type

    return create_insurance_type(db, name="Comprehensive", pricing_type_id="comprehensive")


@pytest.fixture(scope="function")
def compulsory_type(db: Session):
    from agency.services.company import create_insurance_type

    return create_insurance_type(db, name="Compulsory", pricing_type_id="compulsory")


@pytest.fixture(scope="function")
def company(db: Session, comprehensive_type, compulsory_type):
    """An insurance company offering comprehensive and compulsory insurance."""
    from agency.services.company import create_company, offer_insurance_type

    company = create_company(db, name="Trust Insurance")
    offer_insurance_type(db, company.id, comprehensive_type.id)
    offer_insurance_type(db, company.id, compulsory_type.id)
    return company


@pytest.fixture(scope="function")
def policy(db: Session, vehicle, company):
    """A comprehensive policy of 1200 with nothing paid yet."""
    from agency.services.policy import create_policy

    return create_policy(
        db,
        vehicle_id=vehicle.id,
        company_id=company.id,
        insurance_type="Comprehensive",
        insurance_amount=1200,
    )
