"""
Shared pytest fixtures for all tests.

Every test gets a fresh in-memory SQLite database wired into the app
through ``dependency_overrides``, plus small factories that create
entities through the public API.
"""

import os

# Ensure the app never points at a real PostgreSQL instance during tests
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from mydoc_api.database import Base, get_db
from mydoc_api.database.connection import build_engine
from mydoc_api.main import create_app
from tests.utils import doctor_payload, hospital_payload, patient_payload


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    """Create an in-memory database with the full schema."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """A session for arranging data or inspecting state directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# APP FIXTURES
# ============================================================================


@pytest.fixture
def app(session_factory):
    """Create the FastAPI app bound to the test database."""
    application = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


# ============================================================================
# ENTITY FACTORIES
# ============================================================================


@pytest.fixture
def create_doctor(client):
    def _create(**overrides):
        response = client.post("/v1/api/doctors", json=doctor_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_patient(client):
    def _create(**overrides):
        response = client.post("/v1/api/patients", json=patient_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_hospital(client):
    def _create(**overrides):
        response = client.post("/v1/api/hospitals", json=hospital_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_medication(client):
    def _create(name="Paracetamol", unit="tablet", stock=10):
        response = client.post("/v1/api/medications", json={"name": name, "unit": unit, "stock": stock})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_bill(client):
    def _create(medications=(), description="Pharmacy bill"):
        response = client.post("/v1/api/bills", json={"description": description})
        assert response.status_code == 201, response.text
        bill = response.json()
        if medications:
            response = client.post(
                f"/v1/api/bills/{bill['id']}/medications",
                json=[{"id": medication["id"]} for medication in medications],
            )
            assert response.status_code == 200, response.text
        return bill

    return _create
