"""Tests for application wiring and settings."""
import uuid

import pytest

from mydoc_api.config import Settings


class TestSettings:
    def test_database_url_wins(self):
        settings = Settings(_env_file=None, database_url="sqlite:///local.db")

        assert settings.sqlalchemy_url() == "sqlite:///local.db"

    def test_postgres_url_encodes_password(self):
        settings = Settings(
            _env_file=None,
            database_url=None,
            db_user="admin",
            db_password="p@ss word",
            db_host="db",
            db_port="5433",
            db_name="mydoc",
        )

        assert settings.sqlalchemy_url() == "postgresql://admin:p%40ss+word@db:5433/mydoc"


class TestApp:
    def test_root_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["bills"] == "/v1/api/bills"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_malformed_id_is_rejected_by_validation(self, client):
        assert client.get("/v1/api/doctors/not-a-uuid").status_code == 422


@pytest.mark.parametrize(
    "resource",
    ["appointments", "bills", "doctors", "histories", "hospitals", "medications", "patients", "prescriptions"],
)
def test_delete_unknown_id_is_404(client, resource):
    response = client.delete(f"/v1/api/{resource}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert "detail" in response.json()
