"""Tests for the generate-id routes through the full FastAPI app."""

from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from delpro.core.modules.fasttrack.allocator import generate_identifiers
from delpro.errors import AccessDeniedError, ExhaustionError
from delpro.web.server import create_fastapi_app

AUTH = {"Authorization": "Bearer valid"}


class FakeApp:
    """Stands in for App: accepts the "valid" token and allocates from a fixed snapshot."""

    def __init__(self, existing_codes=(), exhausted=False):
        self.existing_codes = list(existing_codes)
        self.exhausted = exhausted
        self.requested_types = []

    @asynccontextmanager
    async def lifespan(self):
        yield

    async def is_auth_token_valid(self, auth_token):
        if auth_token == "inactive":
            raise AccessDeniedError("Account not activated")
        return auth_token == "valid"

    async def generate_fasttrack_ids(self, auth_token, fts_type):
        self.requested_types.append(fts_type)
        if self.exhausted:
            raise ExhaustionError
        return generate_identifiers(fts_type, 2025, self.existing_codes, [])


@pytest.fixture
def fake_app():
    return FakeApp(existing_codes=["DPL001"])


@pytest.fixture
def client(fake_app):
    api = create_fastapi_app(fake_app, SimpleNamespace(cors_origins=[]))
    with TestClient(api, raise_server_exceptions=False) as c:
        yield c


class TestGenerateIdRoute:
    def test_query_parameter(self, client):
        response = client.get("/api/v1/fasttrack/generate-id", params={"ftsType": "Purchase"}, headers=AUTH)
        assert response.status_code == 200
        assert response.json() == {
            "smallId": "DPL002",
            "docketNumber": "Delpro/Purchase/2025/001",
            "ftsType": "Purchase",
        }

    def test_defaults_to_report(self, client, fake_app):
        response = client.get("/api/v1/fasttrack/generate-id", headers=AUTH)
        assert response.status_code == 200
        assert fake_app.requested_types == ["Report"]

    def test_type_in_body(self, client):
        response = client.post("/api/v1/fasttrack/generate-id", json={"ftsType": "Other"}, headers=AUTH)
        assert response.status_code == 200
        assert response.json()["docketNumber"] == "Delpro/Other/2025/001"

    def test_invalid_category_is_bad_request(self, client):
        response = client.get("/api/v1/fasttrack/generate-id", params={"ftsType": "Invoice"}, headers=AUTH)
        assert response.status_code == 400
        assert response.json()["type"] == "invalid_category"
        assert "Invoice" in response.json()["message"]

    def test_exhaustion_is_server_error(self, fake_app, client):
        fake_app.exhausted = True
        response = client.get("/api/v1/fasttrack/generate-id", headers=AUTH)
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to generate unique short code", "type": "allocation_failed"}


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/v1/fasttrack/generate-id")
        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"

    def test_unknown_token(self, client):
        response = client.get("/api/v1/fasttrack/generate-id", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_deactivated_account(self, client):
        response = client.get("/api/v1/fasttrack/generate-id", headers={"Authorization": "Bearer inactive"})
        assert response.status_code == 403
        assert response.json() == {"message": "Account not activated", "type": "access_denied"}
