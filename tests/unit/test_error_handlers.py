# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the JSON error envelope."""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from src.api.errors import register_exception_handlers
from src.core.errors import AuthenticationError, ConflictError, NotFoundError


class Payload(BaseModel):
    name: str


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.state.settings = SimpleNamespace(debug=False)
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found() -> None:
        raise NotFoundError("Framework not found: x")

    @app.get("/conflict")
    async def conflict() -> None:
        raise ConflictError("Duplicate", code="DUPLICATE_CODE", details={"code": "A"})

    @app.get("/unauthenticated")
    async def unauthenticated() -> None:
        raise AuthenticationError("Invalid email or password")

    @app.get("/forbidden")
    async def forbidden() -> None:
        raise HTTPException(status_code=403, detail="Requires one of: admin")

    @app.post("/validate")
    async def validate(payload: Payload) -> dict:
        return payload.model_dump()

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("secret detail")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelope:
    def test_app_error(self, client: TestClient) -> None:
        response = client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NOT_FOUND", "message": "Framework not found: x"}
        }

    def test_details_and_custom_code(self, client: TestClient) -> None:
        response = client.get("/conflict")

        assert response.status_code == 409
        assert response.json()["error"] == {
            "code": "DUPLICATE_CODE",
            "message": "Duplicate",
            "details": {"code": "A"},
        }

    def test_authentication_error_sets_challenge(self, client: TestClient) -> None:
        response = client.get("/unauthenticated")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_http_exception(self, client: TestClient) -> None:
        response = client.get("/forbidden")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_validation_error_is_400(self, client: TestClient) -> None:
        response = client.post("/validate", json={})

        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "name"

    def test_unhandled_error_hides_message(self, client: TestClient) -> None:
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
        }
