# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication endpoints."""

from typing import Any

from fastapi.testclient import TestClient

API = "/api/v1"
EMAIL = "test@example.com"
PASSWORD = "password123"


class TestLogin:
    def test_login_returns_tokens_and_profile(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/login", json={"email": EMAIL, "password": PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] > 0
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["email"] == EMAIL
        assert data["user"]["role"] == "admin"
        assert data["user"]["tenant_id"]

    def test_email_is_case_insensitive(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/auth/login", json={"email": EMAIL.upper(), "password": PASSWORD}
        )

        assert response.status_code == 200

    def test_wrong_password(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/login", json={"email": EMAIL, "password": "nope"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    def test_unknown_email_same_message(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/auth/login", json={"email": "ghost@example.com", "password": PASSWORD}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    def test_malformed_body(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestRefresh:
    def test_rotation(self, client: TestClient, tokens: dict[str, Any]) -> None:
        response = client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        assert response.status_code == 200
        rotated = response.json()
        assert rotated["refresh_token"] != tokens["refresh_token"]

        # The presented token is revoked by the rotation
        reused = client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert reused.status_code == 401

        again = client.post(
            f"{API}/auth/refresh", json={"refresh_token": rotated["refresh_token"]}
        )
        assert again.status_code == 200

    def test_access_token_is_not_a_refresh_token(
        self, client: TestClient, tokens: dict[str, Any]
    ) -> None:
        response = client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )

        assert response.status_code == 401


class TestLogout:
    def test_logout_revokes_refresh_token(
        self, client: TestClient, tokens: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            f"{API}/auth/logout",
            json={"refresh_token": tokens["refresh_token"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}

        refreshed = client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refreshed.status_code == 401

    def test_logout_without_body_revokes_all(
        self, client: TestClient, tokens: dict[str, Any], auth_headers: dict[str, str]
    ) -> None:
        response = client.post(f"{API}/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        refreshed = client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refreshed.status_code == 401

    def test_logout_requires_auth(self, client: TestClient) -> None:
        response = client.post(f"{API}/auth/logout")

        assert response.status_code == 401


class TestMe:
    def test_me(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get(f"{API}/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["user"]["email"] == EMAIL

    def test_me_without_token(self, client: TestClient) -> None:
        response = client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_me_with_invalid_token(self, client: TestClient) -> None:
        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer invalid"})

        assert response.status_code == 401
