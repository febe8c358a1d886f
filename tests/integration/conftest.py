# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures that build a small curriculum tree through the API."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

API = "/api/v1"


@pytest.fixture
def framework(client: TestClient, auth_headers: dict[str, str], unique_code: str) -> dict[str, Any]:
    """A framework with its initial v1.0 draft."""
    response = client.post(
        f"{API}/kct",
        json={
            "code": unique_code,
            "name": "General English",
            "language": "en",
            "target_level": "B1",
            "total_hours": 120,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def version_id(framework: dict[str, Any]) -> str:
    return framework["latest_version"]["id"]


@pytest.fixture
def course(client: TestClient, auth_headers: dict[str, str], version_id: str) -> dict[str, Any]:
    response = client.post(
        f"{API}/versions/{version_id}/courses",
        json={"code": "GE-1", "title": "Foundations", "level": "A2", "hours": 40},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def unit(client: TestClient, auth_headers: dict[str, str], course: dict[str, Any]) -> dict[str, Any]:
    response = client.post(
        f"{API}/courses/{course['id']}/units",
        json={
            "title": "Introductions",
            "objectives": ["Introduce yourself"],
            "skills": ["speaking"],
            "activities": [
                {"title": "Warm up"},
                {"title": "Pair work"},
                {"title": "Role-play"},
                {"title": "Wrap up"},
            ],
            "hours": 4,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
