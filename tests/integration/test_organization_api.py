# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for tags, saved views and curriculum reports."""

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

API = "/api/v1"


@pytest.fixture
def designer_headers(app: FastAPI, tokens: dict[str, Any]) -> dict[str, str]:
    token = app.state.jwt_manager.create_access_token(
        user_id="designer-1",
        tenant_id=tokens["user"]["tenant_id"],
        role="curriculum_designer",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tag(client: TestClient, auth_headers: dict[str, str]) -> dict[str, Any]:
    response = client.post(
        f"{API}/tags",
        json={"name": "exam-prep", "description": "Exam preparation", "color": "#10B981"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestTags:
    def test_create_defaults(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post(f"{API}/tags", json={"name": "Speaking Focus"}, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["color"] == "#3B82F6"
        assert data["usage_count"] == 0
        assert data["entity_type"] is None

    def test_duplicate_name(
        self, client: TestClient, auth_headers: dict[str, str], tag: dict[str, Any]
    ) -> None:
        response = client.post(f"{API}/tags", json={"name": "exam-prep"}, headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_TAG"

    def test_invalid_name_and_color(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        bad_name = client.post(f"{API}/tags", json={"name": "exam/prep"}, headers=auth_headers)
        bad_color = client.post(
            f"{API}/tags", json={"name": "ok", "color": "green"}, headers=auth_headers
        )

        assert bad_name.status_code == 400
        assert bad_color.status_code == 400

    def test_attach_list_and_detach(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        tag: dict[str, Any],
        framework: dict[str, Any],
    ) -> None:
        target = {"entity_type": "framework", "entity_id": framework["id"]}

        attached = client.post(f"{API}/tags/{tag['id']}/attach", json=target, headers=auth_headers)
        assert attached.status_code == 200
        assert attached.json()["message"] == "Tag attached successfully"

        again = client.post(f"{API}/tags/{tag['id']}/attach", json=target, headers=auth_headers)
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_ATTACHED"

        listed = client.get(f"{API}/tags", params={"q": "exam"}, headers=auth_headers).json()
        assert listed["total"] == 1
        assert listed["data"][0]["usage_count"] == 1

        on_framework = client.get(
            f"{API}/tags/entities/framework/{framework['id']}", headers=auth_headers
        ).json()
        assert [t["name"] for t in on_framework["tags"]] == ["exam-prep"]

        detached = client.request(
            "DELETE", f"{API}/tags/{tag['id']}/detach", json=target, headers=auth_headers
        )
        assert detached.status_code == 200

        missing = client.request(
            "DELETE", f"{API}/tags/{tag['id']}/detach", json=target, headers=auth_headers
        )
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "NOT_ATTACHED"

    def test_attach_to_missing_entity(
        self, client: TestClient, auth_headers: dict[str, str], tag: dict[str, Any]
    ) -> None:
        response = client.post(
            f"{API}/tags/{tag['id']}/attach",
            json={"entity_type": "unit", "entity_id": "no-such-unit"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_restricted_tag(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        framework: dict[str, Any],
        unit: dict[str, Any],
    ) -> None:
        unit_tag = client.post(
            f"{API}/tags", json={"name": "warm-up", "entity_type": "unit"}, headers=auth_headers
        ).json()

        refused = client.post(
            f"{API}/tags/{unit_tag['id']}/attach",
            json={"entity_type": "framework", "entity_id": framework["id"]},
            headers=auth_headers,
        )
        accepted = client.post(
            f"{API}/tags/{unit_tag['id']}/attach",
            json={"entity_type": "unit", "entity_id": unit["id"]},
            headers=auth_headers,
        )
        by_type = client.get(f"{API}/tags", params={"entity_type": "unit"}, headers=auth_headers)

        assert refused.status_code == 400
        assert refused.json()["error"]["code"] == "TAG_ENTITY_MISMATCH"
        assert accepted.status_code == 200
        assert [t["name"] for t in by_type.json()["data"]] == ["warm-up"]

    def test_viewer_cannot_create(
        self, app: FastAPI, client: TestClient, tokens: dict[str, Any]
    ) -> None:
        token = app.state.jwt_manager.create_access_token(
            user_id="viewer-1", tenant_id=tokens["user"]["tenant_id"], role="viewer"
        )

        response = client.post(
            f"{API}/tags", json={"name": "nope"}, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 403


class TestSavedViews:
    def test_crud_and_use(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        created = client.post(
            f"{API}/saved-views",
            json={
                "name": "B1 drafts",
                "entity_type": "curriculum_overview",
                "filters": {"status": "draft", "target_level": "B1"},
            },
            headers=auth_headers,
        )
        assert created.status_code == 201
        view = created.json()
        assert view["usage_count"] == 0
        assert view["creator_name"] == "Test User"

        duplicate = client.post(
            f"{API}/saved-views",
            json={"name": "B1 drafts", "entity_type": "curriculum_overview", "filters": {}},
            headers=auth_headers,
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["error"]["code"] == "DUPLICATE_NAME"

        url = f"{API}/saved-views/{view['id']}"
        updated = client.patch(url, json={"filters": {"status": "approved"}}, headers=auth_headers)
        assert updated.json()["filters"] == {"status": "approved"}

        used = client.post(f"{url}/use", headers=auth_headers)
        assert used.status_code == 200
        assert used.json()["usage_count"] == 1
        assert used.json()["last_used_at"] is not None

        mine = client.get(
            f"{API}/saved-views", params={"entity_type": "curriculum_overview"}, headers=auth_headers
        ).json()
        assert [v["id"] for v in mine["data"]] == [view["id"]]

        assert client.delete(url, headers=auth_headers).status_code == 204
        assert client.get(url, headers=auth_headers).status_code == 404
        assert client.get(f"{API}/saved-views", headers=auth_headers).json()["total"] == 0

    def test_public_and_private_access(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        designer_headers: dict[str, str],
    ) -> None:
        shared = client.post(
            f"{API}/saved-views",
            json={"name": "Shared", "entity_type": "reports", "filters": {}, "is_public": True},
            headers=auth_headers,
        ).json()
        private = client.post(
            f"{API}/saved-views",
            json={"name": "Mine", "entity_type": "reports", "filters": {}},
            headers=auth_headers,
        ).json()

        public = client.get(f"{API}/saved-views/public", headers=designer_headers).json()
        assert [v["name"] for v in public["data"]] == ["Shared"]
        assert public["data"][0]["creator_name"] == "Test User"

        assert client.post(
            f"{API}/saved-views/{shared['id']}/use", headers=designer_headers
        ).status_code == 200
        assert client.post(
            f"{API}/saved-views/{private['id']}/use", headers=designer_headers
        ).status_code == 403
        assert client.get(
            f"{API}/saved-views/{private['id']}", headers=designer_headers
        ).status_code == 403

        edit = client.patch(
            f"{API}/saved-views/{shared['id']}", json={"name": "Taken over"}, headers=designer_headers
        )
        assert edit.status_code == 403

        assert client.get(f"{API}/saved-views", headers=designer_headers).json()["total"] == 0

    def test_unknown_entity_type(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post(
            f"{API}/saved-views",
            json={"name": "Bad", "entity_type": "games", "filters": {}},
            headers=auth_headers,
        )

        assert response.status_code == 400


class TestReports:
    def test_coverage(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], unit: dict[str, Any]
    ) -> None:
        response = client.get(
            f"{API}/reports/kct/coverage",
            params={"framework_id": framework["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        [row] = response.json()["coverage_matrix"]
        assert row["version_no"] == "v1.0"
        assert row["total_courses"] == 1
        assert row["total_units"] == 1
        assert row["skill_coverage"]["speaking"] == 1
        assert row["skill_coverage"]["listening"] == 0

    def test_coverage_unknown_scope(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        framework = client.get(
            f"{API}/reports/kct/coverage", params={"framework_id": "missing"}, headers=auth_headers
        )
        version = client.get(
            f"{API}/reports/kct/coverage", params={"version_id": "missing"}, headers=auth_headers
        )

        assert framework.status_code == 404
        assert version.status_code == 404

    def test_cefr_matrix(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], course: dict[str, Any]
    ) -> None:
        response = client.get(
            f"{API}/reports/kct/cefr-matrix",
            params={"framework_id": framework["id"]},
            headers=auth_headers,
        )

        data = response.json()
        [row] = data["cefr_matrix"]
        assert data["compliance_threshold"] == 80
        assert row["cefr_coverage"]["A2"] == {"courses": 1, "required": True}
        assert row["cefr_coverage"]["B2"]["required"] is False
        assert row["coverage_percent"] == 33.3
        assert row["compliant"] is False

        other_level = client.get(
            f"{API}/reports/kct/cefr-matrix", params={"level": "C1"}, headers=auth_headers
        )
        assert other_level.json()["cefr_matrix"] == []

    def test_approval_time(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], version_id: str
    ) -> None:
        url = f"{API}/versions/{version_id}"
        client.post(f"{url}/submit", json={}, headers=auth_headers)
        client.post(f"{url}/approve", json={"decision": "approve"}, headers=auth_headers)

        response = client.get(f"{API}/reports/kct/approval-time", headers=auth_headers)

        data = response.json()
        assert data["summary"]["total_approvals"] == 1
        assert data["summary"]["period_days"] == 90
        [row] = data["approval_timeline"]
        assert row["framework_id"] == framework["id"]
        assert row["approver_name"] == "Test User"
        assert row["approval_hours"] >= 0

    def test_approval_time_period_bounds(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get(
            f"{API}/reports/kct/approval-time", params={"days": 3}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_impact_and_adoption(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], version_id: str
    ) -> None:
        mapping = client.post(
            f"{API}/mappings",
            json={
                "framework_id": framework["id"],
                "version_id": version_id,
                "target_type": "class_instance",
                "target_id": "CLS-7",
                "campus_id": "campus-1",
            },
            headers=auth_headers,
        ).json()
        client.patch(f"{API}/mappings/{mapping['id']}", json={"status": "applied"}, headers=auth_headers)

        impact = client.get(
            f"{API}/reports/kct/impact", params={"framework_id": framework["id"]}, headers=auth_headers
        ).json()
        adoption = client.get(
            f"{API}/reports/kct/adoption", params={"period": "week"}, headers=auth_headers
        ).json()

        [row] = impact["impact_analysis"]
        assert row["deployments"] == 1
        assert row["active_targets"] == 1
        assert row["campuses"] == 1
        assert row["last_deployment"] is not None
        assert impact["key_metrics"]["total_deployments"] == 1

        assert adoption["period_days"] == 7
        assert adoption["summary"]["total_deployments"] == 1
        assert adoption["summary"]["peak_day"]["framework_name"] == "General English"

    def test_reports_require_auth(self, client: TestClient) -> None:
        assert client.get(f"{API}/reports/kct/coverage").status_code == 401
