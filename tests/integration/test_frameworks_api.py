# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for framework and version endpoints."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

API = "/api/v1"


class TestFrameworks:
    def test_create_starts_with_draft_version(self, framework: dict[str, Any]) -> None:
        assert framework["status"] == "draft"
        assert framework["latest_version"]["version_no"] == "v1.0"
        assert framework["latest_version"]["state"] == "draft"
        assert framework["latest_version_id"] == framework["latest_version"]["id"]

    def test_requires_auth(self, client: TestClient) -> None:
        response = client.get(f"{API}/kct")

        assert response.status_code == 401

    def test_duplicate_code(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any]
    ) -> None:
        response = client.post(
            f"{API}/kct",
            json={"code": framework["code"], "name": "Another"},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_CODE"

    def test_invalid_code(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.post(
            f"{API}/kct", json={"code": "lower case", "name": "X"}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_list_and_search(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any]
    ) -> None:
        response = client.get(
            f"{API}/kct", params={"q": framework["code"], "page_size": 5}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["page_size"] == 5
        assert data["data"][0]["id"] == framework["id"]

    def test_get_update_delete(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any]
    ) -> None:
        url = f"{API}/kct/{framework['id']}"

        got = client.get(url, headers=auth_headers)
        assert got.status_code == 200
        assert got.json()["latest_version"]["version_no"] == "v1.0"

        patched = client.patch(url, json={"name": "Renamed"}, headers=auth_headers)
        assert patched.status_code == 200
        assert patched.json()["name"] == "Renamed"

        empty = client.patch(url, json={}, headers=auth_headers)
        assert empty.status_code == 400

        deleted = client.delete(url, headers=auth_headers)
        assert deleted.status_code == 204

        assert client.get(url, headers=auth_headers).status_code == 404

    def test_deleted_framework_hides_subtree(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        framework: dict[str, Any],
        unit: dict[str, Any],
    ) -> None:
        client.delete(f"{API}/kct/{framework['id']}", headers=auth_headers)

        version_id = framework["latest_version"]["id"]
        assert client.get(f"{API}/versions/{version_id}", headers=auth_headers).status_code == 404
        assert client.get(f"{API}/courses/{unit['course_id']}", headers=auth_headers).status_code == 404
        assert client.get(f"{API}/units/{unit['id']}", headers=auth_headers).status_code == 404

    def test_unknown_framework(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get(f"{API}/kct/does-not-exist", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestVersions:
    def test_create_version(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any]
    ) -> None:
        response = client.post(
            f"{API}/kct/{framework['id']}/versions",
            json={"version_no": "v1.1", "changelog": "Second draft"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        created = response.json()
        assert created["state"] == "draft"

        listed = client.get(f"{API}/kct/{framework['id']}/versions", headers=auth_headers)
        assert [v["version_no"] for v in listed.json()["versions"]] == ["v1.1", "v1.0"]

        refreshed = client.get(f"{API}/kct/{framework['id']}", headers=auth_headers)
        assert refreshed.json()["latest_version_id"] == created["id"]

    def test_duplicate_version_no(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any]
    ) -> None:
        response = client.post(
            f"{API}/kct/{framework['id']}/versions",
            json={"version_no": "v1.0"},
            headers=auth_headers,
        )

        assert response.status_code == 409

    def test_full_workflow(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], version_id: str
    ) -> None:
        url = f"{API}/versions/{version_id}"

        submitted = client.post(f"{url}/submit", json={"comments": "Ready"}, headers=auth_headers)
        assert submitted.status_code == 200
        assert submitted.json()["state"] == "submitted"

        approvals = client.get(f"{API}/approvals/versions/{version_id}/approvals", headers=auth_headers)
        assert [a["status"] for a in approvals.json()["approvals"]] == ["requested"]

        approved = client.post(
            f"{url}/approve",
            json={"decision": "approve", "comments": "Looks good"},
            headers=auth_headers,
        )
        assert approved.status_code == 200
        assert approved.json()["state"] == "approved"
        assert approved.json()["approval_comments"] == "Looks good"

        published = client.post(
            f"{url}/publish", json={"rollout_notes": "Autumn term"}, headers=auth_headers
        )
        assert published.status_code == 200
        assert published.json()["state"] == "published"
        assert published.json()["rollout_notes"] == "Autumn term"

        fw = client.get(f"{API}/kct/{framework['id']}", headers=auth_headers)
        assert fw.json()["status"] == "published"

        stats = client.get(f"{API}/kct/{framework['id']}/versions/stats", headers=auth_headers)
        assert stats.json()["published_versions"] == 1
        assert stats.json()["last_published_at"] is not None

        history = client.get(f"{API}/kct/{framework['id']}/versions/history", headers=auth_headers)
        item = history.json()["data"][0]
        assert item["published_by_name"] == "Test User"

        archived = client.post(f"{url}/archive", headers=auth_headers)
        assert archived.status_code == 200
        assert archived.json()["state"] == "archived"

        fw = client.get(f"{API}/kct/{framework['id']}", headers=auth_headers)
        assert fw.json()["status"] == "approved"

    def test_actions_without_body(
        self, client: TestClient, auth_headers: dict[str, str], version_id: str
    ) -> None:
        url = f"{API}/versions/{version_id}"

        assert client.post(f"{url}/submit", headers=auth_headers).json()["state"] == "submitted"
        assert client.post(f"{url}/approve", headers=auth_headers).json()["state"] == "approved"
        assert client.post(f"{url}/publish", headers=auth_headers).json()["state"] == "published"

    def test_reject_returns_to_draft(
        self, client: TestClient, auth_headers: dict[str, str], version_id: str
    ) -> None:
        url = f"{API}/versions/{version_id}"
        client.post(f"{url}/submit", headers=auth_headers)

        rejected = client.post(
            f"{url}/approve", json={"decision": "reject", "comments": "Fix unit 2"}, headers=auth_headers
        )

        assert rejected.status_code == 200
        assert rejected.json()["state"] == "draft"
        approvals = client.get(f"{API}/approvals/versions/{version_id}/approvals", headers=auth_headers)
        assert approvals.json()["approvals"][0]["status"] == "rejected"

    @pytest.mark.parametrize("action", ["approve", "publish"])
    def test_invalid_transition_from_draft(
        self, client: TestClient, auth_headers: dict[str, str], version_id: str, action: str
    ) -> None:
        response = client.post(f"{API}/versions/{version_id}/{action}", headers=auth_headers)

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INVALID_TRANSITION"
        assert error["details"]["allowed_actions"] == ["submit", "archive"]

    def test_publish_archives_previous(
        self, client: TestClient, auth_headers: dict[str, str], framework: dict[str, Any], version_id: str
    ) -> None:
        def publish(vid: str) -> None:
            for action in ("submit", "approve", "publish"):
                response = client.post(f"{API}/versions/{vid}/{action}", headers=auth_headers)
                assert response.status_code == 200, response.text

        publish(version_id)
        second = client.post(
            f"{API}/kct/{framework['id']}/versions", json={"version_no": "v2.0"}, headers=auth_headers
        ).json()
        publish(second["id"])

        first = client.get(f"{API}/versions/{version_id}", headers=auth_headers)
        assert first.json()["state"] == "archived"

    def test_frozen_version_rejects_edits(
        self, client: TestClient, auth_headers: dict[str, str], version_id: str, course: dict[str, Any]
    ) -> None:
        client.post(f"{API}/versions/{version_id}/submit", headers=auth_headers)

        response = client.patch(
            f"{API}/courses/{course['id']}", json={"title": "Late change"}, headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "VERSION_FROZEN"

        response = client.patch(
            f"{API}/versions/{version_id}", json={"changelog": "Late"}, headers=auth_headers
        )
        assert response.status_code == 409

    def test_delete_archives(
        self, client: TestClient, auth_headers: dict[str, str], version_id: str
    ) -> None:
        response = client.delete(f"{API}/versions/{version_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["state"] == "archived"
        assert client.get(f"{API}/versions/{version_id}", headers=auth_headers).status_code == 200


class TestCompare:
    def test_compare_versions(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        framework: dict[str, Any],
        version_id: str,
        unit: dict[str, Any],
    ) -> None:
        second = client.post(
            f"{API}/kct/{framework['id']}/versions", json={"version_no": "v1.1"}, headers=auth_headers
        ).json()
        client.post(
            f"{API}/versions/{second['id']}/courses",
            json={"code": "GE-2", "title": "Next steps"},
            headers=auth_headers,
        )

        response = client.get(
            f"{API}/versions/compare",
            params={"base": version_id, "compare": second["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["base"]["version_no"] == "v1.0"
        assert data["compare"]["version_no"] == "v1.1"
        assert data["summary"]["courses_added"] == 1
        assert data["summary"]["courses_removed"] == 1
        assert data["courses"]["added"][0]["code"] == "GE-2"

    def test_compare_across_frameworks(
        self,
        client: TestClient,
        auth_headers: dict[str, str],
        version_id: str,
    ) -> None:
        other = client.post(
            f"{API}/kct", json={"code": "OTHER-FW", "name": "Other"}, headers=auth_headers
        ).json()

        response = client.get(
            f"{API}/versions/compare",
            params={"base": version_id, "compare": other["latest_version"]["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VERSION_MISMATCH"
