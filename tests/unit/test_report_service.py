# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for curriculum report helpers and aggregation."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from src.domains.report.service import (
    CORE_SKILLS,
    ReportScopeNotFoundError,
    ReportService,
    levels_in,
    required_levels,
    skill_names,
)
from src.utils.datetime import utc_now


def create_rows_result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


def create_mock_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def report_service(mock_db, sample_tenant_id):
    return ReportService(db=mock_db, tenant_id=sample_tenant_id)


def make_framework(framework_id="fw-1", target_level="B1"):
    framework = MagicMock()
    framework.id = framework_id
    framework.name = "General English"
    framework.target_level = target_level
    framework.latest_version_id = f"{framework_id}-v1"
    return framework


def make_mapping(status="applied", applied_days_ago=1, target_id="CLS-1", campus_id="campus-1"):
    mapping = MagicMock()
    mapping.framework_id = "fw-1"
    mapping.status = status
    mapping.target_type = "class_instance"
    mapping.target_id = target_id
    mapping.campus_id = campus_id
    mapping.applied_at = utc_now() - timedelta(days=applied_days_ago)
    mapping.rolled_back_at = None
    return mapping


class TestReportHelpers:
    def test_skill_names_accepts_strings_and_objects(self):
        assert skill_names(["Speaking", {"name": " listening "}, "", None]) == {
            "speaking",
            "listening",
        }

    def test_skill_names_empty(self):
        assert skill_names(None) == set()

    def test_levels_in_free_text(self):
        assert levels_in("b1-B2") == {"B1", "B2"}
        assert levels_in("A2+") == {"A2"}
        assert levels_in(None) == set()

    def test_required_levels_up_to_highest_target(self):
        assert required_levels("B1") == ["A1", "A2", "B1"]
        assert required_levels("A2-B2") == ["A1", "A2", "B1", "B2"]
        assert required_levels("advanced") == []


class TestReportServiceCefrMatrix:
    @pytest.mark.asyncio
    async def test_compliance(self, report_service, mock_db):
        courses = []
        for level in ("A1", "A2", "B1"):
            course = MagicMock()
            course.version_id = "fw-1-v1"
            course.level = level
            courses.append(course)
        mock_db.execute.side_effect = [
            create_rows_result([make_framework()]),
            create_rows_result(courses),
        ]

        report = await report_service.cefr_matrix()

        [row] = report.cefr_matrix
        assert row.coverage_percent == 100.0
        assert row.compliant is True
        assert row.cefr_coverage["B2"].required is False

    @pytest.mark.asyncio
    async def test_framework_without_target_is_not_compliant(self, report_service, mock_db):
        mock_db.execute.side_effect = [
            create_rows_result([make_framework(target_level=None)]),
            create_rows_result([]),
        ]

        report = await report_service.cefr_matrix()

        assert report.cefr_matrix[0].coverage_percent == 0.0
        assert report.cefr_matrix[0].compliant is False


class TestReportServiceCoverage:
    @pytest.mark.asyncio
    async def test_unknown_framework(self, report_service, mock_db):
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(ReportScopeNotFoundError) as exc_info:
            await report_service.coverage(framework_id="missing")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_framework_without_content_reports_zeros(self, report_service, mock_db):
        framework = make_framework()
        framework.latest_version_id = None
        mock_db.execute.return_value = create_rows_result([framework])

        report = await report_service.coverage()

        [row] = report.coverage_matrix
        assert row.version_id is None
        assert set(row.skill_coverage) == set(CORE_SKILLS)
        assert sum(row.skill_coverage.values()) == 0
        assert row.total_units == 0


class TestReportServiceImpact:
    @pytest.mark.asyncio
    async def test_counts_window_and_active_targets(self, report_service, mock_db):
        old = make_mapping(applied_days_ago=400, target_id="CLS-OLD", campus_id="campus-2")
        rolled = make_mapping(status="rolled_back", target_id="CLS-2")
        rolled.rolled_back_at = utc_now()
        mock_db.execute.side_effect = [
            create_rows_result([make_framework()]),
            create_rows_result([make_mapping(), old, rolled]),
        ]

        report = await report_service.impact(months=6)

        [row] = report.impact_analysis
        assert row.deployments == 2
        assert row.active_targets == 2
        assert row.campuses == 2
        assert row.rolled_back == 1
        assert report.key_metrics.total_rolled_back == 1
