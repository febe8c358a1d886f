# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum report response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

CefrLevel = Literal["A1", "A2", "B1", "B2", "C1", "C2"]
AdoptionPeriod = Literal["week", "month", "quarter", "year"]


class CoverageRow(BaseModel):
    framework_id: str
    framework_name: str
    version_id: str | None = None
    version_no: str | None = None
    skill_coverage: dict[str, int]
    avg_completeness: float
    total_units: int
    total_courses: int


class CoverageReport(BaseModel):
    """Skill coverage of each framework's current version."""

    coverage_matrix: list[CoverageRow]
    generated_at: datetime


class ApprovalTimeRow(BaseModel):
    framework_id: str
    framework_name: str
    version_id: str
    version_no: str
    submitted_at: datetime
    approved_at: datetime
    approval_hours: float
    approval_days: float
    approver_id: str | None = None
    approver_name: str | None = None


class ApprovalTimeSummary(BaseModel):
    total_approvals: int
    avg_approval_time_hours: float
    avg_approval_time_days: float
    period_days: int


class ApprovalTimeReport(BaseModel):
    """Time from submission to approval of recently approved versions."""

    approval_timeline: list[ApprovalTimeRow]
    summary: ApprovalTimeSummary
    generated_at: datetime


class CefrLevelCoverage(BaseModel):
    courses: int
    required: bool


class CefrMatrixRow(BaseModel):
    framework_id: str
    framework_name: str
    target_level: str | None = None
    cefr_coverage: dict[str, CefrLevelCoverage]
    coverage_percent: float
    compliant: bool


class CefrMatrixReport(BaseModel):
    """CEFR levels reached by the courses of each framework."""

    cefr_matrix: list[CefrMatrixRow]
    compliance_threshold: int
    generated_at: datetime


class ImpactRow(BaseModel):
    framework_id: str
    framework_name: str
    deployments: int
    active_targets: int
    campuses: int
    rolled_back: int
    last_deployment: datetime | None = None


class ImpactMetrics(BaseModel):
    total_deployments: int
    total_active_targets: int
    total_rolled_back: int


class ImpactReport(BaseModel):
    """Rollout reach of each framework through its applied mappings."""

    impact_analysis: list[ImpactRow]
    analysis_period_months: int
    key_metrics: ImpactMetrics
    generated_at: datetime


class AdoptionRow(BaseModel):
    date: str
    framework_id: str
    framework_name: str
    new_deployments: int
    active_instances: int


class AdoptionSummary(BaseModel):
    total_deployments: int
    avg_daily_deployments: float
    peak_day: AdoptionRow | None = None


class AdoptionReport(BaseModel):
    """Applied mappings per day and framework."""

    adoption_trends: list[AdoptionRow]
    period: AdoptionPeriod
    period_days: int
    summary: AdoptionSummary
    generated_at: datetime
