# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum report API endpoints.

- GET /kct/coverage - Skill coverage per framework version
- GET /kct/approval-time - Submission to approval turnaround
- GET /kct/cefr-matrix - CEFR level compliance per framework
- GET /kct/impact - Rollout reach through applied mappings
- GET /kct/adoption - Applied mappings per day

Example:
    GET /api/v1/reports/kct/approval-time?days=30
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import AuthenticatedUser, DBSession, Tenant
from src.domains.report import ReportService
from src.models.report import (
    AdoptionPeriod,
    AdoptionReport,
    ApprovalTimeReport,
    CefrLevel,
    CefrMatrixReport,
    CoverageReport,
    ImpactReport,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_report_service(db: DBSession, tenant: Tenant) -> ReportService:
    return ReportService(db, tenant.tenant_id)


ReportSvc = Annotated[ReportService, Depends(_get_report_service)]


@router.get(
    "/kct/coverage",
    response_model=CoverageReport,
    summary="Skill coverage",
)
async def coverage_report(
    current_user: AuthenticatedUser,
    service: ReportSvc,
    framework_id: str | None = Query(default=None),
    version_id: str | None = Query(default=None),
) -> CoverageReport:
    return await service.coverage(framework_id, version_id)


@router.get(
    "/kct/approval-time",
    response_model=ApprovalTimeReport,
    summary="Approval turnaround",
)
async def approval_time_report(
    current_user: AuthenticatedUser,
    service: ReportSvc,
    days: int = Query(default=90, ge=7, le=365),
    framework_id: str | None = Query(default=None),
) -> ApprovalTimeReport:
    return await service.approval_time(days, framework_id)


@router.get(
    "/kct/cefr-matrix",
    response_model=CefrMatrixReport,
    summary="CEFR compliance matrix",
)
async def cefr_matrix_report(
    current_user: AuthenticatedUser,
    service: ReportSvc,
    framework_id: str | None = Query(default=None),
    level: CefrLevel | None = Query(default=None),
) -> CefrMatrixReport:
    return await service.cefr_matrix(framework_id, level)


@router.get(
    "/kct/impact",
    response_model=ImpactReport,
    summary="Rollout impact",
)
async def impact_report(
    current_user: AuthenticatedUser,
    service: ReportSvc,
    framework_id: str | None = Query(default=None),
    months: int = Query(default=6, ge=1, le=24),
) -> ImpactReport:
    return await service.impact(framework_id, months)


@router.get(
    "/kct/adoption",
    response_model=AdoptionReport,
    summary="Framework adoption",
)
async def adoption_report(
    current_user: AuthenticatedUser,
    service: ReportSvc,
    period: AdoptionPeriod = Query(default="month"),
) -> AdoptionReport:
    return await service.adoption(period)
