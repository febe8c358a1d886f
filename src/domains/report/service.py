# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum report service.

Reports are read-only aggregates over the tenant's live frameworks:

- coverage: skills taught by the units of each framework's latest version
- approval-time: hours from submission to approval of recent versions
- cefr-matrix: CEFR levels reached by the courses of each framework
- impact: rollout reach through applied mappings
- adoption: applied mappings per day

Aggregation happens in Python over tenant-scoped rows so the same code
runs on MySQL and SQLite.
"""

import logging
from collections import Counter, defaultdict
from datetime import timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError
from src.domains.common.lookups import get_live_framework, get_live_version
from src.domains.mapping.service import APPLIED
from src.infrastructure.database.models import (
    Course,
    CurriculumFramework,
    FrameworkVersion,
    Mapping,
    Unit,
    User,
)
from src.models.report import (
    AdoptionReport,
    AdoptionRow,
    AdoptionSummary,
    ApprovalTimeReport,
    ApprovalTimeRow,
    ApprovalTimeSummary,
    CefrLevelCoverage,
    CefrMatrixReport,
    CefrMatrixRow,
    CoverageReport,
    CoverageRow,
    ImpactMetrics,
    ImpactReport,
    ImpactRow,
)
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

CORE_SKILLS = ("listening", "speaking", "reading", "writing", "grammar", "vocabulary")
CEFR_LEVELS = ("A1", "A2", "B1", "B2", "C1", "C2")
COMPLIANCE_THRESHOLD = 80
PERIOD_DAYS = {"week": 7, "month": 30, "quarter": 90, "year": 365}
DAYS_PER_MONTH = 30


class ReportServiceError(Exception):
    """Base exception for report service errors."""

    pass


class ReportScopeNotFoundError(ReportServiceError, NotFoundError):
    """Raised when the framework or version a report is scoped to is not visible."""

    pass


def skill_names(skills: list[Any] | None) -> set[str]:
    """Normalize a unit's skills list to lower-case names.

    Entries may be plain strings or objects with a name.
    """
    names = set()
    for skill in skills or []:
        if isinstance(skill, dict):
            skill = skill.get("name")
        if isinstance(skill, str) and skill.strip():
            names.add(skill.strip().lower())
    return names


def levels_in(text: str | None) -> set[str]:
    """CEFR levels named in a free-text level such as "A2+" or "B1-B2"."""
    upper = (text or "").upper()
    return {level for level in CEFR_LEVELS if level in upper}


def required_levels(target_level: str | None) -> list[str]:
    """Levels a framework must cover to reach its target: A1 up to the highest target level."""
    targets = levels_in(target_level)
    if not targets:
        return []
    top = max(CEFR_LEVELS.index(level) for level in targets)
    return list(CEFR_LEVELS[: top + 1])


class ReportService:
    """Service computing curriculum reports.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def coverage(
        self,
        framework_id: str | None = None,
        version_id: str | None = None,
    ) -> CoverageReport:
        """Skill coverage per framework.

        The latest version of each framework is used unless version_id
        names another one.

        Raises:
            ReportScopeNotFoundError: If framework_id or version_id is not visible.
        """
        version = None
        if version_id:
            version = await get_live_version(self.db, self.tenant_id, version_id)
            if version is None:
                raise ReportScopeNotFoundError(f"Version not found: {version_id}")
            framework_id = framework_id or version.framework_id
            if version.framework_id != framework_id:
                raise ReportScopeNotFoundError(
                    f"Version {version_id} does not belong to framework {framework_id}"
                )

        frameworks = await self._frameworks(framework_id)
        version_ids = {
            f.id: version.id if version is not None else f.latest_version_id for f in frameworks
        }
        versions = await self._versions([v for v in version_ids.values() if v])
        courses = await self._courses(list(versions))
        units = await self._units([c.id for course_list in courses.values() for c in course_list])

        rows = []
        for framework in frameworks:
            current = versions.get(version_ids[framework.id])
            version_courses = courses.get(current.id, []) if current else []
            version_units = [u for c in version_courses for u in units.get(c.id, [])]

            skills = Counter({skill: 0 for skill in CORE_SKILLS})
            for unit in version_units:
                skills.update(skill_names(unit.skills))

            completeness = [u.completeness_score or 0 for u in version_units]
            rows.append(
                CoverageRow(
                    framework_id=framework.id,
                    framework_name=framework.name,
                    version_id=current.id if current else None,
                    version_no=current.version_no if current else None,
                    skill_coverage=dict(skills),
                    avg_completeness=_average(completeness),
                    total_units=len(version_units),
                    total_courses=len(version_courses),
                )
            )

        return CoverageReport(coverage_matrix=rows, generated_at=utc_now())

    async def approval_time(
        self,
        days: int = 90,
        framework_id: str | None = None,
    ) -> ApprovalTimeReport:
        """Approval turnaround of versions approved in the last `days` days."""
        frameworks = {f.id: f for f in await self._frameworks(framework_id)}
        cutoff = utc_now() - timedelta(days=days)

        result = await self.db.execute(
            select(FrameworkVersion).where(
                FrameworkVersion.tenant_id == self.tenant_id,
                FrameworkVersion.deleted_at.is_(None),
                FrameworkVersion.approved_at.is_not(None),
                FrameworkVersion.framework_id.in_(list(frameworks)),
            )
        )
        approved = [
            v for v in result.scalars().all() if ensure_utc(v.approved_at) >= cutoff
        ]
        approved.sort(key=lambda v: ensure_utc(v.approved_at), reverse=True)
        names = await self._user_names({v.approved_by for v in approved if v.approved_by})

        rows = []
        for version in approved:
            approved_at = ensure_utc(version.approved_at)
            submitted_at = ensure_utc(version.submitted_at or version.created_at)
            hours = max((approved_at - submitted_at).total_seconds(), 0) / 3600
            rows.append(
                ApprovalTimeRow(
                    framework_id=version.framework_id,
                    framework_name=frameworks[version.framework_id].name,
                    version_id=version.id,
                    version_no=version.version_no,
                    submitted_at=submitted_at,
                    approved_at=approved_at,
                    approval_hours=round(hours, 1),
                    approval_days=round(hours / 24, 1),
                    approver_id=version.approved_by,
                    approver_name=names.get(version.approved_by),
                )
            )

        summary = ApprovalTimeSummary(
            total_approvals=len(rows),
            avg_approval_time_hours=_average([r.approval_hours for r in rows]),
            avg_approval_time_days=_average([r.approval_days for r in rows]),
            period_days=days,
        )
        return ApprovalTimeReport(approval_timeline=rows, summary=summary, generated_at=utc_now())

    async def cefr_matrix(
        self,
        framework_id: str | None = None,
        level: str | None = None,
    ) -> CefrMatrixReport:
        """CEFR levels reached by the courses of each framework's latest version.

        A level is required when it lies at or below the framework's target
        level. The framework is compliant when the share of required levels
        taught by at least one course reaches COMPLIANCE_THRESHOLD percent.
        """
        frameworks = await self._frameworks(framework_id)
        if level:
            frameworks = [f for f in frameworks if level in levels_in(f.target_level)]

        courses = await self._courses([f.latest_version_id for f in frameworks if f.latest_version_id])

        rows = []
        for framework in frameworks:
            per_level = Counter()
            for course in courses.get(framework.latest_version_id, []):
                per_level.update(levels_in(course.level))

            required = required_levels(framework.target_level)
            covered = [lvl for lvl in required if per_level[lvl] > 0]
            percent = round(len(covered) / len(required) * 100, 1) if required else 0.0

            rows.append(
                CefrMatrixRow(
                    framework_id=framework.id,
                    framework_name=framework.name,
                    target_level=framework.target_level,
                    cefr_coverage={
                        lvl: CefrLevelCoverage(courses=per_level[lvl], required=lvl in required)
                        for lvl in CEFR_LEVELS
                    },
                    coverage_percent=percent,
                    compliant=bool(required) and percent >= COMPLIANCE_THRESHOLD,
                )
            )

        return CefrMatrixReport(
            cefr_matrix=rows,
            compliance_threshold=COMPLIANCE_THRESHOLD,
            generated_at=utc_now(),
        )

    async def impact(self, framework_id: str | None = None, months: int = 6) -> ImpactReport:
        """Rollout reach of each framework over the last `months` months.

        deployments and rolled_back count mappings applied or rolled back in
        the window; active_targets and campuses count mappings that are
        applied now.
        """
        frameworks = await self._frameworks(framework_id)
        mappings = await self._mappings([f.id for f in frameworks])
        cutoff = utc_now() - timedelta(days=months * DAYS_PER_MONTH)

        rows = []
        for framework in frameworks:
            framework_mappings = mappings.get(framework.id, [])
            applied_now = [m for m in framework_mappings if m.status == APPLIED]
            applied_times = [
                ensure_utc(m.applied_at)
                for m in framework_mappings
                if m.applied_at is not None and ensure_utc(m.applied_at) >= cutoff
            ]
            rolled_back = [
                m
                for m in framework_mappings
                if m.rolled_back_at is not None and ensure_utc(m.rolled_back_at) >= cutoff
            ]
            rows.append(
                ImpactRow(
                    framework_id=framework.id,
                    framework_name=framework.name,
                    deployments=len(applied_times),
                    active_targets=len({(m.target_type, m.target_id) for m in applied_now}),
                    campuses=len({m.campus_id for m in applied_now if m.campus_id}),
                    rolled_back=len(rolled_back),
                    last_deployment=max(applied_times) if applied_times else None,
                )
            )

        metrics = ImpactMetrics(
            total_deployments=sum(r.deployments for r in rows),
            total_active_targets=sum(r.active_targets for r in rows),
            total_rolled_back=sum(r.rolled_back for r in rows),
        )
        return ImpactReport(
            impact_analysis=rows,
            analysis_period_months=months,
            key_metrics=metrics,
            generated_at=utc_now(),
        )

    async def adoption(self, period: str = "month") -> AdoptionReport:
        """Mappings applied per day and framework within the period."""
        days = PERIOD_DAYS[period]
        cutoff = utc_now() - timedelta(days=days)
        frameworks = {f.id: f for f in await self._frameworks()}
        mappings = await self._mappings(list(frameworks))

        buckets: dict[tuple[str, str], list[Mapping]] = defaultdict(list)
        for framework_id, framework_mappings in mappings.items():
            for mapping in framework_mappings:
                applied_at = ensure_utc(mapping.applied_at)
                if applied_at is not None and applied_at >= cutoff:
                    buckets[(applied_at.date().isoformat(), framework_id)].append(mapping)

        rows = [
            AdoptionRow(
                date=day,
                framework_id=framework_id,
                framework_name=frameworks[framework_id].name,
                new_deployments=len(bucket),
                active_instances=len({(m.target_type, m.target_id) for m in bucket}),
            )
            for (day, framework_id), bucket in sorted(buckets.items())
        ]

        total = sum(r.new_deployments for r in rows)
        summary = AdoptionSummary(
            total_deployments=total,
            avg_daily_deployments=round(total / days, 1),
            peak_day=max(rows, key=lambda r: r.new_deployments) if rows else None,
        )
        return AdoptionReport(
            adoption_trends=rows,
            period=period,
            period_days=days,
            summary=summary,
            generated_at=utc_now(),
        )

    async def _frameworks(self, framework_id: str | None = None) -> list[CurriculumFramework]:
        if framework_id:
            framework = await get_live_framework(self.db, self.tenant_id, framework_id)
            if framework is None:
                raise ReportScopeNotFoundError(f"Framework not found: {framework_id}")
            return [framework]

        result = await self.db.execute(
            select(CurriculumFramework)
            .where(
                CurriculumFramework.tenant_id == self.tenant_id,
                CurriculumFramework.deleted_at.is_(None),
            )
            .order_by(CurriculumFramework.name)
        )
        return list(result.scalars().all())

    async def _versions(self, version_ids: list[str]) -> dict[str, FrameworkVersion]:
        if not version_ids:
            return {}
        result = await self.db.execute(
            select(FrameworkVersion).where(
                FrameworkVersion.id.in_(version_ids),
                FrameworkVersion.tenant_id == self.tenant_id,
                FrameworkVersion.deleted_at.is_(None),
            )
        )
        return {v.id: v for v in result.scalars().all()}

    async def _courses(self, version_ids: list[str]) -> dict[str, list[Course]]:
        grouped: dict[str, list[Course]] = defaultdict(list)
        if not version_ids:
            return grouped
        result = await self.db.execute(
            select(Course).where(
                Course.version_id.in_(version_ids),
                Course.tenant_id == self.tenant_id,
                Course.deleted_at.is_(None),
            )
        )
        for course in result.scalars().all():
            grouped[course.version_id].append(course)
        return grouped

    async def _units(self, course_ids: list[str]) -> dict[str, list[Unit]]:
        grouped: dict[str, list[Unit]] = defaultdict(list)
        if not course_ids:
            return grouped
        result = await self.db.execute(
            select(Unit).where(
                Unit.course_id.in_(course_ids),
                Unit.tenant_id == self.tenant_id,
                Unit.deleted_at.is_(None),
            )
        )
        for unit in result.scalars().all():
            grouped[unit.course_id].append(unit)
        return grouped

    async def _mappings(self, framework_ids: list[str]) -> dict[str, list[Mapping]]:
        grouped: dict[str, list[Mapping]] = defaultdict(list)
        if not framework_ids:
            return grouped
        result = await self.db.execute(
            select(Mapping).where(
                Mapping.framework_id.in_(framework_ids),
                Mapping.tenant_id == self.tenant_id,
            )
        )
        for mapping in result.scalars().all():
            grouped[mapping.framework_id].append(mapping)
        return grouped

    async def _user_names(self, user_ids: set[str]) -> dict[str, str]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.full_name).where(User.id.in_(user_ids))
        )
        return {user_id: name for user_id, name in result.all()}


def _average(values: list[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0
