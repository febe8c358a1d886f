# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit blueprint service.

This module provides the UnitService class for:
- Unit CRUD within a course of a draft version
- Atomic reorder and bulk update
- Duplicate, split and template instantiation
- Completeness scoring, validation and content suggestions
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationError
from src.domains.common.attachments import EntityKind
from src.domains.common.lookups import get_live_course, get_live_unit, get_version_for_course
from src.domains.common.ordering import ReorderError, renumber, shift_after, validate_reorder
from src.domains.common.updates import apply_updates, collect_updates
from src.domains.unit.completeness import MAX_SCORE, score_unit
from src.domains.unit.suggestions import RuleBasedSuggestionProvider, SuggestionProvider
from src.domains.unit.templates import get_template, list_templates, unit_fields_from_template
from src.domains.version.service import ensure_editable
from src.infrastructure.database.models import Course, Resource, Unit
from src.models.common import ReorderResponse
from src.models.unit import (
    BulkUpdateRequest,
    BulkUpdateResponse,
    CompletenessBreakdown,
    CompletenessResponse,
    DuplicateRequest,
    FromTemplateRequest,
    LearningOutcomesResponse,
    SplitRequest,
    SplitResponse,
    SuggestionsResponse,
    TemplateListResponse,
    UnitCreateRequest,
    UnitListResponse,
    UnitReorderRequest,
    UnitResponse,
    UnitUpdateRequest,
    UnitValidationResponse,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"
LOW_COMPLETENESS_THRESHOLD = 60


class UnitServiceError(Exception):
    """Base exception for unit service errors."""

    pass


class UnitNotFoundError(UnitServiceError, NotFoundError):
    """Raised when a unit or one of its ancestors is not visible."""

    pass


class TemplateNotFoundError(UnitServiceError, NotFoundError):
    """Raised for an unknown template id."""

    default_code = "TEMPLATE_NOT_FOUND"


class InvalidUnitOrderError(UnitServiceError, ValidationError):
    """Raised when a reorder payload is rejected."""

    default_code = "INVALID_REORDER"


class InvalidSplitError(UnitServiceError, ValidationError):
    """Raised when a split position does not leave activities on both sides."""

    default_code = "INVALID_SPLIT"


async def count_unit_resources(db: AsyncSession, unit_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Resource).where(
            Resource.entity_type == EntityKind.UNIT.value,
            Resource.entity_id == unit_id,
        )
    )
    return result.scalar() or 0


async def refresh_completeness(db: AsyncSession, unit: Unit) -> int:
    """Recompute and store a unit's completeness score.

    Pending changes must be flushed so the resource count is current.
    """
    result = score_unit(
        unit.objectives,
        unit.skills,
        unit.activities,
        unit.rubric,
        await count_unit_resources(db, unit.id),
    )
    unit.completeness_score = result.score
    return result.score


class UnitService:
    """Service for managing unit blueprints.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(
        self,
        db: AsyncSession,
        tenant_id: str,
        suggestion_provider: SuggestionProvider | None = None,
    ) -> None:
        self.db = db
        self.tenant_id = tenant_id
        self.suggestion_provider = suggestion_provider or RuleBasedSuggestionProvider()

    async def list_units(self, course_id: str) -> UnitListResponse:
        course = await self._get_course(course_id)
        units = await self._siblings(course.id)
        return UnitListResponse(units=[UnitResponse.model_validate(u) for u in units])

    async def create_unit(
        self,
        course_id: str,
        request: UnitCreateRequest,
        user_id: str,
    ) -> UnitResponse:
        """Append a unit to a course and score it.

        Raises:
            UnitNotFoundError: If the course is not visible.
            VersionFrozenError: If the owning version is not a draft.
        """
        course = await self._get_course(course_id)
        ensure_editable(await get_version_for_course(self.db, course))

        unit = await self._append_unit(course.id, request.model_dump(), user_id)
        await self.db.commit()
        await self.db.refresh(unit)

        logger.info("Created unit: %s in course %s", unit.id, course.id)

        return UnitResponse.model_validate(unit)

    async def get_unit(self, unit_id: str) -> UnitResponse:
        unit = await self._get_by_id(unit_id)
        return UnitResponse.model_validate(unit)

    async def update_unit(
        self,
        unit_id: str,
        request: UnitUpdateRequest,
        user_id: str,
    ) -> UnitResponse:
        """Apply a partial update and rescore the unit."""
        updates = collect_updates(request)
        unit = await self._get_by_id(unit_id)
        await self._ensure_editable(unit)

        apply_updates(unit, updates)
        unit.updated_by = user_id
        await refresh_completeness(self.db, unit)

        await self.db.commit()
        await self.db.refresh(unit)

        logger.info("Updated unit: %s", unit.id)

        return UnitResponse.model_validate(unit)

    async def delete_unit(self, unit_id: str, user_id: str) -> None:
        """Soft-delete a unit and close the gap in its siblings."""
        unit = await self._get_by_id(unit_id)
        await self._ensure_editable(unit)

        unit.soft_delete()
        unit.updated_by = user_id
        renumber([u for u in await self._siblings(unit.course_id) if u.id != unit.id])

        await self.db.commit()

        logger.info("Deleted unit: %s", unit_id)

    async def reorder_units(self, request: UnitReorderRequest, user_id: str) -> ReorderResponse:
        """Reassign positions of every live unit of one course.

        Raises:
            InvalidUnitOrderError: If the payload is not a permutation of
                the course's live units.
        """
        course_id = request.course_id
        if course_id is None:
            first = await get_live_unit(self.db, self.tenant_id, request.orders[0].id)
            if first is None:
                raise InvalidUnitOrderError(
                    "Reorder payload contains unknown ids",
                    details={"unknown_ids": [request.orders[0].id]},
                )
            course_id = first.course_id

        course = await self._get_course(course_id)
        ensure_editable(await get_version_for_course(self.db, course))

        units = await self._siblings(course.id)
        try:
            positions = validate_reorder(
                [u.id for u in units],
                [(item.id, item.order_index) for item in request.orders],
            )
        except ReorderError as e:
            raise InvalidUnitOrderError(e.message, details=e.details)

        updated = 0
        for unit in units:
            if unit.order_index != positions[unit.id]:
                unit.order_index = positions[unit.id]
                unit.updated_by = user_id
                updated += 1

        await self.db.commit()

        logger.info("Reordered %d units in course %s", updated, course.id)

        return ReorderResponse(message="Units reordered successfully", updated=updated)

    async def bulk_update(self, request: BulkUpdateRequest, user_id: str) -> BulkUpdateResponse:
        """Apply several unit updates in one transaction.

        Every id and payload is validated before the first change is made.
        """
        planned: list[tuple[Unit, dict[str, Any]]] = []
        for item in request.updates:
            updates = collect_updates(item.data)
            unit = await self._get_by_id(item.id)
            await self._ensure_editable(unit)
            planned.append((unit, updates))

        for unit, updates in planned:
            apply_updates(unit, updates)
            unit.updated_by = user_id
            await refresh_completeness(self.db, unit)

        await self.db.commit()
        for unit, _ in planned:
            await self.db.refresh(unit)

        logger.info("Bulk updated %d units", len(planned))

        return BulkUpdateResponse(
            updated=len(planned),
            units=[UnitResponse.model_validate(unit) for unit, _ in planned],
        )

    async def duplicate_unit(
        self,
        unit_id: str,
        request: DuplicateRequest,
        user_id: str,
    ) -> UnitResponse:
        """Deep-copy a unit, including its resources, to the end of a course."""
        source = await self._get_by_id(unit_id)
        target_course_id = request.target_course_id or source.course_id
        target = await self._get_course(target_course_id)
        ensure_editable(await get_version_for_course(self.db, target))

        title = source.title
        if target.id == source.course_id:
            title = f"{title}{COPY_SUFFIX}"

        copy = await self._append_unit(
            target.id,
            {
                "title": title,
                "objectives": list(source.objectives or []),
                "skills": list(source.skills or []),
                "activities": list(source.activities or []),
                "rubric": source.rubric,
                "homework": source.homework,
                "hours": source.hours,
                "difficulty_level": source.difficulty_level,
                "estimated_time": source.estimated_time,
                "notes": source.notes,
            },
            user_id,
        )

        result = await self.db.execute(
            select(Resource)
            .where(
                Resource.entity_type == EntityKind.UNIT.value,
                Resource.entity_id == source.id,
            )
            .order_by(Resource.order_index)
        )
        for resource in result.scalars().all():
            self.db.add(
                Resource(
                    tenant_id=self.tenant_id,
                    entity_type=EntityKind.UNIT.value,
                    entity_id=copy.id,
                    title=resource.title,
                    kind=resource.kind,
                    description=resource.description,
                    url=resource.url,
                    file_path=resource.file_path,
                    mime_type=resource.mime_type,
                    license_type=resource.license_type,
                    order_index=resource.order_index,
                    is_required=resource.is_required,
                    created_by=user_id,
                )
            )
        await self.db.flush()
        await refresh_completeness(self.db, copy)

        await self.db.commit()
        await self.db.refresh(copy)

        logger.info("Duplicated unit %s as %s", source.id, copy.id)

        return UnitResponse.model_validate(copy)

    async def split_unit(
        self,
        unit_id: str,
        request: SplitRequest,
        user_id: str,
    ) -> SplitResponse:
        """Move the activities after a position into a new following unit.

        Hours are divided in proportion to the number of activities on each
        side. Objectives and skills are copied to the new unit.

        Raises:
            InvalidSplitError: If the position would leave either side empty.
        """
        unit = await self._get_by_id(unit_id)
        await self._ensure_editable(unit)

        activities = list(unit.activities or [])
        split_after = request.split_after_order_index
        if split_after < 0 or split_after >= len(activities) - 1:
            raise InvalidSplitError(
                "split_after_order_index must leave activities in both units",
                details={
                    "split_after_order_index": split_after,
                    "activities_count": len(activities),
                    "valid_range": [0, max(len(activities) - 2, 0)],
                },
            )

        kept = activities[: split_after + 1]
        moved = activities[split_after + 1 :]
        total_hours = unit.hours or 0
        kept_hours = round(total_hours * len(kept) / len(activities), 2)

        siblings = [u for u in await self._siblings(unit.course_id) if u.id != unit.id]
        shift_after(siblings, unit.order_index + 1)

        new_unit = Unit(
            tenant_id=self.tenant_id,
            course_id=unit.course_id,
            title=request.new_unit_title,
            objectives=list(unit.objectives or []),
            skills=list(unit.skills or []),
            activities=moved,
            rubric=unit.rubric,
            hours=round(total_hours - kept_hours, 2),
            order_index=unit.order_index + 1,
            difficulty_level=unit.difficulty_level,
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(new_unit)

        unit.activities = kept
        unit.hours = kept_hours
        unit.updated_by = user_id

        await self.db.flush()
        await refresh_completeness(self.db, unit)
        await refresh_completeness(self.db, new_unit)

        await self.db.commit()
        await self.db.refresh(unit)
        await self.db.refresh(new_unit)

        logger.info("Split unit %s after activity %d into %s", unit.id, split_after, new_unit.id)

        return SplitResponse(
            original=UnitResponse.model_validate(unit),
            new_unit=UnitResponse.model_validate(new_unit),
        )

    async def create_from_template(
        self,
        course_id: str,
        request: FromTemplateRequest,
        user_id: str,
    ) -> UnitResponse:
        """Instantiate a built-in template at the end of a course."""
        template = get_template(request.template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template not found: {request.template_id}")

        course = await self._get_course(course_id)
        ensure_editable(await get_version_for_course(self.db, course))

        unit = await self._append_unit(
            course.id,
            unit_fields_from_template(template, request.customizations),
            user_id,
        )
        await self.db.commit()
        await self.db.refresh(unit)

        logger.info("Created unit %s from %s", unit.id, template.id)

        return UnitResponse.model_validate(unit)

    def get_templates(self, level: str | None = None, skill: str | None = None) -> TemplateListResponse:
        return TemplateListResponse(templates=list_templates(level=level, skill=skill))

    async def get_completeness(self, unit_id: str) -> CompletenessResponse:
        """Score a unit and store the refreshed score."""
        unit = await self._get_by_id(unit_id)
        result = score_unit(
            unit.objectives,
            unit.skills,
            unit.activities,
            unit.rubric,
            await count_unit_resources(self.db, unit.id),
        )

        if unit.completeness_score != result.score:
            unit.completeness_score = result.score
            await self.db.commit()

        return CompletenessResponse(
            unit_id=unit.id,
            score=result.score,
            max_score=MAX_SCORE,
            breakdown=CompletenessBreakdown(**result.breakdown),
            missing=result.missing,
        )

    async def get_learning_outcomes(self, unit_id: str) -> LearningOutcomesResponse:
        unit = await self._get_by_id(unit_id)
        course = await self._get_course(unit.course_id)
        return LearningOutcomesResponse(
            unit_id=unit.id,
            objectives=list(unit.objectives or []),
            skills=list(unit.skills or []),
            course_outcomes=list(course.learning_outcomes or []),
        )

    async def validate_unit(self, unit_id: str) -> UnitValidationResponse:
        """Check a unit for blocking errors and quality warnings."""
        unit = await self._get_by_id(unit_id)
        resource_count = await count_unit_resources(self.db, unit.id)
        score = score_unit(
            unit.objectives, unit.skills, unit.activities, unit.rubric, resource_count
        ).score

        errors = []
        if not (unit.title or "").strip():
            errors.append("Unit title is required")
        if not unit.objectives:
            errors.append("At least one learning objective is required")
        if (unit.hours or 0) <= 0:
            errors.append("Unit hours must be greater than 0")

        warnings = []
        if not unit.activities:
            warnings.append("Unit has no activities")
        if not unit.rubric:
            warnings.append("Unit has no rubric")
        if resource_count == 0:
            warnings.append("Unit has no resources")
        if score < LOW_COMPLETENESS_THRESHOLD:
            warnings.append(f"Completeness score {score} is below {LOW_COMPLETENESS_THRESHOLD}")

        return UnitValidationResponse(
            unit_id=unit.id,
            valid=not errors,
            errors=errors,
            warnings=warnings,
        )

    async def get_suggestions(self, unit_id: str) -> SuggestionsResponse:
        unit = await self._get_by_id(unit_id)
        suggestions, source = await self.suggestion_provider.suggest(
            {
                "title": unit.title,
                "objectives": unit.objectives,
                "skills": unit.skills,
                "activities": unit.activities,
                "rubric": unit.rubric,
                "difficulty_level": unit.difficulty_level,
            }
        )
        return SuggestionsResponse(unit_id=unit.id, suggestions=suggestions, source=source)

    async def _append_unit(self, course_id: str, fields: dict[str, Any], user_id: str) -> Unit:
        siblings = await self._siblings(course_id)
        unit = Unit(
            tenant_id=self.tenant_id,
            course_id=course_id,
            **fields,
            order_index=len(siblings),
            created_by=user_id,
            updated_by=user_id,
        )
        unit.completeness_score = score_unit(
            unit.objectives, unit.skills, unit.activities, unit.rubric, 0
        ).score
        self.db.add(unit)
        await self.db.flush()
        return unit

    async def _get_by_id(self, unit_id: str) -> Unit:
        unit = await get_live_unit(self.db, self.tenant_id, unit_id)
        if not unit:
            raise UnitNotFoundError(f"Unit not found: {unit_id}")
        return unit

    async def _get_course(self, course_id: str) -> Course:
        course = await get_live_course(self.db, self.tenant_id, course_id)
        if not course:
            raise UnitNotFoundError(f"Course not found: {course_id}")
        return course

    async def _ensure_editable(self, unit: Unit) -> None:
        course = await self._get_course(unit.course_id)
        ensure_editable(await get_version_for_course(self.db, course))

    async def _siblings(self, course_id: str) -> list[Unit]:
        result = await self.db.execute(
            select(Unit)
            .where(
                Unit.course_id == course_id,
                Unit.tenant_id == self.tenant_id,
                Unit.deleted_at.is_(None),
            )
            .order_by(Unit.order_index, Unit.created_at)
        )
        return list(result.scalars().all())
