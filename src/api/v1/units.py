# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit API endpoints.

This module provides endpoints for units:
- GET /templates - List built-in unit templates
- POST /reorder - Atomically reorder the units of a course
- POST /bulk-update - Update several units in one transaction
- GET /{unit_id} - Get a unit
- PATCH /{unit_id} - Update a unit
- DELETE /{unit_id} - Soft delete a unit, renumbering its siblings
- POST /{unit_id}/duplicate - Deep copy into the same or another course
- POST /{unit_id}/split - Split the activity list into a new unit
- GET /{unit_id}/completeness - Completeness score and breakdown
- GET /{unit_id}/learning-outcomes - Objectives, skills and course outcomes
- POST /{unit_id}/validate - Validation errors and warnings
- POST /{unit_id}/ai-suggestions - Content suggestions

IMPORTANT: Static routes (/templates, /reorder, /bulk-update) MUST be
defined before parameterized routes (/{unit_id}).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    DBSession,
    Deleter,
    Tenant,
    Writer,
    get_suggestion_provider,
)
from src.domains.unit import UnitService
from src.domains.unit.suggestions import SuggestionProvider
from src.models.common import ReorderResponse
from src.models.unit import (
    BulkUpdateRequest,
    BulkUpdateResponse,
    CompletenessResponse,
    DuplicateRequest,
    LearningOutcomesResponse,
    SplitRequest,
    SplitResponse,
    SuggestionsResponse,
    TemplateListResponse,
    UnitReorderRequest,
    UnitResponse,
    UnitUpdateRequest,
    UnitValidationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_unit_service(
    db: DBSession,
    tenant: Tenant,
    provider: SuggestionProvider = Depends(get_suggestion_provider),
) -> UnitService:
    return UnitService(db, tenant.tenant_id, suggestion_provider=provider)


UnitSvc = Annotated[UnitService, Depends(_get_unit_service)]


@router.get(
    "/templates",
    response_model=TemplateListResponse,
    summary="List unit templates",
)
async def list_templates(
    current_user: AuthenticatedUser,
    service: UnitSvc,
    level: str | None = Query(default=None),
    skill: str | None = Query(default=None),
) -> TemplateListResponse:
    return service.get_templates(level=level, skill=skill)


@router.post(
    "/reorder",
    response_model=ReorderResponse,
    summary="Reorder units",
)
async def reorder_units(
    data: UnitReorderRequest,
    current_user: Writer,
    service: UnitSvc,
) -> ReorderResponse:
    return await service.reorder_units(data, current_user.id)


@router.post(
    "/bulk-update",
    response_model=BulkUpdateResponse,
    summary="Bulk update units",
    description="All updates are validated first and applied in one transaction.",
)
async def bulk_update_units(
    data: BulkUpdateRequest,
    current_user: Writer,
    service: UnitSvc,
) -> BulkUpdateResponse:
    return await service.bulk_update(data, current_user.id)


@router.get(
    "/{unit_id}",
    response_model=UnitResponse,
    summary="Get unit",
)
async def get_unit(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> UnitResponse:
    return await service.get_unit(unit_id)


@router.patch(
    "/{unit_id}",
    response_model=UnitResponse,
    summary="Update unit",
)
async def update_unit(
    unit_id: str,
    data: UnitUpdateRequest,
    current_user: Writer,
    service: UnitSvc,
) -> UnitResponse:
    return await service.update_unit(unit_id, data, current_user.id)


@router.delete(
    "/{unit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete unit",
)
async def delete_unit(
    unit_id: str,
    current_user: Deleter,
    service: UnitSvc,
) -> Response:
    await service.delete_unit(unit_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{unit_id}/duplicate",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate unit",
)
async def duplicate_unit(
    unit_id: str,
    current_user: Writer,
    service: UnitSvc,
    data: DuplicateRequest | None = None,
) -> UnitResponse:
    return await service.duplicate_unit(unit_id, data or DuplicateRequest(), current_user.id)


@router.post(
    "/{unit_id}/split",
    response_model=SplitResponse,
    summary="Split unit",
)
async def split_unit(
    unit_id: str,
    data: SplitRequest,
    current_user: Writer,
    service: UnitSvc,
) -> SplitResponse:
    return await service.split_unit(unit_id, data, current_user.id)


@router.get(
    "/{unit_id}/completeness",
    response_model=CompletenessResponse,
    summary="Unit completeness",
)
async def get_completeness(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> CompletenessResponse:
    return await service.get_completeness(unit_id)


@router.get(
    "/{unit_id}/learning-outcomes",
    response_model=LearningOutcomesResponse,
    summary="Unit learning outcomes",
)
async def get_learning_outcomes(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> LearningOutcomesResponse:
    return await service.get_learning_outcomes(unit_id)


@router.post(
    "/{unit_id}/validate",
    response_model=UnitValidationResponse,
    summary="Validate unit",
)
async def validate_unit(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> UnitValidationResponse:
    return await service.validate_unit(unit_id)


@router.post(
    "/{unit_id}/ai-suggestions",
    response_model=SuggestionsResponse,
    summary="Content suggestions",
    description="Suggest objectives, activities and assessment from the configured provider.",
)
async def get_suggestions(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> SuggestionsResponse:
    return await service.get_suggestions(unit_id)
