# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework mapping request and response models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel

TargetType = Literal["course_template", "class_instance"]
RolloutPhase = Literal["planned", "pilot", "phased", "full"]
RiskLevel = Literal["low", "medium", "high", "critical"]
MappingStatus = Literal["planned", "validated", "applied", "failed", "rolled_back"]


class MappingCreateRequest(BaseModel):
    framework_id: str
    version_id: str
    target_type: TargetType
    target_id: str = Field(min_length=1, max_length=64)
    campus_id: str | None = None
    rollout_batch: str | None = Field(default=None, max_length=64)
    rollout_phase: RolloutPhase = "planned"
    risk_assessment: RiskLevel = "low"
    mismatch_report: Any | None = None
    override_reason: str | None = Field(default=None, max_length=2000)
    notes: str | None = None


class MappingUpdateRequest(BaseModel):
    rollout_phase: RolloutPhase | None = None
    risk_assessment: RiskLevel | None = None
    mismatch_report: Any | None = None
    override_reason: str | None = Field(default=None, max_length=2000)
    status: MappingStatus | None = None
    notes: str | None = None


class MappingFilters(BaseModel):
    framework_id: str | None = None
    version_id: str | None = None
    status: MappingStatus | None = None
    target_type: TargetType | None = None
    campus_id: str | None = None


class MappingResponse(ORMModel):
    id: str
    tenant_id: str
    framework_id: str
    version_id: str
    target_type: str
    target_id: str
    campus_id: str | None = None
    rollout_batch: str | None = None
    rollout_phase: str
    risk_assessment: str
    mismatch_report: Any | None = None
    override_reason: str | None = None
    status: str
    notes: str | None = None
    applied_at: datetime | None = None
    rolled_back_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    framework_name: str | None = None
    version_no: str | None = None
