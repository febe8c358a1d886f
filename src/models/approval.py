# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Approval request and response models."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel

ApprovalStatus = Literal["requested", "in_review", "approved", "rejected", "escalated"]
ApprovalPriority = Literal["low", "normal", "high", "urgent"]


class ApprovalCreateRequest(BaseModel):
    reviewer_id: str | None = None
    priority: ApprovalPriority = "normal"
    comments: str | None = Field(default=None, max_length=2000)
    due_date: date | None = None


class ApprovalUpdateRequest(BaseModel):
    status: ApprovalStatus | None = None
    comments: str | None = Field(default=None, max_length=2000)
    reviewer_id: str | None = None
    priority: ApprovalPriority | None = None


class ApprovalResponse(ORMModel):
    id: str
    tenant_id: str
    version_id: str
    requested_by: str | None = None
    reviewer_id: str | None = None
    status: str
    priority: str
    comments: str | None = None
    due_date: date | None = None
    decided_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ApprovalListResponse(BaseModel):
    approvals: list[ApprovalResponse]
