# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course blueprint domain."""

from src.domains.course.service import (
    CourseCodeExistsError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
    InvalidCourseOrderError,
)

__all__ = [
    "CourseService",
    "CourseServiceError",
    "CourseNotFoundError",
    "CourseCodeExistsError",
    "InvalidCourseOrderError",
]
