# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Threaded comments domain."""

from src.domains.comment.service import (
    CommentNotFoundError,
    CommentPermissionError,
    CommentService,
    CommentServiceError,
    InvalidParentCommentError,
)

__all__ = [
    "CommentService",
    "CommentServiceError",
    "CommentNotFoundError",
    "CommentPermissionError",
    "InvalidParentCommentError",
]
