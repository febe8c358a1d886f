# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the curriculum API.

This package contains domain services that encapsulate business logic.
Each service is constructed per request with a session and the caller's
tenant, and commits its own changes.

Domains:
    auth: Login, token refresh and logout.
    framework: Curriculum frameworks (KCT).
    version: Framework versions and their approval workflow.
    course: Course blueprints inside a version.
    unit: Unit blueprints, templates, completeness and suggestions.
    resource: Files and links attached to curriculum entities.
    approval: Review records for submitted versions.
    comment: Threaded discussion on curriculum entities.
    mapping: Rollout of a version onto course templates or classes.
    catalog: Games and assignments.
    common: Shared ordering, pagination and attachment helpers.
"""
