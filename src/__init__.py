"""KCT Curriculum API.

Multi-tenant curriculum framework management: frameworks, versions with an
approval workflow, courses, units, attachments and a content catalog.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
