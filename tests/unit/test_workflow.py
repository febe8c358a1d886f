# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the version lifecycle state machine."""

import pytest

from src.domains.version.workflow import (
    TRANSITIONS,
    VersionAction,
    VersionState,
    allowed_actions,
    is_editable,
    transition,
)


class TestTransition:
    """Tests for transition()."""

    @pytest.mark.parametrize(
        "state,action,expected",
        [
            ("draft", "submit", VersionState.SUBMITTED),
            ("submitted", "approve", VersionState.APPROVED),
            ("submitted", "reject", VersionState.DRAFT),
            ("approved", "publish", VersionState.PUBLISHED),
            ("draft", "archive", VersionState.ARCHIVED),
            ("submitted", "archive", VersionState.ARCHIVED),
            ("approved", "archive", VersionState.ARCHIVED),
            ("published", "archive", VersionState.ARCHIVED),
        ],
    )
    def test_allowed_transitions(self, state: str, action: str, expected: VersionState) -> None:
        result = transition(state, action)

        assert result.ok is True
        assert result.from_state == VersionState(state)
        assert result.to_state == expected
        assert result.error is None

    def test_publish_from_draft_is_refused(self) -> None:
        """A draft must be reviewed before it can be published."""
        result = transition(VersionState.DRAFT, VersionAction.PUBLISH)

        assert result.ok is False
        assert result.to_state is None
        assert "publish" in result.error
        assert result.allowed_actions == ["submit", "archive"]

    def test_archived_is_terminal(self) -> None:
        for action in VersionAction:
            result = transition("archived", action)
            assert result.ok is False
            assert result.allowed_actions == []

    def test_approve_twice_is_refused(self) -> None:
        result = transition("approved", "approve")

        assert result.ok is False
        assert result.allowed_actions == ["publish", "archive"]

    def test_unknown_state(self) -> None:
        result = transition("pending", "submit")

        assert result.ok is False
        assert "Unknown version state" in result.error

    def test_unknown_action(self) -> None:
        result = transition("draft", "rewind")

        assert result.ok is False
        assert "Unknown action" in result.error
        assert result.allowed_actions == ["submit", "archive"]

    def test_every_refused_pair_reports_error(self) -> None:
        for state in VersionState:
            for action in VersionAction:
                result = transition(state, action)
                assert result.ok == ((state, action) in TRANSITIONS)
                if not result.ok:
                    assert result.error


class TestAllowedActions:
    """Tests for allowed_actions()."""

    def test_submitted(self) -> None:
        assert allowed_actions("submitted") == [
            VersionAction.APPROVE,
            VersionAction.REJECT,
            VersionAction.ARCHIVE,
        ]

    def test_published(self) -> None:
        assert allowed_actions(VersionState.PUBLISHED) == [VersionAction.ARCHIVE]


class TestIsEditable:
    """Only drafts accept content changes."""

    def test_draft_is_editable(self) -> None:
        assert is_editable("draft") is True

    @pytest.mark.parametrize("state", ["submitted", "approved", "published", "archived"])
    def test_other_states_are_frozen(self, state: str) -> None:
        assert is_editable(state) is False
