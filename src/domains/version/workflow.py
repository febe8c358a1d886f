# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Version lifecycle state machine.

    draft --submit--> submitted --approve--> approved --publish--> published
      ^                   |
      +------reject-------+

    draft | submitted | approved | published --archive--> archived

transition() is the only place that decides whether an action is allowed.
Callers apply the side effects (timestamps, approvals, framework status)
after a successful result.
"""

import enum
from dataclasses import dataclass, field


class VersionState(str, enum.Enum):
    """Lifecycle states of a framework version."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class VersionAction(str, enum.Enum):
    """Workflow actions that move a version between states."""

    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    PUBLISH = "publish"
    ARCHIVE = "archive"


TRANSITIONS: dict[tuple[VersionState, VersionAction], VersionState] = {
    (VersionState.DRAFT, VersionAction.SUBMIT): VersionState.SUBMITTED,
    (VersionState.SUBMITTED, VersionAction.APPROVE): VersionState.APPROVED,
    (VersionState.SUBMITTED, VersionAction.REJECT): VersionState.DRAFT,
    (VersionState.APPROVED, VersionAction.PUBLISH): VersionState.PUBLISHED,
    (VersionState.DRAFT, VersionAction.ARCHIVE): VersionState.ARCHIVED,
    (VersionState.SUBMITTED, VersionAction.ARCHIVE): VersionState.ARCHIVED,
    (VersionState.APPROVED, VersionAction.ARCHIVE): VersionState.ARCHIVED,
    (VersionState.PUBLISHED, VersionAction.ARCHIVE): VersionState.ARCHIVED,
}

# Content (courses, units, changelog) is editable only in draft
EDITABLE_STATES = frozenset({VersionState.DRAFT})


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of applying an action to a state.

    Attributes:
        ok: Whether the action is allowed.
        from_state: State before the action.
        to_state: State after the action, when allowed.
        error: Reason the action was refused, when not allowed.
        allowed_actions: Actions that are valid from from_state.
    """

    ok: bool
    from_state: VersionState | str
    to_state: VersionState | None = None
    error: str | None = None
    allowed_actions: list[str] = field(default_factory=list)


def allowed_actions(state: VersionState | str) -> list[VersionAction]:
    """List the actions permitted from a state, in declaration order."""
    state = VersionState(state)
    return [action for (source, action) in TRANSITIONS if source == state]


def transition(state: VersionState | str, action: VersionAction | str) -> TransitionResult:
    """Apply an action to a state.

    Unknown state or action strings are reported as refused transitions
    rather than raised.
    """
    try:
        current = VersionState(state)
    except ValueError:
        return TransitionResult(
            ok=False,
            from_state=state,
            error=f"Unknown version state: {state}",
        )

    permitted = [a.value for a in allowed_actions(current)]

    try:
        requested = VersionAction(action)
    except ValueError:
        return TransitionResult(
            ok=False,
            from_state=current,
            error=f"Unknown action: {action}",
            allowed_actions=permitted,
        )

    target = TRANSITIONS.get((current, requested))
    if target is None:
        return TransitionResult(
            ok=False,
            from_state=current,
            error=f"Cannot {requested.value} a version in state {current.value}",
            allowed_actions=permitted,
        )

    return TransitionResult(
        ok=True,
        from_state=current,
        to_state=target,
        allowed_actions=permitted,
    )


def is_editable(state: VersionState | str) -> bool:
    """Check whether a version's content may still change."""
    return VersionState(state) in EDITABLE_STATES
