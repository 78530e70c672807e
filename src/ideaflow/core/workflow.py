"""Idea status state machine.

Lifecycle: SUBMITTED -> UNDER_REVIEW -> ACCEPTED, with REJECTED reachable from
both non-terminal states. ACCEPTED and REJECTED are terminal.

Every query accepts an IdeaStatus, its wire text, or anything else; unknown
input yields no transitions, no suggestions, and an identity label.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, NamedTuple

from ideaflow.models.idea import IdeaStatus, parse_status

logger = logging.getLogger(__name__)

# Order is presentation order for the review UI
VALID_TRANSITIONS: dict[IdeaStatus, tuple[IdeaStatus, ...]] = {
    IdeaStatus.SUBMITTED: (IdeaStatus.UNDER_REVIEW, IdeaStatus.REJECTED),
    IdeaStatus.UNDER_REVIEW: (IdeaStatus.ACCEPTED, IdeaStatus.REJECTED),
    IdeaStatus.ACCEPTED: (),
    IdeaStatus.REJECTED: (),
}

STATUS_LABELS: dict[IdeaStatus, str] = {
    IdeaStatus.SUBMITTED: "Submitted",
    IdeaStatus.UNDER_REVIEW: "Under Review",
    IdeaStatus.ACCEPTED: "Accepted",
    IdeaStatus.REJECTED: "Rejected",
}


class CommentPolicy(StrEnum):
    """Which target statuses need a justifying comment."""

    REJECTION = "rejection"
    DECISION = "decision"


COMMENT_REQUIRED_FOR: dict[CommentPolicy, frozenset[IdeaStatus]] = {
    CommentPolicy.REJECTION: frozenset({IdeaStatus.REJECTED}),
    CommentPolicy.DECISION: frozenset({IdeaStatus.ACCEPTED, IdeaStatus.REJECTED}),
}


def resolve_policy(value: Any) -> CommentPolicy:
    """Return the CommentPolicy named by ``value``, or the default for unknown names."""
    if isinstance(value, CommentPolicy):
        return value
    if isinstance(value, str):
        try:
            return CommentPolicy(value.strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown comment policy %r, using %r", value, CommentPolicy.REJECTION.value)
    return CommentPolicy.REJECTION


class StatusSuggestion(NamedTuple):
    target_status: IdeaStatus
    short_label: str
    description: str


_SUGGESTIONS: dict[IdeaStatus, tuple[StatusSuggestion, ...]] = {
    IdeaStatus.SUBMITTED: (
        StatusSuggestion(IdeaStatus.UNDER_REVIEW, "Start Review", "Begin evaluating this idea"),
        StatusSuggestion(IdeaStatus.REJECTED, "Reject", "Decline with feedback required"),
    ),
    IdeaStatus.UNDER_REVIEW: (
        StatusSuggestion(IdeaStatus.ACCEPTED, "Accept", "Approve for implementation"),
        StatusSuggestion(IdeaStatus.REJECTED, "Reject", "Decline with feedback"),
    ),
}


def allowed_next_statuses(current: Any) -> tuple[IdeaStatus, ...]:
    """Return the statuses reachable from ``current`` in display order."""
    status = parse_status(current)
    if status is None:
        return ()
    return VALID_TRANSITIONS.get(status, ())


def is_valid_transition(current: Any, target: Any) -> bool:
    target_status = parse_status(target)
    if target_status is None:
        return False
    return target_status in allowed_next_statuses(current)


def is_terminal(status: Any) -> bool:
    """Check if a known status has no outgoing transitions."""
    parsed = parse_status(status)
    return parsed is not None and not VALID_TRANSITIONS[parsed]


def is_comment_required(target: Any, policy: Any = CommentPolicy.REJECTION) -> bool:
    """Check if moving an idea to ``target`` needs a comment under ``policy``.

    ``policy`` may be a CommentPolicy or its name; unknown names fall back to
    the default policy.
    """
    target_status = parse_status(target)
    if target_status is None:
        return False
    return target_status in COMMENT_REQUIRED_FOR[resolve_policy(policy)]


def status_suggestions(current: Any) -> tuple[StatusSuggestion, ...]:
    status = parse_status(current)
    if status is None:
        return ()
    return _SUGGESTIONS.get(status, ())


def display_label(status: Any) -> Any:
    """Human-readable label for a status; unknown values pass through unchanged."""
    parsed = parse_status(status)
    if parsed is None:
        return status
    return STATUS_LABELS[parsed]
