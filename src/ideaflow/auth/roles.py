"""Capability checks for free-form role strings.

Roles come from the identity system as opaque text and may combine several
capabilities in one token (``"evaluator/admin"``), so every check matches
substrings of the normalized role rather than comparing against constants.
None of these functions raise; malformed input grants nothing.
"""

from __future__ import annotations

from typing import Any, NamedTuple

_ADMIN = "admin"
_EVALUATOR = "evaluator"
_SUBMITTER = "submitter"


class Capabilities(NamedTuple):
    """Permissions derived from a role string."""

    can_submit: bool
    can_evaluate: bool


def normalize(role: Any) -> str:
    """Return the trimmed, lowercased role, or "" for missing/non-string input."""
    if not role or not isinstance(role, str):
        return ""
    return role.strip().lower()


def has_admin_capability(role: Any) -> bool:
    return _ADMIN in normalize(role)


def has_evaluate_capability(role: Any) -> bool:
    return _EVALUATOR in normalize(role)


def is_exact_submitter(role: Any) -> bool:
    return normalize(role) == _SUBMITTER


def can_evaluate(role: Any) -> bool:
    """Check if a role may review ideas and change their status."""
    return has_evaluate_capability(role) or has_admin_capability(role)


def can_submit(role: Any) -> bool:
    """Check if a role may submit new ideas."""
    return is_exact_submitter(role) or has_admin_capability(role)


def capabilities(role: Any) -> Capabilities:
    return Capabilities(can_submit=can_submit(role), can_evaluate=can_evaluate(role))


def role_label(role: Any) -> str:
    """Human-readable label for a role."""
    if not role:
        return "Unknown"

    normalized = normalize(role)
    if _EVALUATOR in normalized and _ADMIN in normalized:
        return "Admin (Evaluator)"
    if _EVALUATOR in normalized:
        return "Evaluator"
    if _ADMIN in normalized:
        return "Admin"
    if normalized == _SUBMITTER:
        return "Submitter"

    # Unrecognised roles keep their own spelling, capitalized
    text = role if isinstance(role, str) else str(role)
    return text[:1].upper() + text[1:].lower()
