"""Role resolution and token claims."""

from ideaflow.auth.roles import Capabilities, can_evaluate, can_submit, capabilities, role_label

__all__ = ["Capabilities", "can_evaluate", "can_submit", "capabilities", "role_label"]
