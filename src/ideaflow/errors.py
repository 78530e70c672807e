"""Exceptions raised by the evaluation service."""

from __future__ import annotations

from typing import Any


class IdeaflowError(Exception):
    """Base class for ideaflow errors."""


class IdeaNotFoundError(IdeaflowError):
    """Raised when an idea does not exist."""

    def __init__(self, idea_id: str) -> None:
        super().__init__(f"Idea not found: {idea_id}")
        self.idea_id = idea_id


class PermissionDeniedError(IdeaflowError):
    """Raised when a role lacks the capability for an action."""


class ValidationError(IdeaflowError):
    """Raised when submitted field values are invalid."""


class InvalidStatusTransitionError(IdeaflowError):
    """Raised when a status transition is not allowed."""

    def __init__(
        self,
        current_status: Any = None,
        target_status: Any = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"Cannot transition from {current_status} to {target_status}")
        self.current_status = current_status
        self.target_status = target_status


class CommentRequiredError(InvalidStatusTransitionError):
    """Raised when a transition needs a justifying comment and none was given."""

    def __init__(self, current_status: Any = None, target_status: Any = None) -> None:
        super().__init__(
            current_status,
            target_status,
            message=f"Comment required when moving an idea to {target_status}",
        )


class ConcurrentModificationError(IdeaflowError):
    """Raised when an idea changed between read and write."""

    def __init__(self, idea_id: str) -> None:
        super().__init__(f"Idea {idea_id} was modified concurrently. Refresh and try again.")
        self.idea_id = idea_id
