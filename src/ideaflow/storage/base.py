"""Abstract storage interface for ideas and their evaluations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """Abstract interface for ideaflow storage backends.

    Records cross this boundary as plain dicts (``Model.to_storage()``).
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend for use."""

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""

    # --- Idea operations ---

    @abstractmethod
    async def insert_idea(self, idea: dict[str, Any]) -> dict[str, Any]:
        """Insert an idea. Returns the inserted idea."""

    @abstractmethod
    async def get_idea(self, idea_id: str) -> dict[str, Any] | None:
        """Get an idea by ID. Returns None if not found."""

    @abstractmethod
    async def list_ideas(self, *, status: str | None = None) -> list[dict[str, Any]]:
        """List ideas, newest first, optionally by status."""

    # --- Evaluation operations ---

    @abstractmethod
    async def apply_transition(
        self,
        idea_id: str,
        *,
        expected_version: int,
        updates: dict[str, Any],
        evaluation: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Atomically update an idea and append its evaluation record.

        Applies only when the stored version equals ``expected_version``;
        the version is then incremented. Returns the updated idea, or None
        when the idea is missing or the version did not match. Nothing is
        written in that case.
        """

    @abstractmethod
    async def insert_evaluation(self, evaluation: dict[str, Any]) -> dict[str, Any]:
        """Append a comment-only evaluation record."""

    @abstractmethod
    async def list_evaluations(self, idea_id: str) -> list[dict[str, Any]]:
        """Evaluations for an idea, oldest first."""
