"""In-process storage backend."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from ideaflow.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_IDEA_COLUMNS = {"status", "updated_at"}


class MemoryStore(StorageBackend):
    """Dict-backed storage. A single lock makes each write atomic."""

    def __init__(self) -> None:
        self._ideas: dict[str, dict[str, Any]] = {}
        self._evaluations: dict[str, list[dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        logger.debug("Memory store ready")

    async def close(self) -> None:
        self._ideas.clear()
        self._evaluations.clear()

    async def insert_idea(self, idea: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            if idea["id"] in self._ideas:
                raise ValueError(f"Duplicate idea id: {idea['id']}")
            self._ideas[idea["id"]] = copy.deepcopy(idea)
            self._evaluations[idea["id"]] = []
        return copy.deepcopy(idea)

    async def get_idea(self, idea_id: str) -> dict[str, Any] | None:
        row = self._ideas.get(idea_id)
        return copy.deepcopy(row) if row is not None else None

    async def list_ideas(self, *, status: str | None = None) -> list[dict[str, Any]]:
        rows = [r for r in self._ideas.values() if status is None or r["status"] == status]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return copy.deepcopy(rows)

    async def apply_transition(
        self,
        idea_id: str,
        *,
        expected_version: int,
        updates: dict[str, Any],
        evaluation: dict[str, Any],
    ) -> dict[str, Any] | None:
        rejected = set(updates) - _IDEA_COLUMNS
        if rejected:
            raise ValueError(f"Cannot update idea fields: {sorted(rejected)}")

        async with self._lock:
            row = self._ideas.get(idea_id)
            if row is None or row["version"] != expected_version:
                return None
            row.update(updates)
            row["version"] = expected_version + 1
            self._evaluations[idea_id].append(copy.deepcopy(evaluation))
            return copy.deepcopy(row)

    async def insert_evaluation(self, evaluation: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            records = self._evaluations.get(evaluation["idea_id"])
            if records is None:
                raise KeyError(evaluation["idea_id"])
            records.append(copy.deepcopy(evaluation))
        return copy.deepcopy(evaluation)

    async def list_evaluations(self, idea_id: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._evaluations.get(idea_id, []))
