"""Evaluation records and status transition requests."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from ideaflow.models.idea import IdeaStatus


class Evaluation(BaseModel):
    """An append-only review entry attached to an idea.

    ``status_snapshot`` is the status the idea was moved to by this entry,
    or None for a comment-only entry.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    idea_id: str
    evaluator: str
    evaluator_role: str | None = None
    comment: str
    status_snapshot: IdeaStatus | None = None
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_storage(self) -> dict:
        return self.model_dump(mode="json")

    def to_response(self) -> dict:
        return {
            "_v": "1.0",
            "id": self.id,
            "evaluator": self.evaluator,
            "comment": self.comment,
            "status_snapshot": self.status_snapshot.value if self.status_snapshot else None,
            "created_at": self.created_at,
        }


class StatusTransitionRequest(BaseModel):
    """A requested move of an idea to ``target_status``."""

    target_status: IdeaStatus
    comment: str | None = None
