"""Idea model and the closed status enum."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class IdeaStatus(StrEnum):
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


def parse_status(value: Any) -> IdeaStatus | None:
    """Return the IdeaStatus for a member or its wire text, None otherwise."""
    if isinstance(value, IdeaStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return IdeaStatus(value)
    except ValueError:
        return None


class Idea(BaseModel):
    """A submitted idea moving through the evaluation workflow."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    title: str
    description: str
    category: str
    status: IdeaStatus = IdeaStatus.SUBMITTED
    submitted_by: str | None = None
    version: int = 0
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    updated_at: str | None = None

    def to_storage(self) -> dict:
        return self.model_dump(mode="json")

    def to_response(self, *, detail: str = "summary") -> dict:
        data = {
            "_v": "1.0",
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "category": self.category,
        }
        if detail != "summary":
            data.update(
                {
                    "description": self.description,
                    "submitted_by": self.submitted_by,
                    "created_at": self.created_at,
                    "updated_at": self.updated_at,
                }
            )
        return data
