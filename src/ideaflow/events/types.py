"""Event types and their payloads.

Each event type carries exactly one payload model; ``EventBus.emit`` rejects
any other payload.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from ideaflow.models.idea import IdeaStatus


class EventType(StrEnum):
    IDEA_SUBMITTED = "idea.submitted"
    IDEA_STATUS_CHANGED = "idea.status_changed"

    EVALUATION_COMMENTED = "evaluation.commented"


class EventPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    idea_id: str


class IdeaSubmitted(EventPayload):
    title: str
    submitted_by: str


class IdeaStatusChanged(EventPayload):
    from_status: IdeaStatus
    to_status: IdeaStatus
    evaluation_id: str
    evaluator: str


class EvaluationCommented(EventPayload):
    evaluation_id: str
    evaluator: str


PAYLOAD_TYPES: dict[EventType, type[EventPayload]] = {
    EventType.IDEA_SUBMITTED: IdeaSubmitted,
    EventType.IDEA_STATUS_CHANGED: IdeaStatusChanged,
    EventType.EVALUATION_COMMENTED: EvaluationCommented,
}
