"""ideaflow event system."""

from ideaflow.events.bus import EventBus
from ideaflow.events.types import (
    EvaluationCommented,
    EventPayload,
    EventType,
    IdeaStatusChanged,
    IdeaSubmitted,
)

__all__ = [
    "EvaluationCommented",
    "EventBus",
    "EventPayload",
    "EventType",
    "IdeaStatusChanged",
    "IdeaSubmitted",
]
