"""Tests for the idea event bus."""

import pytest
from pydantic import ValidationError

from ideaflow.events.bus import EventBus
from ideaflow.events.types import (
    EvaluationCommented,
    EventType,
    IdeaStatusChanged,
    IdeaSubmitted,
)
from ideaflow.models.idea import IdeaStatus


def _status_changed(idea_id: str = "idea-1") -> IdeaStatusChanged:
    return IdeaStatusChanged(
        idea_id=idea_id,
        from_status=IdeaStatus.SUBMITTED,
        to_status=IdeaStatus.UNDER_REVIEW,
        evaluation_id="ev-1",
        evaluator="eve",
    )


async def test_emit_to_specific_and_global_listeners():
    bus = EventBus()
    seen = []

    async def specific(event_type, payload):
        seen.append(("specific", event_type, payload.idea_id))

    async def everything(event_type, payload):
        seen.append(("all", event_type, payload.idea_id))

    bus.on(EventType.IDEA_SUBMITTED, specific)
    bus.on_all(everything)

    await bus.emit(
        EventType.IDEA_SUBMITTED, IdeaSubmitted(idea_id="a", title="t", submitted_by="sam")
    )
    await bus.emit(
        EventType.EVALUATION_COMMENTED,
        EvaluationCommented(idea_id="b", evaluation_id="ev-2", evaluator="eve"),
    )

    assert seen == [
        ("specific", EventType.IDEA_SUBMITTED, "a"),
        ("all", EventType.IDEA_SUBMITTED, "a"),
        ("all", EventType.EVALUATION_COMMENTED, "b"),
    ]


async def test_payload_must_match_event_type():
    bus = EventBus()
    calls = []

    async def listener(event_type, payload):
        calls.append(payload)

    bus.on(EventType.IDEA_STATUS_CHANGED, listener)

    with pytest.raises(TypeError, match="IdeaStatusChanged"):
        await bus.emit(
            EventType.IDEA_STATUS_CHANGED,
            EvaluationCommented(idea_id="a", evaluation_id="ev-1", evaluator="eve"),
        )
    with pytest.raises(TypeError):
        await bus.emit(EventType.IDEA_STATUS_CHANGED, {"idea_id": "a"})

    assert calls == []


def test_status_changed_requires_transition_fields():
    with pytest.raises(ValidationError):
        IdeaStatusChanged(idea_id="a", from_status=IdeaStatus.SUBMITTED, evaluator="eve")
    with pytest.raises(ValidationError):
        IdeaStatusChanged(
            idea_id="a",
            from_status="SUBMITTED",
            to_status="ARCHIVED",
            evaluation_id="ev-1",
            evaluator="eve",
        )


async def test_failing_listener_does_not_stop_others(caplog):
    bus = EventBus()
    calls = []

    async def broken(event_type, payload):
        raise RuntimeError("boom")

    async def healthy(event_type, payload):
        calls.append(payload.to_status)

    bus.on(EventType.IDEA_STATUS_CHANGED, broken)
    bus.on(EventType.IDEA_STATUS_CHANGED, healthy)

    delivered = await bus.emit(EventType.IDEA_STATUS_CHANGED, _status_changed())

    assert delivered == 1
    assert calls == [IdeaStatus.UNDER_REVIEW]
    assert "Listener failed for idea.status_changed on idea idea-1" in caplog.text


async def test_off_removes_listener():
    bus = EventBus()
    calls = []

    async def listener(event_type, payload):
        calls.append(event_type)

    bus.on(EventType.IDEA_STATUS_CHANGED, listener)
    bus.off(EventType.IDEA_STATUS_CHANGED, listener)

    assert await bus.emit(EventType.IDEA_STATUS_CHANGED, _status_changed()) == 0
    assert calls == []
