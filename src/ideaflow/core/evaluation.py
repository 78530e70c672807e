"""Evaluation Service.

Submits ideas and applies reviewer actions: status transitions checked
against the workflow, and comment-only evaluations. A status change and the
evaluation record that justifies it are written together.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from ideaflow.auth.roles import can_evaluate, can_submit
from ideaflow.core.workflow import (
    CommentPolicy,
    is_comment_required,
    is_valid_transition,
    resolve_policy,
)
from ideaflow.errors import (
    CommentRequiredError,
    ConcurrentModificationError,
    IdeaNotFoundError,
    InvalidStatusTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from ideaflow.events.bus import EventBus
from ideaflow.events.types import EvaluationCommented, EventType, IdeaStatusChanged, IdeaSubmitted
from ideaflow.models.evaluation import Evaluation, StatusTransitionRequest
from ideaflow.models.idea import Idea, IdeaStatus
from ideaflow.storage.base import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_MAX_LENGTH = 5000
DEFAULT_TITLE_MAX_LENGTH = 255
DEFAULT_CATEGORY_MAX_LENGTH = 50


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class EvaluationService:
    """Service for submitting ideas and recording their evaluations."""

    def __init__(
        self,
        store: StorageBackend,
        event_bus: EventBus,
        *,
        comment_policy: CommentPolicy | str = CommentPolicy.REJECTION,
        comment_max_length: int = DEFAULT_COMMENT_MAX_LENGTH,
        title_max_length: int = DEFAULT_TITLE_MAX_LENGTH,
        category_max_length: int = DEFAULT_CATEGORY_MAX_LENGTH,
    ) -> None:
        """Initialize the EvaluationService.

        Args:
            store: Storage backend for ideas and evaluation records
            event_bus: Event bus for emitting lifecycle events
            comment_policy: Which target statuses need a comment (policy or its name)
            comment_max_length: Maximum comment length in characters
            title_max_length: Maximum idea title length
            category_max_length: Maximum idea category length
        """
        self._store = store
        self._event_bus = event_bus
        self._comment_policy = resolve_policy(comment_policy)
        self._comment_max_length = comment_max_length
        self._title_max_length = title_max_length
        self._category_max_length = category_max_length
        # Per-idea locks, dropped once no caller holds or waits on them
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def comment_policy(self) -> CommentPolicy:
        return self._comment_policy

    async def submit(
        self,
        *,
        title: str,
        description: str,
        category: str,
        submitted_by: str,
        role: str | None,
    ) -> Idea:
        """Submit a new idea with status SUBMITTED.

        Args:
            title: Idea title (required, trimmed)
            description: Idea description (required, trimmed)
            category: Idea category (required, trimmed)
            submitted_by: Identity of the submitter
            role: Submitter's role string

        Returns:
            Created Idea instance

        Raises:
            PermissionDeniedError: If the role cannot submit ideas
            ValidationError: If a field is blank or too long
        """
        if not can_submit(role):
            logger.warning("Submission denied for %s (role %r)", submitted_by, role)
            raise PermissionDeniedError(f"Role {role!r} cannot submit ideas")

        title = self._require_text("title", title, self._title_max_length)
        description = self._require_text("description", description, None)
        category = self._require_text("category", category, self._category_max_length)

        idea = Idea(
            title=title,
            description=description,
            category=category,
            submitted_by=submitted_by,
        )
        await self._store.insert_idea(idea.to_storage())

        logger.info("Submitted idea: %s - %s", idea.id, idea.title)

        await self._event_bus.emit(
            EventType.IDEA_SUBMITTED,
            IdeaSubmitted(idea_id=idea.id, title=idea.title, submitted_by=submitted_by),
        )

        return idea

    async def get(self, idea_id: str) -> Idea | None:
        data = await self._store.get_idea(idea_id)
        if data is None:
            return None
        return Idea(**data)

    async def list_ideas(self, *, status: IdeaStatus | None = None) -> list[Idea]:
        """List ideas, newest first, optionally filtered by status."""
        data_list = await self._store.list_ideas(status=status.value if status else None)
        return [Idea(**data) for data in data_list]

    async def update_status(
        self,
        idea_id: str,
        request: StatusTransitionRequest,
        *,
        evaluator: str,
        role: str | None,
    ) -> Idea:
        """Move an idea to a new status and record the evaluation.

        Args:
            idea_id: Idea to transition
            request: Target status and justifying comment
            evaluator: Identity of the reviewer
            role: Reviewer's role string

        Returns:
            Updated Idea instance

        Raises:
            PermissionDeniedError: If the role cannot evaluate
            IdeaNotFoundError: If the idea does not exist
            InvalidStatusTransitionError: If the target is not reachable
            CommentRequiredError: If the policy demands a comment and none was given
            ValidationError: If the comment is too long
            ConcurrentModificationError: If the idea changed while being written
        """
        self._require_evaluator(evaluator, role)

        await self._require_idea(idea_id)

        async with self._idea_lock(idea_id):
            current = await self.get(idea_id)
            if current is None:
                raise IdeaNotFoundError(idea_id)

            target = request.target_status
            self._validate_transition(current.status, target, request.comment)

            comment = (request.comment or "").strip()
            evaluation = Evaluation(
                idea_id=idea_id,
                evaluator=evaluator,
                evaluator_role=role,
                comment=comment,
                status_snapshot=target,
            )
            updated = await self._store.apply_transition(
                idea_id,
                expected_version=current.version,
                updates={"status": target.value, "updated_at": datetime.now(UTC).isoformat()},
                evaluation=evaluation.to_storage(),
            )
            if updated is None:
                logger.warning("Idea %s changed during transition to %s", idea_id, target)
                raise ConcurrentModificationError(idea_id)

        logger.info("Idea %s moved %s -> %s by %s", idea_id, current.status, target, evaluator)

        await self._event_bus.emit(
            EventType.IDEA_STATUS_CHANGED,
            IdeaStatusChanged(
                idea_id=idea_id,
                from_status=current.status,
                to_status=target,
                evaluation_id=evaluation.id,
                evaluator=evaluator,
            ),
        )

        return Idea(**updated)

    async def add_comment(
        self,
        idea_id: str,
        comment: str,
        *,
        evaluator: str,
        role: str | None,
    ) -> Evaluation:
        """Append a comment-only evaluation; the idea's status is unchanged.

        Raises:
            PermissionDeniedError: If the role cannot evaluate
            IdeaNotFoundError: If the idea does not exist
            ValidationError: If the comment is blank or too long
        """
        self._require_evaluator(evaluator, role)
        comment = self._require_text("comment", comment, self._comment_max_length)

        await self._require_idea(idea_id)

        async with self._idea_lock(idea_id):
            evaluation = Evaluation(
                idea_id=idea_id,
                evaluator=evaluator,
                evaluator_role=role,
                comment=comment,
            )
            await self._store.insert_evaluation(evaluation.to_storage())

        logger.info("Comment %s added to idea %s by %s", evaluation.id, idea_id, evaluator)

        await self._event_bus.emit(
            EventType.EVALUATION_COMMENTED,
            EvaluationCommented(idea_id=idea_id, evaluation_id=evaluation.id, evaluator=evaluator),
        )

        return evaluation

    async def evaluation_history(self, idea_id: str) -> list[Evaluation]:
        """Return an idea's evaluations, oldest first.

        Raises:
            IdeaNotFoundError: If the idea does not exist
        """
        await self._require_idea(idea_id)
        data_list = await self._store.list_evaluations(idea_id)
        return [Evaluation(**data) for data in data_list]

    @asynccontextmanager
    async def _idea_lock(self, idea_id: str) -> AsyncIterator[None]:
        """Serialize work on one idea.

        The lock is created on first use and removed when its last holder or
        waiter leaves, so the map only holds ideas with work in flight.
        """
        lock = self._locks.get(idea_id)
        if lock is None:
            lock = self._locks[idea_id] = asyncio.Lock()
        self._lock_users[idea_id] = self._lock_users.get(idea_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[idea_id] -= 1
            if not self._lock_users[idea_id]:
                del self._lock_users[idea_id]
                del self._locks[idea_id]

    async def _require_idea(self, idea_id: str) -> None:
        if await self._store.get_idea(idea_id) is None:
            raise IdeaNotFoundError(idea_id)

    def _require_evaluator(self, evaluator: str, role: str | None) -> None:
        if not can_evaluate(role):
            logger.warning("Evaluation denied for %s (role %r)", evaluator, role)
            raise PermissionDeniedError(f"Role {role!r} cannot evaluate ideas")

    def _validate_transition(
        self, current: IdeaStatus, target: IdeaStatus, comment: str | None
    ) -> None:
        """Check a transition against the workflow and the comment policy.

        Raises:
            InvalidStatusTransitionError: If ``target`` is not reachable from ``current``
            CommentRequiredError: If a comment is required and blank
            ValidationError: If the comment exceeds the length limit
        """
        if not is_valid_transition(current, target):
            logger.warning("Rejected transition %s -> %s", current, target)
            raise InvalidStatusTransitionError(current, target)

        if is_comment_required(target, self._comment_policy) and _is_blank(comment):
            logger.warning("Rejected transition %s -> %s: comment required", current, target)
            raise CommentRequiredError(current, target)

        if comment is not None and len(comment.strip()) > self._comment_max_length:
            raise ValidationError(
                f"comment cannot exceed {self._comment_max_length} characters"
            )

    @staticmethod
    def _require_text(name: str, value: str | None, max_length: int | None) -> str:
        if _is_blank(value):
            raise ValidationError(f"{name} cannot be empty")
        value = value.strip()
        if max_length is not None and len(value) > max_length:
            raise ValidationError(f"{name} cannot exceed {max_length} characters")
        return value
