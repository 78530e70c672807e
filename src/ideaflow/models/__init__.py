"""ideaflow data models."""

from ideaflow.models.evaluation import Evaluation, StatusTransitionRequest
from ideaflow.models.idea import Idea, IdeaStatus, parse_status

__all__ = ["Evaluation", "Idea", "IdeaStatus", "StatusTransitionRequest", "parse_status"]
