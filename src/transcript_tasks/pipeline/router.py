"""
Auto-create vs. review routing.

A task is auto-created only when all three hold:
- the owner resolved to an identity,
- the model's task confidence meets the configured threshold,
- the identity match confidence meets the fixed 0.8 bar.

The two confidences are gated independently and never blended.
"""

from enum import Enum

from ..models.task import ExtractedTask
from .matcher import MatchResult

MATCH_CONFIDENCE_THRESHOLD = 0.8
DEFAULT_CONFIDENCE_THRESHOLD = 0.8


class RouteDecision(str, Enum):
    AUTO = 'auto'
    REVIEW = 'review'


def route_task(
    task_confidence: float,
    match_result: MatchResult,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> RouteDecision:
    """Pure routing gate."""
    if (
        match_result.user is not None
        and task_confidence >= confidence_threshold
        and match_result.confidence >= MATCH_CONFIDENCE_THRESHOLD
    ):
        return RouteDecision.AUTO
    return RouteDecision.REVIEW


class DecisionRouter:
    """Routes extracted tasks using the configured task-confidence threshold."""

    def __init__(self, confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD):
        self.confidence_threshold = confidence_threshold

    def route(self, task: ExtractedTask, match_result: MatchResult) -> RouteDecision:
        return route_task(task.confidence, match_result, self.confidence_threshold)
