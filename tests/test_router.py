"""
Tests for auto-create vs. review routing.
"""

import pytest

from transcript_tasks.models.identity import Identity
from transcript_tasks.models.meeting import MeetingContext
from transcript_tasks.models.task import ExtractedTask
from transcript_tasks.pipeline.matcher import NO_MATCH, MatchResult
from transcript_tasks.pipeline.router import DecisionRouter, RouteDecision, route_task

JOHN = Identity(id='user-john', display_name='John Smith', email='john@contoso.com')


def _match(confidence: float) -> MatchResult:
    return MatchResult(user=JOHN, confidence=confidence, matched_via='prefix')


class TestRouteTask:
    def test_all_conditions_met(self):
        assert route_task(0.95, _match(0.85)) is RouteDecision.AUTO

    def test_thresholds_are_inclusive(self):
        assert route_task(0.8, _match(0.8)) is RouteDecision.AUTO

    def test_low_task_confidence_flips_to_review(self):
        assert route_task(0.79, _match(1.0)) is RouteDecision.REVIEW

    def test_low_match_confidence_flips_to_review(self):
        assert route_task(0.99, _match(0.7)) is RouteDecision.REVIEW

    def test_missing_user_flips_to_review(self):
        assert route_task(0.99, NO_MATCH) is RouteDecision.REVIEW

    @pytest.mark.parametrize('task_conf,match_conf', [(0.9, 0.5), (0.5, 0.9), (0.5, 0.5)])
    def test_confidences_are_not_blended(self, task_conf, match_conf):
        assert route_task(task_conf, _match(match_conf)) is RouteDecision.REVIEW

    def test_configured_threshold(self):
        assert route_task(0.6, _match(0.85), confidence_threshold=0.5) is RouteDecision.AUTO
        assert route_task(0.6, _match(0.85), confidence_threshold=0.7) is RouteDecision.REVIEW

    def test_match_threshold_is_fixed(self):
        # Lowering the task threshold never relaxes the match bar
        assert route_task(0.9, _match(0.7), confidence_threshold=0.0) is RouteDecision.REVIEW


class TestDecisionRouter:
    def test_route_uses_task_confidence(self):
        router = DecisionRouter(confidence_threshold=0.9)
        task = ExtractedTask(
            title='Send Q4 report',
            assignee_name='John',
            description='',
            confidence=0.85,
            meeting_context=MeetingContext(meeting_id='m1', meeting_subject='Q4 Planning'),
        )

        assert router.route(task, _match(1.0)) is RouteDecision.REVIEW
        assert DecisionRouter().route(task, _match(1.0)) is RouteDecision.AUTO
