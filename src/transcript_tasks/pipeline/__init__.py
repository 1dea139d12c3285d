"""
Pipeline components for task extraction, identity matching, routing, filing and review.
"""

from .extractor import TaskExtractor, parse_candidates
from .filer import TaskFiler
from .matcher import IdentityMatcher, MatchResult
from .notifier import ReviewNotifier, format_review_message
from .pipeline import PipelineResult, PipelineStage, TranscriptTaskPipeline
from .router import DecisionRouter, RouteDecision, route_task

__all__ = [
    # Main Pipeline
    'TranscriptTaskPipeline',
    'PipelineResult',
    'PipelineStage',
    # Extraction
    'TaskExtractor',
    'parse_candidates',
    # Matching
    'IdentityMatcher',
    'MatchResult',
    # Routing
    'DecisionRouter',
    'RouteDecision',
    'route_task',
    # Filing / review
    'TaskFiler',
    'ReviewNotifier',
    'format_review_message',
]
