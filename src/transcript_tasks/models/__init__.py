"""
Data models for the transcript task pipeline.
"""

from .identity import Identity, Participant
from .meeting import Meeting, MeetingContext, Transcript
from .task import (
    ExtractedTask,
    RawCandidateTask,
    ReviewStatus,
    ReviewTask,
    SuggestedAssignee,
    TaskContainer,
    TaskRecord,
)
from .webhook import GraphNotification, NotificationBatch, ResourceData, WebhookSubscription

__all__ = [
    'Identity',
    'Participant',
    'Meeting',
    'MeetingContext',
    'Transcript',
    'RawCandidateTask',
    'ExtractedTask',
    'ReviewStatus',
    'ReviewTask',
    'SuggestedAssignee',
    'TaskContainer',
    'TaskRecord',
    'GraphNotification',
    'NotificationBatch',
    'ResourceData',
    'WebhookSubscription',
]
