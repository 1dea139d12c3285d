"""
External service clients for the transcript task pipeline.
"""

from .directory import DirectoryClient
from .graph_client import GraphClient
from .meetings import MeetingsClient
from .openai_client import OpenAIClient
from .planner import PlannerClient
from .subscriptions import SubscriptionManager
from .teams import TeamsClient

__all__ = [
    'DirectoryClient',
    'GraphClient',
    'MeetingsClient',
    'OpenAIClient',
    'PlannerClient',
    'SubscriptionManager',
    'TeamsClient',
]
