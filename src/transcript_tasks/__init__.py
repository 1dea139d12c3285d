"""
Transcript Tasks

Turns Teams meeting transcripts into Planner tasks: OpenAI-powered extraction,
directory identity matching, confidence-gated auto-creation and a batched
Teams review message for everything else.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .pipeline import (
    TranscriptTaskPipeline,
    PipelineResult,
    TaskExtractor,
    IdentityMatcher,
    DecisionRouter,
    TaskFiler,
    ReviewNotifier,
    MatchResult,
    RouteDecision,
)
from .app_config import AppConfig, load_app_config
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    PipelineTimer,
)
from .errors import (
    TranscriptTasksError,
    ConfigError,
    PipelineError,
    ValidationError,
    ExtractionError,
    FilingError,
    OpenAIError,
    GraphError,
    AuthenticationError,
)

__all__ = [
    # Version
    '__version__',
    # Main Pipeline
    'TranscriptTaskPipeline',
    'PipelineResult',
    # Components
    'TaskExtractor',
    'IdentityMatcher',
    'DecisionRouter',
    'TaskFiler',
    'ReviewNotifier',
    'MatchResult',
    'RouteDecision',
    # Config
    'AppConfig',
    'load_app_config',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'PipelineTimer',
    # Errors
    'TranscriptTasksError',
    'ConfigError',
    'PipelineError',
    'ValidationError',
    'ExtractionError',
    'FilingError',
    'OpenAIError',
    'GraphError',
    'AuthenticationError',
]
