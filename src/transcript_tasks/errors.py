"""
Custom exceptions and error handling for the transcript task pipeline.

Provides:
- Typed exception hierarchy for different failure modes
- Error context preservation for debugging
- Helpers that map OpenAI and Microsoft Graph failures into the hierarchy
"""

from typing import Any


class TranscriptTasksError(Exception):
    """Base exception for all transcript task errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(TranscriptTasksError):
    """Configuration file missing, unreadable or invalid."""

    pass


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(TranscriptTasksError):
    """Base class for client-related errors."""

    pass


class OpenAIError(ClientError):
    """Error from OpenAI API calls."""

    pass


class OpenAIRateLimitError(OpenAIError):
    """Rate limit exceeded on OpenAI API."""

    pass


class OpenAIModelError(OpenAIError):
    """Model refused request or returned invalid response."""

    pass


class AuthenticationError(ClientError):
    """No usable Microsoft access token could be obtained."""

    pass


class GraphError(ClientError):
    """Error from Microsoft Graph API calls."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code


class GraphAuthError(GraphError):
    """Graph rejected the access token (401/403)."""

    pass


class GraphNotFoundError(GraphError):
    """Requested Graph resource does not exist (404)."""

    pass


class GraphRateLimitError(GraphError):
    """Graph throttled the request (429)."""

    pass


class GraphServerError(GraphError):
    """Graph returned a 5xx response."""

    pass


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(TranscriptTasksError):
    """Base class for pipeline-related errors."""

    pass


class ValidationError(PipelineError):
    """Input validation failed."""

    pass


class ExtractionError(PipelineError):
    """Error while invoking the extraction model."""

    pass


class FilingError(PipelineError):
    """Error while filing a task in Planner."""

    pass


class AssigneeNotFoundError(FilingError):
    """The task owner could not be located in the directory at filing time."""

    pass


class TaskContainerNotFoundError(FilingError):
    """The assignee has no Planner plan to file the task into."""

    pass


class NotificationError(PipelineError):
    """Error while sending a Teams chat message."""

    pass


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_openai_error(exc: Exception, context: dict[str, Any] | None = None) -> OpenAIError:
    """
    Wrap an OpenAI exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        Typed OpenAIError subclass
    """
    error_str = str(exc).lower()
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    if 'rate limit' in error_str or 'rate_limit' in error_str:
        return OpenAIRateLimitError(
            f"OpenAI rate limit exceeded: {exc}",
            context=ctx,
        )
    elif 'content policy' in error_str or 'refused' in error_str:
        return OpenAIModelError(
            f"OpenAI model refused request: {exc}",
            context=ctx,
        )
    else:
        return OpenAIError(
            f"OpenAI API error: {exc}",
            context=ctx,
        )


def wrap_graph_error(
    status_code: int,
    body: str,
    context: dict[str, Any] | None = None,
) -> GraphError:
    """
    Map a failed Graph HTTP response to a typed GraphError.

    Args:
        status_code: HTTP status returned by Graph
        body: Response body (truncated into the context)
        context: Additional context for debugging (method, path, ...)

    Returns:
        Typed GraphError subclass
    """
    ctx = context or {}
    ctx['status_code'] = status_code
    ctx['body'] = body[:500]

    if status_code in (401, 403):
        return GraphAuthError(
            f"Graph authorization failed ({status_code})",
            context=ctx,
            status_code=status_code,
        )
    elif status_code == 404:
        return GraphNotFoundError(
            "Graph resource not found",
            context=ctx,
            status_code=status_code,
        )
    elif status_code == 429:
        return GraphRateLimitError(
            "Graph request throttled",
            context=ctx,
            status_code=status_code,
        )
    elif status_code >= 500:
        return GraphServerError(
            f"Graph server error ({status_code})",
            context=ctx,
            status_code=status_code,
        )
    else:
        return GraphError(
            f"Graph request failed ({status_code})",
            context=ctx,
            status_code=status_code,
        )
