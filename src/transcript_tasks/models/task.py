"""
Task models for the extraction-and-assignment pipeline.

Lifecycle within one run:
- RawCandidateTask: validated element of the model's JSON array
- ExtractedTask: candidate + meeting context (+ resolved email when auto-created)
- ReviewTask: ExtractedTask queued for human confirmation
- TaskRecord: the Planner task created for an auto-created item
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .identity import Identity
from .meeting import MeetingContext


class RawCandidateTask(BaseModel):
    """
    An action item exactly as emitted by the extraction model.

    ``confidence`` is the model's certainty that this is a real commitment,
    not the certainty of the assignee match. It never changes after extraction.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description='Concise task title')
    assignee_name: str = Field(..., alias='assigneeName', description='Owner as named in the transcript')
    assignee_email: str | None = Field(default=None, alias='assigneeEmail')
    due_date: str | None = Field(
        default=None,
        alias='dueDate',
        description='ISO 8601 date or a relative phrase such as "next week"',
    )
    description: str = Field(..., description='Context from the meeting')
    confidence: float = Field(..., ge=0.0, le=1.0, frozen=True)


class ExtractedTask(RawCandidateTask):
    """A candidate task bound to the meeting it came from."""

    meeting_context: MeetingContext


class ReviewStatus(str, Enum):
    """Review lifecycle. The pipeline only ever creates PENDING."""

    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    EDITED = 'edited'


class SuggestedAssignee(BaseModel):
    """A possible owner for a review task, with match confidence."""

    user: Identity
    confidence: float = Field(..., ge=0.0, le=1.0)


class ReviewTask(ExtractedTask):
    """A task waiting for a human to confirm or fix the assignment."""

    id: str = Field(..., frozen=True)
    suggested_assignees: list[SuggestedAssignee] = Field(default_factory=list)
    status: ReviewStatus = ReviewStatus.PENDING

    @property
    def top_suggestion(self) -> SuggestedAssignee | None:
        return self.suggested_assignees[0] if self.suggested_assignees else None


class TaskContainer(BaseModel):
    """A Planner plan that tasks are filed into."""

    id: str
    title: str
    owner: str | None = None


class TaskRecord(BaseModel):
    """A Planner task as returned after creation."""

    id: str
    plan_id: str
    title: str
    assignee_ids: list[str] = Field(default_factory=list)
    due_date_time: str | None = None

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> 'TaskRecord':
        """Build from a Graph ``plannerTask`` resource."""
        return cls(
            id=data['id'],
            plan_id=data.get('planId', ''),
            title=data.get('title', ''),
            assignee_ids=list((data.get('assignments') or {}).keys()),
            due_date_time=data.get('dueDateTime'),
        )
