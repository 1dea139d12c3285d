"""
Main pipeline orchestrator for transcript task extraction and assignment.

Provides end-to-end processing of one transcript:
1. Fetch transcript content and meeting participants
2. Extract candidate tasks with the chat model
3. Match each candidate's owner and route it (auto-create or review)
4. File auto-created tasks in Planner, demoting failures to review
5. Send one batched review message for everything that needs a human
6. Return created / queued counts

Every candidate ends up either created or queued; none are dropped.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..app_config import AppConfig
from ..clients.directory import DirectoryClient
from ..clients.graph_client import GraphClient
from ..clients.meetings import MeetingsClient
from ..clients.openai_client import OpenAIClient
from ..clients.planner import PlannerClient
from ..clients.teams import TeamsClient
from ..errors import PipelineError, TranscriptTasksError, ValidationError
from ..logging import PipelineTimer, get_logger, logging_context
from ..models.meeting import Meeting, MeetingContext
from ..models.task import (
    ExtractedTask,
    ReviewStatus,
    ReviewTask,
    SuggestedAssignee,
    TaskRecord,
)
from .extractor import TaskExtractor
from .filer import TaskFiler
from .matcher import IdentityMatcher, MatchResult
from .notifier import ReviewNotifier
from .router import DecisionRouter, RouteDecision

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    """Stages of one run, in order. There are no retries between stages."""

    FETCHING = 'fetching'
    EXTRACTING = 'extracting'
    ROUTING = 'routing'
    FILING = 'filing'
    NOTIFYING = 'notifying'
    DONE = 'done'


@dataclass
class PipelineResult:
    """Result of processing one transcript."""

    # Identifiers
    meeting_id: str
    transcript_id: str
    meeting_subject: str

    # Task results
    created_tasks: list[TaskRecord] = field(default_factory=list)
    review_tasks: list[ReviewTask] = field(default_factory=list)
    review_message_id: str | None = None

    # Statistics
    total_extracted: int = 0
    total_routed_auto: int = 0
    total_filing_failures: int = 0

    # Progress / timing
    stage: PipelineStage = PipelineStage.FETCHING
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    processing_time_ms: int | None = None
    stage_timings: dict[str, float] = field(default_factory=dict)

    warnings: list[str] = field(default_factory=list)

    @property
    def created(self) -> int:
        return len(self.created_tasks)

    @property
    def queued(self) -> int:
        return len(self.review_tasks)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'meeting_id': self.meeting_id,
            'transcript_id': self.transcript_id,
            'meeting_subject': self.meeting_subject,
            'created': self.created,
            'queued': self.queued,
            'created_task_ids': [t.id for t in self.created_tasks],
            'review_task_ids': [t.id for t in self.review_tasks],
            'review_message_id': self.review_message_id,
            'total_extracted': self.total_extracted,
            'total_routed_auto': self.total_routed_auto,
            'total_filing_failures': self.total_filing_failures,
            'stage': self.stage.value,
            'processing_time_ms': self.processing_time_ms,
            'stage_timings': self.stage_timings,
            'warnings': self.warnings,
        }


def make_review_task(task: ExtractedTask, match_result: MatchResult | None) -> ReviewTask:
    """Queue a task for review, suggesting the matched identity if any."""
    suggestions = []
    if match_result is not None and match_result.user is not None:
        suggestions.append(
            SuggestedAssignee(user=match_result.user, confidence=match_result.confidence)
        )
    return ReviewTask(
        **task.model_dump(),
        id=str(uuid.uuid4()),
        suggested_assignees=suggestions,
        status=ReviewStatus.PENDING,
    )


class TranscriptTaskPipeline:
    """
    End-to-end pipeline for turning a transcript into Planner tasks.

    Orchestrates:
    - TaskExtractor: candidate tasks from transcript text
    - IdentityMatcher: owner name -> directory identity
    - DecisionRouter: auto-create vs. review
    - TaskFiler: Planner task creation + oversight notice
    - ReviewNotifier: one batched review message

    Candidates are processed one at a time in extraction order.

    Usage:
        pipeline = TranscriptTaskPipeline.build(openai_client, graph_client, app_config, ...)
        result = await pipeline.process_transcript(meeting_id, transcript_id, meeting)
    """

    def __init__(
        self,
        meetings: MeetingsClient,
        extractor: TaskExtractor,
        matcher: IdentityMatcher,
        router: DecisionRouter,
        filer: TaskFiler,
        notifier: ReviewNotifier,
        reviewer_id: str,
    ):
        """
        Initialize the pipeline with its collaborators.

        Args:
            meetings: Transcript / participant source
            extractor: Candidate task extractor
            matcher: Owner identity matcher
            router: Auto-create vs. review gate
            filer: Planner task filer
            notifier: Review message sender
            reviewer_id: Directory ID that receives the review message
        """
        self.meetings = meetings
        self.extractor = extractor
        self.matcher = matcher
        self.router = router
        self.filer = filer
        self.notifier = notifier
        self.reviewer_id = reviewer_id

    @classmethod
    def build(
        cls,
        openai_client: OpenAIClient,
        graph_client: GraphClient,
        app_config: AppConfig,
        sender_id: str,
        reviewer_id: str | None = None,
    ) -> TranscriptTaskPipeline:
        """
        Wire the pipeline from shared, already-constructed clients.

        Args:
            openai_client: OpenAI client for extraction
            graph_client: Authenticated Graph client
            app_config: Loaded rules configuration
            sender_id: Directory ID of the signed-in user (chat sender)
            reviewer_id: Review message recipient (defaults to sender_id)

        Returns:
            Configured TranscriptTaskPipeline
        """
        directory = DirectoryClient(graph_client)
        notifier = ReviewNotifier(TeamsClient(graph_client, sender_user_id=sender_id))

        return cls(
            meetings=MeetingsClient(graph_client),
            extractor=TaskExtractor(openai_client),
            matcher=IdentityMatcher(directory),
            router=DecisionRouter(app_config.confidence_threshold),
            filer=TaskFiler(
                directory=directory,
                planner=PlannerClient(graph_client),
                notifier=notifier,
                oversight_person=app_config.oversight_person,
            ),
            notifier=notifier,
            reviewer_id=reviewer_id or sender_id,
        )

    async def process_transcript(
        self,
        meeting_id: str,
        transcript_id: str,
        meeting: Meeting,
    ) -> PipelineResult:
        """
        Process one transcript through the full pipeline.

        Args:
            meeting_id: Online meeting ID
            transcript_id: Transcript ID
            meeting: Meeting details (subject, organizer)

        Returns:
            PipelineResult where created + queued == total_extracted

        Raises:
            ValidationError: If meeting_id or transcript_id is empty
            TranscriptTasksError: If fetching, extraction, matching or the
                review send fails (the whole run is aborted)
            PipelineError: For any other unexpected failure
        """
        if not meeting_id or not transcript_id:
            raise ValidationError(
                'meeting_id and transcript_id are required',
                context={'meeting_id': meeting_id, 'transcript_id': transcript_id},
            )

        timer = PipelineTimer()

        with logging_context(meeting_id=meeting_id, transcript_id=transcript_id):
            logger.info('pipeline_started', meeting_subject=meeting.subject)

            result = PipelineResult(
                meeting_id=meeting_id,
                transcript_id=transcript_id,
                meeting_subject=meeting.subject,
            )

            try:
                # Step 1: Fetch transcript and participants
                with timer.stage(PipelineStage.FETCHING.value):
                    transcript = await self.meetings.get_transcript(meeting_id, transcript_id)
                    participants = await self.meetings.get_participants(meeting_id)

                # Step 2: Extract candidates
                result.stage = PipelineStage.EXTRACTING
                with timer.stage(PipelineStage.EXTRACTING.value):
                    candidates = await self.extractor.extract(transcript.content)

                result.total_extracted = len(candidates)
                logger.info('extraction_complete', total_extracted=len(candidates))

                if not candidates:
                    self._finish(result, timer)
                    logger.info('pipeline_complete_no_tasks', **timer.summary())
                    return result

                # Step 3: Match and route, one candidate at a time
                result.stage = PipelineStage.ROUTING
                context = MeetingContext(meeting_id=meeting_id, meeting_subject=meeting.subject)
                auto: list[tuple[int, ExtractedTask]] = []
                review: list[tuple[int, ReviewTask]] = []

                with timer.stage(PipelineStage.ROUTING.value):
                    for index, raw in enumerate(candidates):
                        match_result = await self.matcher.match(raw.assignee_name, participants)
                        task = ExtractedTask(**raw.model_dump(), meeting_context=context)

                        if self.router.route(task, match_result) is RouteDecision.AUTO:
                            task.assignee_email = match_result.user.email
                            auto.append((index, task))
                        else:
                            review.append((index, make_review_task(task, match_result)))

                result.total_routed_auto = len(auto)
                logger.info('routing_complete', auto=len(auto), review=len(review))

                # Step 4: File auto-created tasks; failures go to review
                result.stage = PipelineStage.FILING
                with timer.stage(PipelineStage.FILING.value):
                    for index, task in auto:
                        try:
                            record = await self.filer.file(task, meeting)
                        except Exception as e:
                            logger.warning(
                                'task_filing_failed',
                                title=task.title,
                                error=str(e),
                                error_type=type(e).__name__,
                            )
                            result.warnings.append(f"Filing failed for '{task.title}': {e}")
                            result.total_filing_failures += 1
                            review.append((index, make_review_task(task, None)))
                        else:
                            result.created_tasks.append(record)

                # Keep the review message in extraction order
                review.sort(key=lambda slot: slot[0])
                result.review_tasks = [review_task for _, review_task in review]

                # Step 5: One batched review message
                result.stage = PipelineStage.NOTIFYING
                if result.review_tasks:
                    with timer.stage(PipelineStage.NOTIFYING.value):
                        result.review_message_id = await self.notifier.notify_review(
                            self.reviewer_id,
                            meeting.subject,
                            result.review_tasks,
                        )

            except TranscriptTasksError as e:
                logger.error(
                    'pipeline_failed',
                    stage=result.stage.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            except Exception as e:
                logger.error(
                    'pipeline_failed',
                    stage=result.stage.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise PipelineError(
                    f"Pipeline failed: {e}",
                    context={'stage': result.stage.value},
                ) from e

            self._finish(result, timer)
            logger.info(
                'pipeline_complete',
                created=result.created,
                queued=result.queued,
                **timer.summary(),
            )
            return result

    @staticmethod
    def _finish(result: PipelineResult, timer: PipelineTimer) -> None:
        result.stage = PipelineStage.DONE
        result.completed_at = datetime.now()
        result.processing_time_ms = int(timer.total_ms)
        result.stage_timings = timer.stages.copy()
