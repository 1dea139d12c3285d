"""
Planner task filing for auto-created tasks.

Filing re-resolves the owner in the directory (by email, else by name) so the
task is assigned to a canonical directory record, then files it into the
owner's personal plan with the meeting organizer and the oversight identity
as co-assignees. The oversight identity is told about the new task in the
background; that notice never affects the filing result.
"""

import asyncio
from datetime import date, datetime

from ..clients.directory import DirectoryClient
from ..clients.planner import PlannerClient
from ..errors import AssigneeNotFoundError
from ..logging import get_logger
from ..models.identity import Identity
from ..models.meeting import Meeting
from ..models.task import ExtractedTask, TaskRecord
from .notifier import ReviewNotifier

logger = get_logger(__name__)


def build_assignee_ids(owner_id: str, organizer_id: str | None, oversight_id: str | None) -> list[str]:
    """Owner first, then organizer and oversight when present and distinct."""
    assignee_ids = [owner_id]
    for extra in (organizer_id, oversight_id):
        if extra and extra not in assignee_ids:
            assignee_ids.append(extra)
    return assignee_ids


def to_planner_due_date(due_date: str | None) -> str | None:
    """
    Convert an extracted due date to Planner's dueDateTime.

    Only ISO 8601 dates/datetimes convert; relative phrases ("next Friday")
    return None and are kept in the description instead.
    """
    if not due_date:
        return None
    text = due_date.strip()
    try:
        return f"{date.fromisoformat(text).isoformat()}T00:00:00Z"
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return f"{parsed.isoformat()}Z"
    return parsed.isoformat()


def build_description(task: ExtractedTask, meeting_subject: str, due_in_description: bool) -> str:
    description = task.description
    if due_in_description and task.due_date:
        description = f"{description}\n\nDue: {task.due_date}"
    return f"{description}\n\nFrom meeting: {meeting_subject}"


class TaskFiler:
    """Creates Planner tasks and notifies the oversight identity."""

    def __init__(
        self,
        directory: DirectoryClient,
        planner: PlannerClient,
        notifier: ReviewNotifier,
        oversight_person: str,
    ):
        """
        Args:
            directory: Directory client for owner / oversight lookup
            planner: Planner client for plan lookup and task creation
            notifier: Notifier used for the task-created notice
            oversight_person: Directory-searchable name or email of the oversight identity
        """
        self.directory = directory
        self.planner = planner
        self.notifier = notifier
        self.oversight_person = oversight_person
        self._pending: set[asyncio.Task] = set()

    async def resolve_oversight(self) -> Identity | None:
        results = await self.directory.search(self.oversight_person)
        return results[0] if results else None

    async def file(self, task: ExtractedTask, meeting: Meeting) -> TaskRecord:
        """
        File one task in the owner's personal plan.

        Args:
            task: Task routed for auto-creation
            meeting: Source meeting (subject and organizer)

        Returns:
            The created TaskRecord

        Raises:
            AssigneeNotFoundError: If the owner is not in the directory
            TaskContainerNotFoundError: If the owner has no Planner plan
            GraphError: If any Graph call fails
        """
        lookup = task.assignee_email or task.assignee_name
        results = await self.directory.search(lookup)
        if not results:
            raise AssigneeNotFoundError(
                f"Could not find user: {task.assignee_name}",
                context={'lookup': lookup},
            )
        assignee = results[0]

        plan = await self.planner.get_personal_plan(assignee.id, assignee.display_name)
        oversight = await self.resolve_oversight()

        due_date_time = to_planner_due_date(task.due_date)
        record = await self.planner.create_task(
            plan_id=plan.id,
            title=task.title,
            assignee_ids=build_assignee_ids(
                assignee.id,
                meeting.organizer.id,
                oversight.id if oversight else None,
            ),
            due_date_time=due_date_time,
            description=build_description(
                task,
                meeting.subject,
                due_in_description=due_date_time is None,
            ),
        )
        logger.info(
            'task_filed',
            task_id=record.id,
            plan_id=plan.id,
            assignee_id=assignee.id,
        )

        if oversight is not None:
            self._notify_in_background(oversight.id, task.title, task.assignee_name, meeting.subject)

        return record

    def _notify_in_background(
        self,
        recipient_id: str,
        task_title: str,
        assignee_name: str,
        meeting_subject: str,
    ) -> None:
        background = asyncio.create_task(
            self._notify_oversight(recipient_id, task_title, assignee_name, meeting_subject)
        )
        self._pending.add(background)
        background.add_done_callback(self._pending.discard)

    async def _notify_oversight(
        self,
        recipient_id: str,
        task_title: str,
        assignee_name: str,
        meeting_subject: str,
    ) -> None:
        try:
            await self.notifier.notify_task_created(
                recipient_id, task_title, assignee_name, meeting_subject
            )
        except Exception as e:
            logger.warning(
                'oversight_notification_failed',
                error=str(e),
                error_type=type(e).__name__,
            )

    async def drain(self) -> None:
        """Wait for in-flight oversight notices (used at shutdown and in tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
