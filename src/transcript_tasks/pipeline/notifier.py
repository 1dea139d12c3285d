"""
Review queue and oversight notifications over Teams chat.

All review tasks from one transcript go out as a single HTML message. The
message tells the reviewer how to reply, but replies are not processed here.
"""

from datetime import date
from html import escape
from typing import Sequence

from ..clients.teams import TeamsClient
from ..errors import GraphError, NotificationError
from ..logging import get_logger
from ..models.task import ReviewTask

logger = get_logger(__name__)

REPLY_INSTRUCTIONS = (
    'Reply with task numbers to approve (e.g., "approve 1, 3") or "skip all"'
)


def format_review_message(
    meeting_subject: str,
    tasks: Sequence[ReviewTask],
    today: date | None = None,
) -> str:
    """
    Render the batched review message as Teams chat HTML.

    Args:
        meeting_subject: Subject of the source meeting
        tasks: Review tasks in extraction order
        today: Date shown in the header (defaults to today)

    Returns:
        HTML body
    """
    today = today or date.today()
    header_date = f"{today:%b} {today.day}"

    parts = [
        f"<b>📋 Meeting Task Review ({escape(meeting_subject)} - {header_date})</b><br><br>",
        '<b>Uncertain tasks found:</b><br><br>',
    ]

    for index, task in enumerate(tasks, start=1):
        parts.append(f"<b>{index}. \"{escape(task.title)}\"</b><br>")

        top = task.top_suggestion
        if top is not None:
            parts.append(
                f"-> Suggested assignee: {escape(top.user.display_name)} "
                f"({round(top.confidence * 100)}% match)<br>"
            )
        else:
            parts.append('-> Assignee unclear<br>')

        if task.due_date:
            parts.append(f"-> Due: {escape(task.due_date)}<br>")
        else:
            parts.append('-> Due: Not mentioned<br>')

        parts.append('<br>')

    parts.append(f"<i>{escape(REPLY_INSTRUCTIONS, quote=False)}</i>")
    return ''.join(parts)


def format_task_created_message(task_title: str, assignee_name: str, meeting_subject: str) -> str:
    return (
        f"✅ Task created from \"{meeting_subject}\": "
        f"\"{task_title}\" assigned to {assignee_name}"
    )


class ReviewNotifier:
    """Sends review batches and task-created notices."""

    def __init__(self, teams: TeamsClient):
        self.teams = teams

    async def notify_review(
        self,
        recipient_id: str,
        meeting_subject: str,
        tasks: Sequence[ReviewTask],
    ) -> str:
        """
        Send one message listing every review task.

        Args:
            recipient_id: Directory ID of the reviewer
            meeting_subject: Subject of the source meeting
            tasks: Non-empty review tasks in extraction order

        Returns:
            Teams message ID

        Raises:
            ValueError: If ``tasks`` is empty
            NotificationError: If the message could not be delivered
        """
        if not tasks:
            raise ValueError('notify_review requires at least one task')

        try:
            message_id = await self.teams.send_batch_message(
                recipient_id,
                format_review_message(meeting_subject, tasks),
            )
        except GraphError as e:
            raise NotificationError(
                f"Review message not delivered: {e.message}",
                context={'recipient_id': recipient_id, 'task_count': len(tasks)},
            ) from e

        logger.info('review_message_sent', task_count=len(tasks), message_id=message_id)
        return message_id

    async def notify_task_created(
        self,
        recipient_id: str,
        task_title: str,
        assignee_name: str,
        meeting_subject: str,
    ) -> None:
        """Tell the oversight identity that a task was auto-created."""
        await self.teams.send_plain_message(
            recipient_id,
            format_task_created_message(task_title, assignee_name, meeting_subject),
        )
