"""
Tests for review message formatting and delivery.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from transcript_tasks.errors import GraphServerError, NotificationError
from transcript_tasks.models.identity import Identity
from transcript_tasks.models.meeting import MeetingContext
from transcript_tasks.models.task import ReviewTask, SuggestedAssignee
from transcript_tasks.pipeline.notifier import (
    REPLY_INSTRUCTIONS,
    ReviewNotifier,
    format_review_message,
    format_task_created_message,
)

CONTEXT = MeetingContext(meeting_id='m1', meeting_subject='Q4 Planning')


def _review_task(title: str, suggestion: SuggestedAssignee | None = None, due: str | None = None) -> ReviewTask:
    return ReviewTask(
        id=f"review-{title}",
        title=title,
        assignee_name='someone',
        due_date=due,
        description='',
        confidence=0.6,
        meeting_context=CONTEXT,
        suggested_assignees=[suggestion] if suggestion else [],
    )


class TestFormatReviewMessage:
    def test_header_and_items(self):
        suggestion = SuggestedAssignee(
            user=Identity(id='u1', display_name='John Smith'),
            confidence=0.7,
        )
        html = format_review_message(
            'Q4 Planning',
            [
                _review_task('Look at the budget'),
                _review_task('Send Q4 report', suggestion, due='Friday'),
            ],
            today=date(2026, 10, 18),
        )

        assert 'Meeting Task Review (Q4 Planning - Oct 18)' in html
        assert '1. "Look at the budget"' in html
        assert 'Assignee unclear' in html
        assert 'Due: Not mentioned' in html
        assert '2. "Send Q4 report"' in html
        assert 'Suggested assignee: John Smith (70% match)' in html
        assert 'Due: Friday' in html
        assert html.index('Look at the budget') < html.index('Send Q4 report')
        assert html.endswith(f"<i>{REPLY_INSTRUCTIONS}</i>")

    def test_escapes_html(self):
        html = format_review_message(
            'R&D <sync>',
            [_review_task('Fix <script> tag')],
            today=date(2026, 1, 5),
        )

        assert 'R&amp;D &lt;sync&gt; - Jan 5' in html
        assert '<script>' not in html


class TestTaskCreatedMessage:
    def test_plain_text(self):
        text = format_task_created_message('Send Q4 report', 'John', 'Q4 Planning')

        assert 'Send Q4 report' in text
        assert 'John' in text
        assert 'Q4 Planning' in text


class TestReviewNotifier:
    @pytest.mark.asyncio
    async def test_notify_review_sends_one_message(self):
        teams = MagicMock()
        teams.send_batch_message = AsyncMock(return_value='msg-1')
        notifier = ReviewNotifier(teams)

        message_id = await notifier.notify_review(
            'reviewer', 'Q4 Planning', [_review_task('A'), _review_task('B')]
        )

        assert message_id == 'msg-1'
        teams.send_batch_message.assert_awaited_once()
        recipient, html = teams.send_batch_message.call_args.args
        assert recipient == 'reviewer'
        assert '1. "A"' in html and '2. "B"' in html

    @pytest.mark.asyncio
    async def test_notify_review_requires_tasks(self):
        teams = MagicMock()
        teams.send_batch_message = AsyncMock()
        notifier = ReviewNotifier(teams)

        with pytest.raises(ValueError):
            await notifier.notify_review('reviewer', 'Q4 Planning', [])

        teams.send_batch_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notify_task_created(self):
        teams = MagicMock()
        teams.send_plain_message = AsyncMock()
        notifier = ReviewNotifier(teams)

        await notifier.notify_task_created('boss', 'Send Q4 report', 'John', 'Q4 Planning')

        recipient, text = teams.send_plain_message.call_args.args
        assert recipient == 'boss'
        assert 'Send Q4 report' in text

    @pytest.mark.asyncio
    async def test_notify_review_delivery_failure(self):
        teams = MagicMock()
        teams.send_batch_message = AsyncMock(side_effect=GraphServerError('chat down'))
        notifier = ReviewNotifier(teams)

        with pytest.raises(NotificationError) as exc_info:
            await notifier.notify_review('reviewer', 'Q4 Planning', [_review_task('A')])

        assert exc_info.value.context['task_count'] == 1
        assert isinstance(exc_info.value.__cause__, GraphServerError)
