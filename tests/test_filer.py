"""
Tests for Planner task filing.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from transcript_tasks.errors import AssigneeNotFoundError, TaskContainerNotFoundError
from transcript_tasks.models.identity import Identity
from transcript_tasks.models.meeting import MeetingContext
from transcript_tasks.models.task import ExtractedTask, TaskContainer, TaskRecord
from transcript_tasks.pipeline.filer import (
    TaskFiler,
    build_assignee_ids,
    build_description,
    to_planner_due_date,
)

JOHN = Identity(id='user-john', display_name='John Smith', email='john@contoso.com')
BOSS = Identity(id='user-boss', display_name='Dana Boss', email='boss@contoso.com')
CONTEXT = MeetingContext(meeting_id='meeting-1', meeting_subject='Q4 Planning')


def _task(**overrides) -> ExtractedTask:
    data = {
        'title': 'Send Q4 report',
        'assignee_name': 'John',
        'assignee_email': 'john@contoso.com',
        'due_date': 'Friday',
        'description': 'Sarah asked for the Q4 report',
        'confidence': 0.95,
        'meeting_context': CONTEXT,
    }
    data.update(overrides)
    return ExtractedTask(**data)


def _filer(search_results: dict[str, list[Identity]], plans_error=None):
    directory = MagicMock()
    directory.search = AsyncMock(side_effect=lambda q: search_results.get(q, []))

    planner = MagicMock()
    if plans_error is not None:
        planner.get_personal_plan = AsyncMock(side_effect=plans_error)
    else:
        planner.get_personal_plan = AsyncMock(
            return_value=TaskContainer(id='plan-john', title="John Smith's Tasks")
        )
    planner.create_task = AsyncMock(
        side_effect=lambda **kw: TaskRecord(
            id='task-1',
            plan_id=kw['plan_id'],
            title=kw['title'],
            assignee_ids=kw['assignee_ids'],
            due_date_time=kw['due_date_time'],
        )
    )

    notifier = MagicMock()
    notifier.notify_task_created = AsyncMock()

    filer = TaskFiler(
        directory=directory,
        planner=planner,
        notifier=notifier,
        oversight_person='boss@contoso.com',
    )
    return filer, directory, planner, notifier


class TestHelpers:
    def test_assignee_ids_order_and_dedup(self):
        assert build_assignee_ids('a', 'b', 'c') == ['a', 'b', 'c']
        assert build_assignee_ids('a', 'a', 'c') == ['a', 'c']
        assert build_assignee_ids('a', 'b', 'b') == ['a', 'b']
        assert build_assignee_ids('a', '', None) == ['a']

    @pytest.mark.parametrize(
        'due,expected',
        [
            ('2026-10-23', '2026-10-23T00:00:00Z'),
            ('2026-10-23T17:00:00', '2026-10-23T17:00:00Z'),
            ('2026-10-23T17:00:00+00:00', '2026-10-23T17:00:00+00:00'),
            ('Friday', None),
            ('next week', None),
            (None, None),
        ],
    )
    def test_to_planner_due_date(self, due, expected):
        assert to_planner_due_date(due) == expected

    def test_description_keeps_relative_due_date(self):
        description = build_description(_task(), 'Q4 Planning', due_in_description=True)

        assert description == 'Sarah asked for the Q4 report\n\nDue: Friday\n\nFrom meeting: Q4 Planning'

    def test_description_without_due(self):
        description = build_description(_task(due_date=None), 'Q4 Planning', due_in_description=True)

        assert description.endswith('From meeting: Q4 Planning')
        assert 'Due:' not in description


class TestTaskFiler:
    @pytest.mark.asyncio
    async def test_file_task(self, sample_meeting):
        filer, directory, planner, notifier = _filer(
            {'john@contoso.com': [JOHN], 'boss@contoso.com': [BOSS]}
        )

        record = await filer.file(_task(), sample_meeting)
        await filer.drain()

        assert record.id == 'task-1'
        directory.search.assert_any_await('john@contoso.com')
        planner.get_personal_plan.assert_awaited_once_with('user-john', 'John Smith')

        kwargs = planner.create_task.call_args.kwargs
        assert kwargs['plan_id'] == 'plan-john'
        assert kwargs['assignee_ids'] == ['user-john', 'user-sarah', 'user-boss']
        assert kwargs['due_date_time'] is None
        assert 'Due: Friday' in kwargs['description']

        notifier.notify_task_created.assert_awaited_once_with(
            'user-boss', 'Send Q4 report', 'John', 'Q4 Planning'
        )

    @pytest.mark.asyncio
    async def test_iso_due_date_sent_to_planner(self, sample_meeting):
        filer, _, planner, _ = _filer({'john@contoso.com': [JOHN]})

        await filer.file(_task(due_date='2026-10-23'), sample_meeting)

        kwargs = planner.create_task.call_args.kwargs
        assert kwargs['due_date_time'] == '2026-10-23T00:00:00Z'
        assert 'Due:' not in kwargs['description']

    @pytest.mark.asyncio
    async def test_falls_back_to_name_lookup(self, sample_meeting):
        filer, directory, _, _ = _filer({'John': [JOHN]})

        await filer.file(_task(assignee_email=None), sample_meeting)

        directory.search.assert_any_await('John')

    @pytest.mark.asyncio
    async def test_assignee_not_found(self, sample_meeting):
        filer, _, planner, _ = _filer({})

        with pytest.raises(AssigneeNotFoundError):
            await filer.file(_task(), sample_meeting)

        planner.create_task.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_plan(self, sample_meeting):
        filer, _, _, _ = _filer(
            {'john@contoso.com': [JOHN]},
            plans_error=TaskContainerNotFoundError('no plans'),
        )

        with pytest.raises(TaskContainerNotFoundError):
            await filer.file(_task(), sample_meeting)

    @pytest.mark.asyncio
    async def test_missing_oversight_skips_notice(self, sample_meeting):
        filer, _, planner, notifier = _filer({'john@contoso.com': [JOHN]})

        await filer.file(_task(), sample_meeting)
        await filer.drain()

        assert planner.create_task.call_args.kwargs['assignee_ids'] == ['user-john', 'user-sarah']
        notifier.notify_task_created.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notice_failure_does_not_fail_filing(self, sample_meeting):
        filer, _, _, notifier = _filer({'john@contoso.com': [JOHN], 'boss@contoso.com': [BOSS]})
        notifier.notify_task_created.side_effect = RuntimeError('chat down')

        record = await filer.file(_task(), sample_meeting)
        await filer.drain()

        assert record.id == 'task-1'
        notifier.notify_task_created.assert_awaited_once()
