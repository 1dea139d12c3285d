"""Tests for POST /webhook."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from transcript_tasks.api.routes.webhook import router
from transcript_tasks.errors import GraphNotFoundError
from transcript_tasks.logging import get_trace_id
from transcript_tasks.models.meeting import Meeting

SECRET = "test-secret"
RESOURCE = "communications/onlineMeetings('meeting-1')/transcripts('t1')"


def _make_app(pipeline_error=None) -> FastAPI:
    """Build a test app with mocked state (lifespan is not run)."""
    app = FastAPI()
    app.include_router(router)

    meetings = MagicMock()
    meetings.get_meeting_details = AsyncMock(
        return_value=Meeting(id="meeting-1", subject="Q4 Planning")
    )

    pipeline = MagicMock()
    if pipeline_error is not None:
        pipeline.process_transcript = AsyncMock(side_effect=pipeline_error)
    else:
        pipeline.process_transcript = AsyncMock(return_value=MagicMock(created=1, queued=1))

    app.state.settings = SimpleNamespace(WEBHOOK_SECRET=SECRET)
    app.state.meetings = meetings
    app.state.pipeline = pipeline
    return app


def _notification(client_state: str = SECRET, resource: str = RESOURCE) -> dict:
    return {
        "subscriptionId": "sub-1",
        "changeType": "created",
        "resource": resource,
        "clientState": client_state,
        "resourceData": {"id": "t1"},
    }


class TestValidationHandshake:
    def test_echoes_validation_token(self):
        client = TestClient(_make_app())

        response = client.post("/webhook?validationToken=abc%20123")

        assert response.status_code == 200
        assert response.text == "abc 123"
        assert response.headers["content-type"].startswith("text/plain")


class TestNotifications:
    def test_accepted_and_processed(self):
        app = _make_app()
        client = TestClient(app)

        response = client.post("/webhook", json={"value": [_notification()]})

        assert response.status_code == 202
        app.state.meetings.get_meeting_details.assert_awaited_once_with("meeting-1")
        meeting_id, transcript_id, meeting = app.state.pipeline.process_transcript.await_args.args
        assert (meeting_id, transcript_id) == ("meeting-1", "t1")
        assert meeting.subject == "Q4 Planning"

    def test_client_state_mismatch_skipped(self):
        app = _make_app()
        client = TestClient(app)

        response = client.post("/webhook", json={"value": [_notification(client_state="forged")]})

        assert response.status_code == 202
        app.state.pipeline.process_transcript.assert_not_awaited()

    def test_unrecognized_resource_skipped(self):
        app = _make_app()
        client = TestClient(app)

        response = client.post(
            "/webhook", json={"value": [_notification(resource="chats/c1/messages/m1")]}
        )

        assert response.status_code == 202
        app.state.pipeline.process_transcript.assert_not_awaited()

    def test_each_notification_processed(self):
        app = _make_app()
        client = TestClient(app)
        second = _notification(resource="users/u1/onlineMeetings/meeting-2/transcripts/t2")

        client.post("/webhook", json={"value": [_notification(), second]})

        assert app.state.pipeline.process_transcript.await_count == 2

    def test_pipeline_failure_is_not_raised(self):
        app = _make_app(pipeline_error=GraphNotFoundError("transcript gone"))
        client = TestClient(app)

        response = client.post("/webhook", json={"value": [_notification()]})

        assert response.status_code == 202

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b'{"value": "nope"}',
            b'{"value": [{"resource": "x"}]}',
            b"[]",
        ],
    )
    def test_malformed_body(self, body):
        app = _make_app()
        client = TestClient(app)

        response = client.post(
            "/webhook", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        app.state.pipeline.process_transcript.assert_not_awaited()


class TestTraceId:
    def test_pipeline_runs_with_notification_trace_id(self):
        app = _make_app()
        seen = {}

        async def capture(meeting_id, transcript_id, meeting):
            seen["trace_id"] = get_trace_id()
            return MagicMock(created=0, queued=0)

        app.state.pipeline.process_transcript = AsyncMock(side_effect=capture)
        client = TestClient(app)

        client.post("/webhook", json={"value": [_notification()]})

        assert seen["trace_id"] == "sub-1:t1"
        assert get_trace_id() is None

    def test_trace_id_falls_back_to_transcript_id(self):
        app = _make_app()
        seen = {}

        async def capture(meeting_id, transcript_id, meeting):
            seen["trace_id"] = get_trace_id()
            return MagicMock(created=0, queued=0)

        app.state.pipeline.process_transcript = AsyncMock(side_effect=capture)
        client = TestClient(app)
        notification = _notification(resource="communications/onlineMeetings('meeting-1')/transcripts('t9')")
        del notification["resourceData"]

        client.post("/webhook", json={"value": [notification]})

        assert seen["trace_id"] == "sub-1:t9"
