"""
Pytest configuration and shared fixtures.

Key fixtures:
- graph_transport / graph_client: GraphClient backed by an httpx.MockTransport
- static_token: token source that never touches the network
- sample_meeting / sample_participants: the "Q4 Planning" meeting
- sample_transcript: short transcript with one clear and one vague task

Tests that talk to Microsoft Graph route requests through ``GraphRouter``,
which records every request and answers from a table of
``(method, path) -> response`` entries.
"""

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from transcript_tasks.clients.graph_client import GraphClient
from transcript_tasks.models.identity import Participant
from transcript_tasks.models.meeting import Meeting

GRAPH_TEST_BASE = 'https://graph.test/v1.0'


class StaticTokenSource:
    """Token source that always returns the same token."""

    def __init__(self, token: str = 'test-access-token'):
        self.token = token
        self.calls = 0

    async def get_access_token(self) -> str:
        self.calls += 1
        return self.token


Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]


class GraphRouter:
    """Answers Graph requests from a route table and records them."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Responder) -> None:
        """Queue responses for ``method path``; the last one repeats."""
        self.routes.setdefault((method, path), []).extend(responses)

    def add_json(self, method: str, path: str, body: Any, status_code: int = 200) -> None:
        self.add(method, path, httpx.Response(status_code, json=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix('/v1.0')
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={'error': {'code': 'NotFound', 'path': path}})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        return responder

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.removeprefix('/v1.0') == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content.decode('utf-8'))


@pytest.fixture
def static_token() -> StaticTokenSource:
    return StaticTokenSource()


@pytest.fixture
def graph_router() -> GraphRouter:
    return GraphRouter()


@pytest.fixture
async def graph_client(graph_router: GraphRouter, static_token: StaticTokenSource):
    """GraphClient whose HTTP traffic is answered by ``graph_router``."""
    http = httpx.AsyncClient(
        base_url=GRAPH_TEST_BASE,
        transport=httpx.MockTransport(graph_router),
    )
    client = GraphClient(static_token, http_client=http)
    yield client
    await client.close()


@pytest.fixture
def sample_participants() -> list[Participant]:
    """Organizer first, then attendees."""
    return [
        Participant(id='user-sarah', display_name='Sarah Lee', email='sarah@contoso.com'),
        Participant(id='user-john', display_name='John Smith', email='john@contoso.com'),
        Participant(id='user-maria', display_name='Maria Garcia', email='maria@contoso.com'),
    ]


@pytest.fixture
def sample_meeting(sample_participants: list[Participant]) -> Meeting:
    return Meeting(
        id='meeting-1',
        subject='Q4 Planning',
        organizer=sample_participants[0],
        participants=sample_participants[1:],
    )


@pytest.fixture
def sample_transcript() -> str:
    """Sample transcript for testing extraction."""
    return """
WEBVTT

00:00:01.000 --> 00:00:05.000
<v Sarah Lee>John, please send the Q4 report by Friday.

00:00:06.000 --> 00:00:09.000
<v John Smith>Will do.

00:00:10.000 --> 00:00:14.000
<v Maria Garcia>Someone should look at the budget.
""".strip()
