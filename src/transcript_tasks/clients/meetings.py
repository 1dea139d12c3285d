"""
Online meeting and transcript access.
"""

from typing import Any

from ..models.identity import Participant
from ..models.meeting import Meeting, Transcript
from .graph_client import GraphClient


def _participant_from_graph(data: dict[str, Any] | None) -> Participant:
    data = data or {}
    user = (data.get('identity') or {}).get('user') or {}
    return Participant(
        id=user.get('id') or '',
        display_name=user.get('displayName') or '',
        email=data.get('upn') or '',
    )


class MeetingsClient:
    """Reads meetings and their transcripts for the signed-in user."""

    def __init__(self, graph: GraphClient):
        self.graph = graph

    async def get_transcript(self, meeting_id: str, transcript_id: str) -> Transcript:
        """
        Fetch transcript metadata and its text content.

        Args:
            meeting_id: Online meeting ID
            transcript_id: Transcript ID

        Returns:
            Transcript with decoded UTF-8 content
        """
        path = f"/me/onlineMeetings/{meeting_id}/transcripts/{transcript_id}"
        metadata = await self.graph.get(path)
        content = await self.graph.get_bytes(
            f"{path}/content",
            params={'$format': 'text/vtt'},
        )

        return Transcript(
            id=metadata.get('id', transcript_id),
            meeting_id=metadata.get('meetingId', meeting_id),
            content=content.decode('utf-8', errors='replace'),
            created_date_time=metadata.get('createdDateTime'),
        )

    async def get_meeting_details(self, meeting_id: str) -> Meeting:
        """Fetch subject, organizer and attendees of a meeting."""
        data = await self.graph.get(
            f"/me/onlineMeetings/{meeting_id}",
            params={'$select': 'id,subject,startDateTime,endDateTime,participants'},
        )
        participants = data.get('participants') or {}

        return Meeting(
            id=data.get('id', meeting_id),
            subject=data.get('subject') or 'Untitled Meeting',
            organizer=_participant_from_graph(participants.get('organizer')),
            participants=[
                _participant_from_graph(a) for a in participants.get('attendees') or []
            ],
            start_date_time=data.get('startDateTime'),
            end_date_time=data.get('endDateTime'),
        )

    async def get_participants(self, meeting_id: str) -> list[Participant]:
        """Organizer followed by attendees, in meeting order."""
        meeting = await self.get_meeting_details(meeting_id)
        return meeting.everyone
