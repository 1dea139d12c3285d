"""
Meeting and transcript models.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .identity import Participant


class Meeting(BaseModel):
    """An online meeting with its organizer and attendees."""

    id: str
    subject: str = Field(default='Untitled Meeting')
    organizer: Participant = Field(default_factory=Participant)
    participants: list[Participant] = Field(default_factory=list)
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None

    @property
    def everyone(self) -> list[Participant]:
        """Organizer first, then attendees."""
        return [self.organizer, *self.participants]


class Transcript(BaseModel):
    """A meeting transcript with its text content."""

    model_config = ConfigDict(frozen=True)

    id: str
    meeting_id: str
    content: str = Field(..., description='Transcript text (WebVTT or plain)')
    created_date_time: datetime | None = None


class MeetingContext(BaseModel):
    """Reference data attached to every task derived from one transcript."""

    model_config = ConfigDict(frozen=True)

    meeting_id: str
    meeting_subject: str
