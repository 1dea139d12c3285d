"""
Directory identity models.

Identities are owned by the Microsoft Entra directory; the pipeline only
reads them and holds them for the duration of a single run.
"""

from typing import Any

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """A directory user as returned by Microsoft Graph."""

    id: str = Field(..., description='Directory object ID')
    display_name: str = Field(..., description='Display name (e.g., "John Smith")')
    email: str = Field(default='', description='Primary mail, falling back to the UPN')
    user_principal_name: str | None = Field(default=None, description='Sign-in name')

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> 'Identity':
        """Build from a Graph ``user`` resource."""
        upn = data.get('userPrincipalName')
        return cls(
            id=data['id'],
            display_name=data.get('displayName') or '',
            email=data.get('mail') or upn or '',
            user_principal_name=upn,
        )


class Participant(BaseModel):
    """A meeting organizer or attendee."""

    id: str = Field(default='', description='Directory object ID (empty for guests)')
    display_name: str = Field(default='', description='Display name shown in the meeting')
    email: str = Field(default='', description='UPN reported by the meeting')

    def to_identity(self) -> Identity:
        """View this participant as a directory identity."""
        return Identity(
            id=self.id,
            display_name=self.display_name,
            email=self.email,
            user_principal_name=self.email or None,
        )
