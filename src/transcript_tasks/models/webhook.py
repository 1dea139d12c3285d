"""
Microsoft Graph change-notification and subscription models.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResourceData(BaseModel):
    """Identifies the resource a notification refers to."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ''
    odata_type: str | None = Field(default=None, alias='@odata.type')


class GraphNotification(BaseModel):
    """A single change notification delivered to the webhook."""

    model_config = ConfigDict(populate_by_name=True)

    subscription_id: str = Field(..., alias='subscriptionId')
    change_type: str = Field(..., alias='changeType')
    resource: str
    resource_data: ResourceData | None = Field(default=None, alias='resourceData')
    client_state: str | None = Field(default=None, alias='clientState')

    def transcript_ref(self) -> tuple[str, str] | None:
        """
        Extract (meeting_id, transcript_id) from the resource path.

        Expected shape:
        ``communications/onlineMeetings('{meetingId}')/transcripts('{transcriptId}')``
        or the slash form ``.../onlineMeetings/{meetingId}/transcripts/{transcriptId}``.
        """
        parts = [p for p in self.resource.replace('(', '/').replace(')', '/').split('/') if p]
        try:
            meeting_idx = parts.index('onlineMeetings') + 1
            transcript_idx = parts.index('transcripts') + 1
        except ValueError:
            return None
        if meeting_idx >= len(parts) or transcript_idx >= len(parts):
            return None
        return parts[meeting_idx].strip("'"), parts[transcript_idx].strip("'")


class NotificationBatch(BaseModel):
    """Request body posted by Graph to the webhook."""

    value: list[GraphNotification]


class WebhookSubscription(BaseModel):
    """A Graph change-notification subscription."""

    id: str
    resource: str
    change_type: str
    notification_url: str
    expiration_date_time: datetime
    client_state: str | None = None

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> 'WebhookSubscription':
        """Build from a Graph ``subscription`` resource."""
        return cls(
            id=data['id'],
            resource=data.get('resource', ''),
            change_type=data.get('changeType', ''),
            notification_url=data.get('notificationUrl', ''),
            expiration_date_time=data['expirationDateTime'],
            client_state=data.get('clientState'),
        )
