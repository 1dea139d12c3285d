"""
Graph change-notification subscriptions for new meeting transcripts.
"""

from datetime import datetime, timedelta, timezone

from ..logging import get_logger
from ..models.webhook import WebhookSubscription
from .graph_client import GraphClient

logger = get_logger(__name__)

TRANSCRIPT_RESOURCE = '/communications/onlineMeetings/getAllTranscripts'

# Maximum lifetime Graph allows for transcript subscriptions
SUBSCRIPTION_LIFETIME = timedelta(days=3)


def is_subscription_expiring_soon(
    subscription: WebhookSubscription,
    hours_threshold: int = 12,
    now: datetime | None = None,
) -> bool:
    """True if the subscription expires within ``hours_threshold`` hours."""
    now = now or datetime.now(tz=timezone.utc)
    expires = subscription.expiration_date_time
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires <= now + timedelta(hours=hours_threshold)


def _expiration_iso() -> str:
    return (datetime.now(tz=timezone.utc) + SUBSCRIPTION_LIFETIME).isoformat()


class SubscriptionManager:
    """Creates, renews and lists transcript webhook subscriptions."""

    def __init__(self, graph: GraphClient, client_state: str):
        self.graph = graph
        self.client_state = client_state

    async def create_transcript_subscription(self, notification_url: str) -> WebhookSubscription:
        data = await self.graph.post(
            '/subscriptions',
            json={
                'changeType': 'created',
                'notificationUrl': notification_url,
                'resource': TRANSCRIPT_RESOURCE,
                'expirationDateTime': _expiration_iso(),
                'clientState': self.client_state,
            },
        )
        subscription = WebhookSubscription.from_graph(data)
        logger.info(
            'subscription_created',
            subscription_id=subscription.id,
            expires=subscription.expiration_date_time.isoformat(),
        )
        return subscription

    async def renew_subscription(self, subscription_id: str) -> WebhookSubscription:
        data = await self.graph.patch(
            f"/subscriptions/{subscription_id}",
            json={'expirationDateTime': _expiration_iso()},
        )
        subscription = WebhookSubscription.from_graph(data)
        logger.info(
            'subscription_renewed',
            subscription_id=subscription.id,
            expires=subscription.expiration_date_time.isoformat(),
        )
        return subscription

    async def list_subscriptions(self) -> list[WebhookSubscription]:
        result = await self.graph.get('/subscriptions')
        return [WebhookSubscription.from_graph(s) for s in result.get('value') or []]

    async def delete_subscription(self, subscription_id: str) -> None:
        await self.graph.delete(f"/subscriptions/{subscription_id}")
        logger.info('subscription_deleted', subscription_id=subscription_id)

    async def ensure_subscription(self, notification_url: str) -> WebhookSubscription:
        """
        Make sure a live transcript subscription points at ``notification_url``.

        Reuses an existing one (renewing it if it expires within 12 hours),
        otherwise creates a new one. Transcript subscriptions pointing at a
        different URL are deleted.
        """
        current = None
        for subscription in await self.list_subscriptions():
            if 'getAllTranscripts' not in subscription.resource:
                continue
            if current is None and subscription.notification_url == notification_url:
                current = subscription
            else:
                await self.delete_subscription(subscription.id)

        if current is None:
            return await self.create_transcript_subscription(notification_url)

        if is_subscription_expiring_soon(current):
            return await self.renew_subscription(current.id)

        logger.info('subscription_reused', subscription_id=current.id)
        return current
