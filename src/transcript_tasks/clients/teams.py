"""
Teams 1:1 chat messaging.
"""

from .graph_client import GraphClient

_MEMBER_TYPE = '#microsoft.graph.aadUserConversationMember'


class TeamsClient:
    """
    Sends chat messages from the signed-in user to another user.

    Graph returns the existing 1:1 chat when one is already open between the
    two members, so ``get_or_create_chat`` is safe to call per message.
    """

    def __init__(self, graph: GraphClient, sender_user_id: str, graph_users_url: str | None = None):
        """
        Args:
            graph: Authenticated Graph client
            sender_user_id: Directory ID of the signed-in user
            graph_users_url: Base used in ``user@odata.bind`` (defaults to the public v1.0 users URL)
        """
        self.graph = graph
        self.sender_user_id = sender_user_id
        self.graph_users_url = (graph_users_url or 'https://graph.microsoft.com/v1.0/users').rstrip('/')

    def _member(self, user_id: str) -> dict:
        return {
            '@odata.type': _MEMBER_TYPE,
            'roles': ['owner'],
            'user@odata.bind': f"{self.graph_users_url}/{user_id}",
        }

    async def get_or_create_chat(self, user_id: str) -> str:
        """Return the ID of the 1:1 chat with ``user_id``."""
        chat = await self.graph.post(
            '/chats',
            json={
                'chatType': 'oneOnOne',
                'members': [self._member(self.sender_user_id), self._member(user_id)],
            },
        )
        return chat['id']

    async def _send(self, recipient_id: str, content_type: str, content: str) -> str:
        chat_id = await self.get_or_create_chat(recipient_id)
        message = await self.graph.post(
            f"/chats/{chat_id}/messages",
            json={'body': {'contentType': content_type, 'content': content}},
        )
        return message.get('id', '')

    async def send_batch_message(self, recipient_id: str, html_body: str) -> str:
        """Send an HTML message; returns the message ID."""
        return await self._send(recipient_id, 'html', html_body)

    async def send_plain_message(self, recipient_id: str, text: str) -> None:
        await self._send(recipient_id, 'text', text)
