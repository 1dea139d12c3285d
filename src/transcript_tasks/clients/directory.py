"""
Directory (Entra ID) user lookup.
"""

from ..models.identity import Identity
from .graph_client import GraphClient

_USER_FIELDS = 'id,displayName,mail,userPrincipalName'


def sanitize_odata_literal(query: str) -> str:
    """Trim and escape a value for use inside an OData string literal."""
    return query.strip().replace("'", "''")


class DirectoryClient:
    """Searches directory users."""

    MAX_RESULTS = 10

    def __init__(self, graph: GraphClient):
        self.graph = graph

    async def search(self, query: str) -> list[Identity]:
        """
        Search users whose display name or mail starts with ``query``.

        Args:
            query: Name or email fragment

        Returns:
            Matching identities, best match first. A blank query returns [].
        """
        literal = sanitize_odata_literal(query)
        if not literal:
            return []

        result = await self.graph.get(
            '/users',
            params={
                '$filter': f"startswith(displayName,'{literal}') or startswith(mail,'{literal}')",
                '$select': _USER_FIELDS,
                '$top': str(self.MAX_RESULTS),
            },
        )
        return [Identity.from_graph(u) for u in result.get('value') or []]

    async def get_current_user(self) -> Identity:
        data = await self.graph.get('/me', params={'$select': _USER_FIELDS})
        return Identity.from_graph(data)
