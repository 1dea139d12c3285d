"""
Access-token provider for Microsoft Graph.

Serves the cached delegated token while it is valid and refreshes it with the
OAuth2 refresh-token grant when it expires. Initial interactive sign-in is
done out of band; it writes the same token file this provider reads.
"""

import time
from pathlib import Path

import httpx

from ..config import config
from ..errors import AuthenticationError
from ..logging import get_logger
from .tokens import (
    DEFAULT_TOKEN_PATH,
    TokenCache,
    is_token_expired,
    load_tokens,
    save_tokens,
)

logger = get_logger(__name__)

SCOPES = [
    'OnlineMeetingTranscript.Read.All',
    'User.Read.All',
    'Tasks.ReadWrite',
    'Chat.ReadWrite',
    'offline_access',
]


class TokenProvider:
    """
    Lazily loads and refreshes the Graph access token.

    One instance is shared by every Graph client in the process. Two runs
    refreshing at the same moment both write the same cache file, which is
    harmless.
    """

    def __init__(
        self,
        client_id: str,
        tenant_id: str,
        cache_path: str | Path = DEFAULT_TOKEN_PATH,
        http_client: httpx.AsyncClient | None = None,
        authority_host: str | None = None,
    ):
        """
        Initialize the provider.

        Args:
            client_id: Azure app registration client ID
            tenant_id: Azure tenant ID
            cache_path: Token cache file
            http_client: Optional preconfigured httpx client (tests inject a mock transport)
            authority_host: Override login host (defaults to AZURE_AUTHORITY_HOST)
        """
        self.client_id = client_id
        self.tenant_id = tenant_id
        self.cache_path = Path(cache_path)
        self.authority_host = (authority_host or config.AZURE_AUTHORITY_HOST).rstrip('/')
        self._http = http_client or httpx.AsyncClient(timeout=config.GRAPH_TIMEOUT_SECONDS)
        self._tokens: TokenCache | None = None

    @property
    def token_endpoint(self) -> str:
        return f"{self.authority_host}/{self.tenant_id}/oauth2/v2.0/token"

    async def get_access_token(self) -> str:
        """
        Return a valid access token, refreshing it if needed.

        Raises:
            AuthenticationError: If no cached token exists or the refresh is rejected
        """
        if self._tokens is None:
            self._tokens = load_tokens(self.cache_path)

        tokens = self._tokens
        if tokens and not is_token_expired(tokens):
            return tokens.access_token

        if tokens and tokens.refresh_token:
            self._tokens = await self._refresh(tokens.refresh_token)
            return self._tokens.access_token

        raise AuthenticationError(
            'No cached Microsoft credentials; sign in to create the token cache',
            context={'cache_path': str(self.cache_path)},
        )

    async def _refresh(self, refresh_token: str) -> TokenCache:
        response = await self._http.post(
            self.token_endpoint,
            data={
                'client_id': self.client_id,
                'grant_type': 'refresh_token',
                'refresh_token': refresh_token,
                'scope': ' '.join(SCOPES),
            },
        )

        if response.status_code != 200:
            logger.warning(
                'token_refresh_failed',
                status_code=response.status_code,
            )
            raise AuthenticationError(
                'Refresh token rejected; sign in again',
                context={'status_code': response.status_code, 'body': response.text[:500]},
            )

        payload = response.json()
        tokens = TokenCache(
            access_token=payload['access_token'],
            # Entra may rotate the refresh token
            refresh_token=payload.get('refresh_token') or refresh_token,
            expires_at=int(time.time() * 1000) + int(payload.get('expires_in', 3600)) * 1000,
        )
        save_tokens(tokens, self.cache_path)
        logger.info('token_refreshed')
        return tokens

    async def close(self) -> None:
        await self._http.aclose()
