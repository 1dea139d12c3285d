"""
File-backed Microsoft token cache.
"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_TOKEN_PATH = Path('./.tokens.json')


class TokenCache(BaseModel):
    """Persisted OAuth tokens. ``expires_at`` is epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    access_token: str = Field(..., alias='accessToken')
    refresh_token: str = Field(..., alias='refreshToken')
    expires_at: int = Field(..., alias='expiresAt')


def save_tokens(tokens: TokenCache, path: str | Path = DEFAULT_TOKEN_PATH) -> None:
    """Write tokens as JSON (camelCase keys)."""
    Path(path).write_text(
        json.dumps(tokens.model_dump(by_alias=True), indent=2),
        encoding='utf-8',
    )


def load_tokens(path: str | Path = DEFAULT_TOKEN_PATH) -> TokenCache | None:
    """Read tokens; a missing, unreadable or malformed file yields None."""
    token_path = Path(path)
    if not token_path.exists():
        return None

    try:
        return TokenCache.model_validate(json.loads(token_path.read_text(encoding='utf-8')))
    except (OSError, json.JSONDecodeError, ValidationError):
        return None


def clear_tokens(path: str | Path = DEFAULT_TOKEN_PATH) -> None:
    """Delete the token file if it exists."""
    Path(path).unlink(missing_ok=True)


def is_token_expired(tokens: TokenCache, buffer_ms: int = 60_000) -> bool:
    """True once we are within ``buffer_ms`` of expiry."""
    now_ms = int(time.time() * 1000)
    return now_ms >= tokens.expires_at - buffer_ms


def get_token_expiry_date(tokens: TokenCache) -> datetime:
    return datetime.fromtimestamp(tokens.expires_at / 1000, tz=timezone.utc)
