"""
Microsoft token cache and refresh.
"""

from .oauth import SCOPES, TokenProvider
from .tokens import (
    TokenCache,
    clear_tokens,
    get_token_expiry_date,
    is_token_expired,
    load_tokens,
    save_tokens,
)

__all__ = [
    'SCOPES',
    'TokenProvider',
    'TokenCache',
    'clear_tokens',
    'get_token_expiry_date',
    'is_token_expired',
    'load_tokens',
    'save_tokens',
]
