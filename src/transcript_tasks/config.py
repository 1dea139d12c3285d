"""
Configuration management for the transcript task pipeline.

Loads settings from environment variables with sensible defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


class Config:
    """Configuration settings loaded from environment."""

    # OpenAI
    OPENAI_CHAT_MODEL: str = os.getenv('OPENAI_CHAT_MODEL', 'gpt-4.1-mini')
    OPENAI_MAX_TOKENS: int = int(os.getenv('OPENAI_MAX_TOKENS', '4096'))

    # Microsoft Graph
    GRAPH_BASE_URL: str = os.getenv('GRAPH_BASE_URL', 'https://graph.microsoft.com/v1.0')
    GRAPH_TIMEOUT_SECONDS: float = float(os.getenv('GRAPH_TIMEOUT_SECONDS', '30'))
    AZURE_AUTHORITY_HOST: str = os.getenv(
        'AZURE_AUTHORITY_HOST', 'https://login.microsoftonline.com'
    )

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')


# Singleton config instance
config = Config()
