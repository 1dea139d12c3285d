"""Configuration for the transcript webhook service."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Azure app registration
    AZURE_CLIENT_ID: str
    AZURE_TENANT_ID: str

    # OpenAI
    OPENAI_API_KEY: str

    # Signed-in user: chat sender and review recipient
    MY_USER_ID: str

    # Webhook
    WEBHOOK_SECRET: str = "transcript-webhook-secret"
    PUBLIC_BASE_URL: str | None = None

    # Local files
    APP_CONFIG_PATH: str = "./config.json"
    TOKEN_CACHE_PATH: str = "./.tokens.json"

    @property
    def notification_url(self) -> str | None:
        """Webhook URL registered with Graph, if the service is publicly reachable."""
        if not self.PUBLIC_BASE_URL:
            return None
        return f"{self.PUBLIC_BASE_URL.rstrip('/')}/webhook"


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
