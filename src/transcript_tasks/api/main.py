"""FastAPI application for the transcript-to-tasks webhook service."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from transcript_tasks.app_config import load_app_config
from transcript_tasks.auth.oauth import TokenProvider
from transcript_tasks.clients.directory import DirectoryClient
from transcript_tasks.clients.graph_client import GraphClient
from transcript_tasks.clients.meetings import MeetingsClient
from transcript_tasks.clients.openai_client import OpenAIClient
from transcript_tasks.clients.subscriptions import SubscriptionManager
from transcript_tasks.pipeline.pipeline import TranscriptTaskPipeline

from .config import get_settings
from .routes.health import router as health_router
from .routes.webhook import router as webhook_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize persistent clients at startup, clean up at shutdown."""
    settings = get_settings()

    logger.info("lifespan.startup", app_config_path=settings.APP_CONFIG_PATH)

    app_config = load_app_config(settings.APP_CONFIG_PATH)

    # Graph: one token provider and HTTP client shared by every Graph client
    token_provider = TokenProvider(
        client_id=settings.AZURE_CLIENT_ID,
        tenant_id=settings.AZURE_TENANT_ID,
        cache_path=settings.TOKEN_CACHE_PATH,
    )
    graph = GraphClient(token_provider)

    me = await DirectoryClient(graph).get_current_user()
    logger.info("lifespan.authenticated", user=me.display_name)

    openai = OpenAIClient(api_key=settings.OPENAI_API_KEY)

    pipeline = TranscriptTaskPipeline.build(
        openai_client=openai,
        graph_client=graph,
        app_config=app_config,
        sender_id=settings.MY_USER_ID,
    )

    if settings.notification_url:
        subscriptions = SubscriptionManager(graph, client_state=settings.WEBHOOK_SECRET)
        await subscriptions.ensure_subscription(settings.notification_url)
    else:
        logger.warning("lifespan.no_public_url")

    # Store on app.state for request handlers
    app.state.settings = settings
    app.state.meetings = MeetingsClient(graph)
    app.state.pipeline = pipeline

    logger.info("lifespan.ready")
    yield

    # Shutdown
    logger.info("lifespan.shutdown")
    await pipeline.filer.drain()
    await graph.close()
    await token_provider.close()
    await openai.close()


app = FastAPI(
    title="transcript-tasks",
    description="Graph webhook consumer that turns Teams meeting transcripts into Planner tasks",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(webhook_router)
