"""POST /webhook: Graph change notifications for new meeting transcripts."""

import structlog
from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from transcript_tasks.logging import logging_context
from transcript_tasks.models.webhook import GraphNotification, NotificationBatch

logger = structlog.get_logger(__name__)

router = APIRouter()


def notification_trace_id(notification: GraphNotification, transcript_id: str) -> str:
    """Correlation ID shared by every log line a notification produces."""
    resource_id = notification.resource_data.id if notification.resource_data else ""
    return f"{notification.subscription_id}:{resource_id or transcript_id}"


async def process_notification(state, notification: GraphNotification) -> None:
    """
    Run the pipeline for one transcript notification.

    Failures are logged and not re-raised; Graph redelivery is the retry path.
    """
    log = logger.bind(subscription_id=notification.subscription_id)

    if notification.client_state != state.settings.WEBHOOK_SECRET:
        log.warning("webhook.client_state_mismatch")
        return

    ref = notification.transcript_ref()
    if ref is None:
        log.warning("webhook.unrecognized_resource", resource=notification.resource)
        return
    meeting_id, transcript_id = ref

    with logging_context(
        trace_id=notification_trace_id(notification, transcript_id),
        meeting_id=meeting_id,
        transcript_id=transcript_id,
    ):
        log.info("webhook.processing")

        try:
            meeting = await state.meetings.get_meeting_details(meeting_id)
            result = await state.pipeline.process_transcript(meeting_id, transcript_id, meeting)
        except Exception as e:
            log.error("webhook.processing_failed", error=str(e), error_type=type(e).__name__)
            return

        log.info("webhook.processed", created=result.created, queued=result.queued)


async def process_notifications(state, notifications: list[GraphNotification]) -> None:
    for notification in notifications:
        await process_notification(state, notification)


@router.post("/webhook")
async def receive_notifications(
    request: Request,
    background_tasks: BackgroundTasks,
    validation_token: str | None = Query(default=None, alias="validationToken"),
):
    """Answer the subscription handshake or accept a notification batch."""
    if validation_token is not None:
        logger.info("webhook.validation")
        return PlainTextResponse(validation_token)

    try:
        batch = NotificationBatch.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning("webhook.malformed_body", error=str(e))
        raise HTTPException(status_code=400, detail="Malformed notification body")

    logger.info("webhook.received", count=len(batch.value))
    background_tasks.add_task(process_notifications, request.app.state, batch.value)
    return Response(status_code=202)
