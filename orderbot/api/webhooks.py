from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response

from orderbot.application.dto.telegram_update import TelegramUpdateDTO
from orderbot.core.config import settings
from orderbot.infrastructure.telegram.webhook_verify import verify_secret_token
from orderbot.wiring.dependencies import get_handle_incoming_event_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/telegram")
async def telegram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
) -> Response:
    try:
        use_case = get_handle_incoming_event_use_case()
    except Exception as e:
        logger.exception("Failed to initialize use case", extra={"error": str(e)})
        return Response(status_code=500)

    secret = request.headers.get("X-Telegram-Bot-Api-Secret-Token")
    if not verify_secret_token(secret, settings.TELEGRAM_WEBHOOK_SECRET, settings.ENV):
        return Response(status_code=403)

    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
    except ValueError:
        logger.exception("Failed to parse webhook body")
        return Response(status_code=400)

    try:
        update = TelegramUpdateDTO.model_validate(payload)
        event = update.extract_event()
    except Exception as e:
        logger.exception("Error processing webhook update", extra={"error": str(e)})
        return Response(status_code=400)

    if event is None:
        logger.info("Update ignored", extra={"update_id": update.update_id})
        return Response(status_code=200)

    logger.info("Webhook received", extra={"user_id": event.user_id, "event": event.kind})
    background_tasks.add_task(use_case.handle, event)
    return Response(status_code=200)
