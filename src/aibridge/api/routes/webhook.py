"""Telegram webhook ingress and liveness routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from aibridge.api.dependencies import get_dispatcher
from aibridge.api.responses import (
    ACK_TEXT,
    LIVENESS_TEXT,
    UNSUPPORTED_UPDATE_TEXT,
    build_text_response,
    processing_error_response,
)
from aibridge.api.schemas.telegram import TelegramUpdate
from aibridge.bot.dispatcher import DispatchOutcome, UpdateDispatcher
from aibridge.core.observability import log_event

router = APIRouter(tags=["telegram"])
Dispatcher = Annotated[UpdateDispatcher, Depends(get_dispatcher)]
logger = logging.getLogger(__name__)
WEBHOOK_PATH = "/{full_path:path}"


@router.get(WEBHOOK_PATH, response_class=PlainTextResponse)
def liveness(full_path: str) -> PlainTextResponse:
    """Liveness check; any GET path answers the same way."""
    return build_text_response(status_code=status.HTTP_200_OK, text=LIVENESS_TEXT)


@router.post(WEBHOOK_PATH, response_class=PlainTextResponse)
async def telegram_webhook(
    full_path: str,
    request: Request,
    dispatcher: Dispatcher,
) -> PlainTextResponse:
    """Decode one Telegram update, dispatch it, and acknowledge it."""
    try:
        raw_update = await request.json()
    except ValueError:
        log_event(logger, level=logging.WARNING, event="telegram.webhook.malformed_json")
        return processing_error_response()

    # A JSON value that is not an object carries no message or callback query.
    if not isinstance(raw_update, dict):
        raw_update = {}

    try:
        update = TelegramUpdate.model_validate(raw_update)
    except ValidationError as exc:
        log_event(
            logger,
            level=logging.WARNING,
            event="telegram.webhook.invalid_update",
            errors=exc.error_count(),
        )
        return processing_error_response()

    try:
        outcome = await dispatcher.handle(update)
    except Exception:
        logger.exception("Unhandled error while dispatching update %s", update.update_id)
        return processing_error_response()

    text = UNSUPPORTED_UPDATE_TEXT if outcome is DispatchOutcome.IGNORED else ACK_TEXT
    return build_text_response(status_code=status.HTTP_200_OK, text=text)

