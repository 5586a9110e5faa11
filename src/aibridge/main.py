import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from aibridge.api.middleware import RequestCorrelationMiddleware
from aibridge.api.responses import http_error_handler
from aibridge.api.router import api_router
from aibridge.bot.dispatcher import UpdateDispatcher
from aibridge.clients.inference import InferenceClient
from aibridge.clients.telegram import TelegramClient
from aibridge.core.config import get_settings
from aibridge.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(
    *,
    telegram_client: TelegramClient | None = None,
    inference_client: InferenceClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Wire the process-wide, read-only collaborators."""
        app.state.settings = settings
        app.state.telegram_client = telegram_client or TelegramClient(settings)
        app.state.inference_client = inference_client or InferenceClient(settings)
        app.state.dispatcher = UpdateDispatcher(
            telegram=app.state.telegram_client,
            inference=app.state.inference_client,
            bot_username=settings.telegram_bot_username,
        )
        if settings.telegram_bot_token is None:
            logger.warning("TELEGRAM_BOT_TOKEN is not configured; replies will be dropped")
        yield
        app.state.dispatcher = None

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        # Every GET path answers the liveness check, so no docs routes.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(RequestCorrelationMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.include_router(api_router)
    return app


app = create_app()
