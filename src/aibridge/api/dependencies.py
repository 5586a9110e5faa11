"""Shared FastAPI dependencies."""

from fastapi import Request

from aibridge.bot.dispatcher import UpdateDispatcher


def get_dispatcher(request: Request) -> UpdateDispatcher:
    """Return the update dispatcher initialized in the application lifespan."""
    dispatcher: UpdateDispatcher | None = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Update dispatcher is not initialized")
    return dispatcher
