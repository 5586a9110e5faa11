from fastapi import APIRouter

from aibridge.api.routes.webhook import router as webhook_router

api_router = APIRouter()
api_router.include_router(webhook_router)
