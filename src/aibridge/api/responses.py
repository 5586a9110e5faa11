from fastapi import Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

LIVENESS_TEXT = "Telegram Bot is running!"
ACK_TEXT = "OK"
UNSUPPORTED_UPDATE_TEXT = "Unsupported update type"
PROCESSING_ERROR_TEXT = "Error processing request"
METHOD_NOT_ALLOWED_TEXT = "Please send a POST request"
ALLOWED_METHODS = "GET, POST"


def build_text_response(*, status_code: int, text: str) -> PlainTextResponse:
    """Build a plain-text response, the only body format Telegram needs back."""
    return PlainTextResponse(content=text, status_code=status_code)


def processing_error_response() -> PlainTextResponse:
    return build_text_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        text=PROCESSING_ERROR_TEXT,
    )


def method_not_allowed_response() -> PlainTextResponse:
    response = build_text_response(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        text=METHOD_NOT_ALLOWED_TEXT,
    )
    response.headers["Allow"] = ALLOWED_METHODS
    return response


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer routing 405s in plain text; leave other HTTP errors to FastAPI."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return method_not_allowed_response()
    return await http_exception_handler(request, exc)
