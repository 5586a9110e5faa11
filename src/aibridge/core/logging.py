import logging
import logging.config
from typing import Any

from aibridge.core.request_context import get_request_id

_ALLOWED_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

# httpx logs every request URL at INFO, and Telegram URLs embed the bot token.
_QUIET_LOGGERS = ("httpx", "httpcore")
_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s [request_id=%(request_id)s]: %(message)s"


class RequestIdFilter(logging.Filter):
    """Tag records with the id of the webhook delivery being handled, or ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        record.request_id = request_id if request_id else "-"
        return True


def _bridge_logging_config(level: str) -> dict[str, Any]:
    quiet = {name: {"level": "WARNING", "propagate": True} for name in _QUIET_LOGGERS}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"bridge": {"format": _LINE_FORMAT}},
        "filters": {"request_id": {"()": "aibridge.core.logging.RequestIdFilter"}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "bridge",
                "stream": "ext://sys.stdout",
                "filters": ["request_id"],
            }
        },
        "loggers": quiet,
        "root": {"level": level, "handlers": ["stdout"]},
    }


def configure_logging(level: str) -> None:
    """Send bridge logs to stdout at ``LOG_LEVEL``, keeping HTTP client chatter (and bot tokens) out."""
    normalized_level = level.strip().upper()
    if normalized_level not in _ALLOWED_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LEVELS))
        raise ValueError(f"Invalid LOG_LEVEL '{level}'. Expected one of: {allowed}")

    logging.config.dictConfig(_bridge_logging_config(normalized_level))
