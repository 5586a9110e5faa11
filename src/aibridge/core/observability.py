"""``event=... fields=...`` log lines for update dispatch and absorbed Telegram failures."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from aibridge.core.request_context import get_request_id


def _json_safe(value: Any) -> Any:
    # Outcomes are StrEnums; chat ids may be ints or "@channel" strings.
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return str(value)


def log_event(
    logger: logging.Logger,
    *,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Log one dispatch event such as ``telegram.update.dispatched``.

    Keys are sorted so a redelivered update logs the same line twice. The
    delivery's request id is added unless ``fields`` already names one.
    Non-ASCII user text is kept readable.
    """
    payload = {key: _json_safe(value) for key, value in sorted(fields.items())}
    request_id = get_request_id()
    if request_id is not None and "request_id" not in payload:
        payload["request_id"] = request_id
    logger.log(
        level,
        "event=%s fields=%s",
        event,
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
    )
