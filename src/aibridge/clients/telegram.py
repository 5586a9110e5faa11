from __future__ import annotations

import logging

import httpx

from aibridge.api.schemas.telegram import InlineKeyboardMarkup
from aibridge.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class TelegramApiError(RuntimeError):
    """Telegram rejected a Bot API call or answered with ``ok: false``."""


TELEGRAM_EXCEPTIONS = (httpx.HTTPError, TelegramApiError, ValueError)


def utf16_length(text: str) -> int:
    """Length as Telegram counts it: UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def split_message(text: str, limit: int) -> list[str]:
    """Partition ``text`` into consecutive slices of at most ``limit`` UTF-16 units.

    Characters outside the Basic Multilingual Plane count as two units and
    are never split. An empty body still yields one (empty) chunk so callers
    always issue at least one ``sendMessage``.
    """
    if limit < 2:
        raise ValueError("limit must be at least 2 UTF-16 code units")
    chunks: list[str] = []
    start = 0
    units = 0
    for index, char in enumerate(text):
        width = 2 if ord(char) > 0xFFFF else 1
        if units + width > limit:
            chunks.append(text[start:index])
            start = index
            units = 0
        units += width
    if start < len(text) or not chunks:
        chunks.append(text[start:])
    return chunks


class TelegramClient:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return self.settings.telegram_bot_token is not None

    @property
    def max_message_length(self) -> int:
        return self.settings.max_message_length

    def _base_url(self) -> str:
        token = self.settings.telegram_bot_token
        secret = token.get_secret_value() if token is not None else ""
        return f"{self.settings.telegram_api_base_url.rstrip('/')}/bot{secret}"

    @staticmethod
    def _validate_telegram_response(method: str, response: httpx.Response) -> None:
        response.raise_for_status()
        data = response.json()
        if isinstance(data, dict) and not data.get("ok", False):
            # Never include the request URL here: it carries the bot token.
            raise TelegramApiError(f"Telegram {method} failed: {data.get('description', data)}")

    async def _post(self, method: str, payload: dict) -> None:
        async with httpx.AsyncClient(timeout=self.settings.telegram_timeout_seconds) as client:
            response = await client.post(f"{self._base_url()}/{method}", json=payload)
        self._validate_telegram_response(method, response)

    async def send_message(
        self,
        chat_id: str | int,
        text: str,
        *,
        parse_mode: str | None = None,
        reply_markup: InlineKeyboardMarkup | None = None,
    ) -> int:
        """Send ``text`` in as many chunks as the length limit requires.

        Chunks go out strictly in order; only the last one carries the
        keyboard. Returns the number of chunks sent.
        """
        if not self.enabled:
            logger.warning("TELEGRAM_BOT_TOKEN is not configured; dropping sendMessage")
            return 0

        chunks = split_message(text, self.max_message_length)
        for index, chunk in enumerate(chunks):
            payload: dict[str, object] = {"chat_id": chat_id, "text": chunk}
            if parse_mode:
                payload["parse_mode"] = parse_mode
            if reply_markup is not None and index == len(chunks) - 1:
                payload["reply_markup"] = reply_markup.to_json()
            await self._post("sendMessage", payload)
        return len(chunks)

    async def send_chat_action(self, chat_id: str | int, action: str = "typing") -> None:
        if not self.enabled:
            return
        await self._post("sendChatAction", {"chat_id": chat_id, "action": action})

    async def answer_callback_query(self, callback_query_id: str) -> None:
        if not self.enabled:
            return
        await self._post("answerCallbackQuery", {"callback_query_id": callback_query_id})
