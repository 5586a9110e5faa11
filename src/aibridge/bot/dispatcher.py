"""Update dispatcher: classify one Telegram update and perform its replies."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from aibridge.api.schemas.telegram import (
    InlineKeyboardMarkup,
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramUpdate,
)
from aibridge.bot import templates
from aibridge.clients.inference import INFERENCE_EXCEPTIONS, InferenceClient, build_messages
from aibridge.clients.telegram import TELEGRAM_EXCEPTIONS, TelegramClient
from aibridge.core.observability import log_event

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "/"
TYPING_ACTION = "typing"


class DispatchOutcome(StrEnum):
    """Terminal outcomes for one inbound update."""

    IGNORED = "ignored"
    COMMAND = "command"
    UNKNOWN_COMMAND = "unknown_command"
    COMPLETION_SENT = "completion_sent"
    COMPLETION_FAILED = "completion_failed"
    EMPTY_MESSAGE = "empty_message"
    CALLBACK = "callback"
    UNKNOWN_CALLBACK = "unknown_callback"


@dataclass(frozen=True)
class OutboundMessage:
    """One reply addressed to a chat, before chunking."""

    chat_id: int | str
    text: str
    parse_mode: str | None = None
    reply_markup: InlineKeyboardMarkup | None = None


ReplyBuilder = Callable[[int | str, str], OutboundMessage]


def _static_reply(
    text: str,
    *,
    parse_mode: str | None = templates.MARKDOWN,
    reply_markup: InlineKeyboardMarkup | None = None,
) -> ReplyBuilder:
    """Build a reply factory that ignores the sender name."""

    def build(chat_id: int | str, first_name: str) -> OutboundMessage:
        return OutboundMessage(
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            reply_markup=reply_markup,
        )

    return build


def _welcome_reply(chat_id: int | str, first_name: str) -> OutboundMessage:
    return OutboundMessage(
        chat_id=chat_id,
        text=templates.welcome_text(first_name),
        parse_mode=templates.MARKDOWN,
        reply_markup=templates.START_KEYBOARD,
    )


COMMAND_REPLIES: Mapping[str, ReplyBuilder] = {
    "/start": _welcome_reply,
    "/help": _static_reply(templates.HELP_TEXT),
    "/about": _static_reply(templates.ABOUT_TEXT),
}

CALLBACK_REPLIES: Mapping[str, ReplyBuilder] = {
    "examples": _static_reply(templates.EXAMPLES_TEXT),
    "about": _static_reply(templates.ABOUT_TEXT),
    "help": _static_reply(templates.HELP_TEXT),
    "ask_again": _static_reply(templates.ASK_AGAIN_TEXT, parse_mode=None),
}


def parse_command(text: str, *, bot_username: str | None = None) -> str:
    """Return the lowercased first token of a command message.

    ``/help@this_bot`` is reduced to ``/help`` when ``bot_username`` names
    this bot; mentions of any other bot are left intact and so never match.
    """
    parts = text.split(maxsplit=1)
    token = parts[0].lower() if parts else text.lower()
    if bot_username:
        command, separator, mention = token.partition("@")
        if separator and mention == bot_username.lower():
            return command
    return token


class UpdateDispatcher:
    """Turn one update into zero or more outbound Bot API calls.

    Telegram failures are logged and absorbed here; inference failures turn
    into the apology reply. Nothing is retried and nothing is remembered
    between updates.
    """

    def __init__(
        self,
        *,
        telegram: TelegramClient,
        inference: InferenceClient,
        bot_username: str | None = None,
        system_prompt: str = templates.SYSTEM_PROMPT,
        commands: Mapping[str, ReplyBuilder] = COMMAND_REPLIES,
        callbacks: Mapping[str, ReplyBuilder] = CALLBACK_REPLIES,
    ) -> None:
        self._telegram = telegram
        self._inference = inference
        self._bot_username = bot_username
        self._system_prompt = system_prompt
        self._commands = commands
        self._callbacks = callbacks

    async def handle(self, update: TelegramUpdate) -> DispatchOutcome:
        """Dispatch one update and report how it was handled."""
        if update.message is not None:
            outcome = await self._handle_message(update.message)
        elif update.callback_query is not None:
            outcome = await self._handle_callback_query(update.callback_query)
        else:
            outcome = DispatchOutcome.IGNORED

        log_event(
            logger,
            event="telegram.update.dispatched",
            update_id=update.update_id,
            kind=update.kind,
            outcome=outcome,
        )
        return outcome

    async def _handle_message(self, message: TelegramMessage) -> DispatchOutcome:
        text = message.text or ""
        chat_id = message.chat.id

        if text.startswith(COMMAND_PREFIX):
            return await self._handle_command(text, chat_id, message.display_name)
        if not text:
            return DispatchOutcome.EMPTY_MESSAGE

        await self._best_effort(
            "sendChatAction",
            chat_id,
            lambda: self._telegram.send_chat_action(chat_id, TYPING_ACTION),
        )
        try:
            completion = await self._inference.complete(
                build_messages(self._system_prompt, text)
            )
        except INFERENCE_EXCEPTIONS:
            logger.exception("Inference backend failed for chat %s", chat_id)
            await self._deliver(OutboundMessage(chat_id=chat_id, text=templates.APOLOGY_TEXT))
            return DispatchOutcome.COMPLETION_FAILED

        await self._deliver(
            OutboundMessage(
                chat_id=chat_id,
                text=completion,
                parse_mode=templates.MARKDOWN,
                reply_markup=templates.FOLLOW_UP_KEYBOARD,
            )
        )
        return DispatchOutcome.COMPLETION_SENT

    async def _handle_command(
        self,
        text: str,
        chat_id: int | str,
        first_name: str,
    ) -> DispatchOutcome:
        command = parse_command(text, bot_username=self._bot_username)
        builder = self._commands.get(command)
        if builder is None:
            await self._deliver(
                OutboundMessage(chat_id=chat_id, text=templates.UNKNOWN_COMMAND_TEXT)
            )
            return DispatchOutcome.UNKNOWN_COMMAND

        await self._deliver(builder(chat_id, first_name))
        return DispatchOutcome.COMMAND

    async def _handle_callback_query(self, callback: TelegramCallbackQuery) -> DispatchOutcome:
        message = callback.message
        chat_id = message.chat.id if message is not None else None

        await self._best_effort(
            "answerCallbackQuery",
            chat_id,
            lambda: self._telegram.answer_callback_query(callback.id),
        )

        builder = self._callbacks.get(callback.data or "")
        if builder is None or message is None:
            return DispatchOutcome.UNKNOWN_CALLBACK

        await self._deliver(builder(message.chat.id, message.display_name))
        return DispatchOutcome.CALLBACK

    async def _deliver(self, reply: OutboundMessage) -> None:
        """Send one reply; a delivery failure is logged and absorbed."""
        try:
            await self._telegram.send_message(
                reply.chat_id,
                reply.text,
                parse_mode=reply.parse_mode,
                reply_markup=reply.reply_markup,
            )
        except TELEGRAM_EXCEPTIONS:
            logger.exception("Failed to deliver message to chat %s", reply.chat_id)

    async def _best_effort(
        self,
        method: str,
        chat_id: int | str | None,
        call: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await call()
        except TELEGRAM_EXCEPTIONS:
            log_event(
                logger,
                level=logging.WARNING,
                event="telegram.call.failed",
                method=method,
                chat_id=chat_id,
            )
