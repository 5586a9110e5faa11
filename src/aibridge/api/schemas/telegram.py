"""Telegram Bot API payload contracts used by the webhook."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DISPLAY_NAME = "there"

UpdateKind = Literal["message", "callback_query"]


class TelegramChat(BaseModel):
    """Subset of Telegram chat data required to reply."""

    id: int | str


class TelegramUser(BaseModel):
    """Subset of Telegram user data used for greetings."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None


class TelegramMessage(BaseModel):
    """Subset of Telegram message data required by the dispatcher."""

    model_config = ConfigDict(populate_by_name=True)

    message_id: int | None = None
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None

    @property
    def display_name(self) -> str:
        """Sender first name used in templated replies."""
        if self.from_user is not None and self.from_user.first_name:
            return self.from_user.first_name
        return DEFAULT_DISPLAY_NAME


class TelegramCallbackQuery(BaseModel):
    """Inline keyboard button press."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_user: TelegramUser | None = Field(default=None, alias="from")
    message: TelegramMessage | None = None
    data: str | None = None


class TelegramUpdate(BaseModel):
    """Top-level Telegram update.

    Only ``message`` and ``callback_query`` are handled; every other update
    type still validates and is acknowledged without side effects.
    """

    update_id: int | None = None
    message: TelegramMessage | None = None
    callback_query: TelegramCallbackQuery | None = None

    @property
    def kind(self) -> UpdateKind | None:
        if self.message is not None:
            return "message"
        if self.callback_query is not None:
            return "callback_query"
        return None


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard."""

    text: str
    callback_data: str | None = None


class InlineKeyboardMarkup(BaseModel):
    """Ordered rows of ordered inline buttons."""

    inline_keyboard: list[list[InlineKeyboardButton]]

    def to_json(self) -> str:
        """JSON-encode the markup the way ``sendMessage`` expects ``reply_markup``."""
        return self.model_dump_json(exclude_none=True)
