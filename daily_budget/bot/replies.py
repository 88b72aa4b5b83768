"""Sending replies back to the operator.

Scenes talk to a ``Replier`` instead of aiogram objects directly, so the same
flow code serves messages and callback queries and can be driven by a fake in
tests.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from aiogram.exceptions import TelegramBadRequest
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message

logger = logging.getLogger(__name__)


class Replier(ABC):
    """Reply capability of one incoming update."""

    user_id: int = 0

    @abstractmethod
    async def answer(self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
        """Send a new message."""
        pass

    @abstractmethod
    async def edit(self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
        """Replace the message the pressed button belongs to."""
        pass

    @abstractmethod
    async def ack(self, text: Optional[str] = None) -> None:
        """Acknowledge a button press, optionally with a short notice."""
        pass


class TelegramReplier(Replier):
    """Replier backed by an aiogram message or callback query."""

    def __init__(self, event: Union[Message, CallbackQuery]):
        self.event = event
        self.user_id = event.from_user.id if event.from_user else 0

    @property
    def message(self) -> Optional[Message]:
        if isinstance(self.event, CallbackQuery):
            message = self.event.message
            # Inaccessible messages (too old) cannot be answered or edited
            return message if isinstance(message, Message) else None
        return self.event

    async def answer(self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
        message = self.message
        if message is None:
            logger.warning(f"User {self.user_id}: no message to answer, reply dropped")
            return
        await message.answer(text, reply_markup=reply_markup)

    async def edit(self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
        if not isinstance(self.event, CallbackQuery) or self.message is None:
            await self.answer(text, reply_markup=reply_markup)
            return
        try:
            await self.message.edit_text(text, reply_markup=reply_markup)
        except TelegramBadRequest as e:
            logger.debug(f"User {self.user_id}: edit failed ({e}), sending new message")
            await self.answer(text, reply_markup=reply_markup)

    async def ack(self, text: Optional[str] = None) -> None:
        if isinstance(self.event, CallbackQuery):
            await self.event.answer(text)
