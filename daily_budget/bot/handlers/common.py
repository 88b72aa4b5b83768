"""Helpers shared by the flow handlers."""

import logging
from contextlib import suppress
from typing import Awaitable

from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext

from daily_budget.bot.config import get_settings
from daily_budget.bot.replies import Replier
from daily_budget.bot.session import store_session

logger = logging.getLogger(__name__)

ACCESS_DENIED = "⛔ You don't have access to this bot."
STEP_ERROR = "An error occurred. Please try again or use /cancel."
ENTRY_ERROR = "An error occurred. Please try again later."
SESSION_LOST = "Your session has expired. Please start again."


def is_user_allowed(user_id: int) -> bool:
    """Check if user is allowed to use the bot."""
    return get_settings().is_user_allowed(user_id)


async def run_step(
    replier: Replier,
    state: FSMContext,
    key: str,
    session,
    step: Awaitable[None],
    from_button: bool = False,
) -> None:
    """Run one step of a flow and store the resulting session.

    A failing step leaves the stored session as it was before the step.
    """
    try:
        await step
    except Exception:
        logger.exception(f"User {replier.user_id}: error in {key} flow")
        if from_button:
            with suppress(TelegramBadRequest):
                await replier.ack("An error occurred")
        await replier.answer(STEP_ERROR)
        return
    await store_session(state, key, session)
