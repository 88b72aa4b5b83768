"""Cashbox handlers."""

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from daily_budget.bot.callbacks import decode_callback
from daily_budget.bot.handlers.common import (
    ACCESS_DENIED,
    ENTRY_ERROR,
    SESSION_LOST,
    is_user_allowed,
    run_step,
)
from daily_budget.bot.replies import TelegramReplier
from daily_budget.bot.scenes.cashbox import CashboxFlow
from daily_budget.bot.session import CASHBOX_KEY, load_cashbox_session, save_session
from daily_budget.bot.states import CashboxStates

router = Router()
logger = logging.getLogger(__name__)


@router.message(Command("cashbox"))
async def cmd_cashbox(message: Message, state: FSMContext, cashbox_flow: CashboxFlow) -> None:
    """Start a cashbox entry."""
    if not is_user_allowed(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    replier = TelegramReplier(message)
    try:
        session = await cashbox_flow.enter(replier)
    except Exception:
        logger.exception(f"User {replier.user_id}: error entering cashbox")
        await state.clear()
        await message.answer(ENTRY_ERROR)
        return

    await state.set_state(CashboxStates.active)
    await save_session(state, CASHBOX_KEY, session)


@router.message(CashboxStates.active, Command("cancel"))
async def cancel_cashbox(message: Message, state: FSMContext, cashbox_flow: CashboxFlow) -> None:
    """Handle /cancel during the cashbox entry."""
    session = await load_cashbox_session(state)
    if session is not None:
        await cashbox_flow.cancel(TelegramReplier(message), session)
    await state.clear()


@router.message(CashboxStates.active, F.text, ~F.text.startswith("/"))
async def cashbox_text(message: Message, state: FSMContext, cashbox_flow: CashboxFlow) -> None:
    """Handle amount input."""
    session = await load_cashbox_session(state)
    if session is None:
        await state.clear()
        await message.answer(SESSION_LOST)
        return

    replier = TelegramReplier(message)
    await run_step(
        replier, state, CASHBOX_KEY, session, cashbox_flow.handle_text(replier, session, message.text)
    )


@router.callback_query(CashboxStates.active)
async def cashbox_callback(callback: CallbackQuery, state: FSMContext, cashbox_flow: CashboxFlow) -> None:
    """Handle date selection and confirmation buttons."""
    session = await load_cashbox_session(state)
    if session is None:
        await state.clear()
        await callback.answer(SESSION_LOST)
        return

    replier = TelegramReplier(callback)
    await run_step(
        replier,
        state,
        CASHBOX_KEY,
        session,
        cashbox_flow.handle_callback(replier, session, decode_callback(callback.data)),
        from_button=True,
    )
