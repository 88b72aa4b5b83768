"""Checklist handlers."""

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
from daily_budget.bot.scenes.checklist import CHECKLIST_ERROR, ChecklistFlow
from daily_budget.bot.session import CHECKLIST_KEY, load_checklist_session, save_session
from daily_budget.bot.states import ChecklistStates

router = Router()
logger = logging.getLogger(__name__)


@router.message(Command("checklist"))
async def cmd_checklist(message: Message, state: FSMContext, checklist_flow: ChecklistFlow) -> None:
    """Show available checklists."""
    if not is_user_allowed(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    replier = TelegramReplier(message)
    try:
        session = await checklist_flow.enter(replier)
    except Exception:
        logger.exception(f"User {replier.user_id}: error entering checklist")
        await state.clear()
        await message.answer(f"{CHECKLIST_ERROR} {ENTRY_ERROR}")
        return

    if session.finished:
        return
    await state.set_state(ChecklistStates.active)
    await save_session(state, CHECKLIST_KEY, session)


@router.message(ChecklistStates.active, Command("cancel"))
async def cancel_checklist(message: Message, state: FSMContext, checklist_flow: ChecklistFlow) -> None:
    """Handle /cancel while a checklist is open."""
    session = await load_checklist_session(state)
    if session is not None:
        await checklist_flow.cancel(TelegramReplier(message), session)
    await state.clear()


@router.message(ChecklistStates.active, F.text, ~F.text.startswith("/"))
async def checklist_text(message: Message, state: FSMContext, checklist_flow: ChecklistFlow) -> None:
    session = await load_checklist_session(state)
    if session is None:
        await state.clear()
        await message.answer(SESSION_LOST)
        return

    replier = TelegramReplier(message)
    await run_step(
        replier, state, CHECKLIST_KEY, session, checklist_flow.handle_text(replier, session, message.text)
    )


@router.callback_query(ChecklistStates.active)
async def checklist_callback(
    callback: CallbackQuery, state: FSMContext, checklist_flow: ChecklistFlow
) -> None:
    """Handle checklist selection and Done/Cancel buttons."""
    session = await load_checklist_session(state)
    if session is None:
        await state.clear()
        await callback.answer(SESSION_LOST)
        return

    replier = TelegramReplier(callback)
    await run_step(
        replier,
        state,
        CHECKLIST_KEY,
        session,
        checklist_flow.handle_callback(replier, session, decode_callback(callback.data)),
        from_button=True,
    )
