"""Daily report handlers."""

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
from daily_budget.bot.scenes.report import ReportFlow
from daily_budget.bot.session import REPORT_KEY, load_report_session, save_session
from daily_budget.bot.states import ReportStates

router = Router()
logger = logging.getLogger(__name__)


@router.message(Command("report"))
async def cmd_report(message: Message, state: FSMContext, report_flow: ReportFlow) -> None:
    """Start or resume the daily report."""
    if not is_user_allowed(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    replier = TelegramReplier(message)
    try:
        session = await load_report_session(state)
        session = await report_flow.enter(replier, session)
    except Exception:
        logger.exception(f"User {replier.user_id}: error entering report")
        await state.clear()
        await message.answer(ENTRY_ERROR)
        return

    await state.set_state(ReportStates.active)
    await save_session(state, REPORT_KEY, session)


@router.message(ReportStates.active, Command("cancel"))
async def cancel_report(message: Message, state: FSMContext, report_flow: ReportFlow) -> None:
    """Handle /cancel during the report."""
    session = await load_report_session(state)
    if session is not None:
        await report_flow.cancel(TelegramReplier(message), session)
    await state.clear()


@router.message(ReportStates.active, Command("skip"))
async def skip_report_field(message: Message, state: FSMContext, report_flow: ReportFlow) -> None:
    """Handle /skip for optional fields."""
    session = await load_report_session(state)
    if session is None:
        await state.clear()
        await message.answer(SESSION_LOST)
        return

    replier = TelegramReplier(message)
    await run_step(replier, state, REPORT_KEY, session, report_flow.skip(replier, session))


@router.message(ReportStates.active, F.text, ~F.text.startswith("/"))
async def report_text(message: Message, state: FSMContext, report_flow: ReportFlow) -> None:
    """Route text input to the current report step."""
    session = await load_report_session(state)
    if session is None:
        await state.clear()
        await message.answer(SESSION_LOST)
        return

    replier = TelegramReplier(message)
    await run_step(
        replier, state, REPORT_KEY, session, report_flow.handle_text(replier, session, message.text)
    )


@router.callback_query(ReportStates.active)
async def report_callback(callback: CallbackQuery, state: FSMContext, report_flow: ReportFlow) -> None:
    """Route button presses to the report flow."""
    session = await load_report_session(state)
    if session is None:
        await state.clear()
        await callback.answer(SESSION_LOST)
        return

    replier = TelegramReplier(callback)
    await run_step(
        replier,
        state,
        REPORT_KEY,
        session,
        report_flow.handle_callback(replier, session, decode_callback(callback.data)),
        from_button=True,
    )
