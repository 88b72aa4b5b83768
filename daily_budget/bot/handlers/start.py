"""Start, help and fallback handlers."""

from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from daily_budget.bot.handlers.common import ACCESS_DENIED, is_user_allowed

router = Router()

HELP_TEXT = (
    "📋 Bot Usage Help\n\n"
    "Available commands:\n"
    "/report - Create a new daily report\n"
    "/cashbox - Record the cashbox amount\n"
    "/checklist - Go through a checklist\n"
    "/cancel - Cancel the current action\n"
    "/help - Show this message\n\n"
    "📊 Report creation process:\n"
    "1. Enter white cash, black cash and card sales\n"
    "2. Pick the weekday envelope for black cash\n"
    "3. Add expense items (up to 10)\n"
    "4. Add notes (optional, /skip to leave empty)\n"
    "5. Review, edit if needed and confirm\n\n"
    "❓ If you have questions, contact the administrator."
)


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext) -> None:
    """Handle /start command."""
    if not is_user_allowed(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return

    await state.clear()
    first_name = escape(message.from_user.first_name or "User")
    await message.answer(
        f"Hello, {first_name}! 👋\n\n"
        "Welcome to Daily Budget Bot!\n\n"
        "I'll help you create daily reports and keep the cashbox in order.\n\n"
        "Available commands:\n"
        "/report - Create a new report\n"
        "/cashbox - Record the cashbox amount\n"
        "/checklist - Go through a checklist\n"
        "/help - Help\n\n"
        "Let's start creating a report? Click /report"
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    """Handle /help command."""
    if not is_user_allowed(message.from_user.id):
        await message.answer(ACCESS_DENIED)
        return
    await message.answer(HELP_TEXT)


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext) -> None:
    """Handle /cancel outside of any flow."""
    await state.clear()
    await message.answer("Nothing to cancel.")


@router.message(Command("skip"))
async def cmd_skip(message: Message) -> None:
    await message.answer("You can only use /skip for optional fields (like notes).")


@router.callback_query()
async def stale_callback(callback: CallbackQuery) -> None:
    """Answer buttons of flows that already ended."""
    await callback.answer("This button is no longer active")
