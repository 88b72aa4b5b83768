"""Cashbox count conversation: pick a day, enter the amount, confirm."""

import asyncio
import logging
from datetime import date, timedelta
from html import escape
from typing import Callable

from daily_budget.bot import keyboards
from daily_budget.bot.callbacks import Action, Callback
from daily_budget.bot.replies import Replier
from daily_budget.bot.session import CashboxSession, CashboxStep
from daily_budget.formatters import format_amount, format_cashbox_summary, format_date_for_display
from daily_budget.sheets import SheetsService
from daily_budget.sheets_errors import SheetsError, sheets_error_message
from daily_budget.sheets_helpers import DEFAULT_CASHBOX_ROW, ReportValidationError, save_cashbox_to_sheets
from daily_budget.validators import amount_error_message, validate_amount

logger = logging.getLogger(__name__)

CASHBOX_START = "🏦 Let's record the cashbox amount!"
CASHBOX_DATE = "📅 Select the date:"
CASHBOX_AMOUNT = "💰 Enter the amount in the cashbox:"
CASHBOX_SAVED = "✅ Cashbox amount saved to Google Sheets!"
CASHBOX_CANCELLED = "❌ Cashbox entry cancelled."
SAVE_FAILED = "⚠️ Cashbox confirmed but failed to save to Google Sheets."
USE_BUTTONS_DATE = "Please use buttons to select date"
USE_BUTTONS_CONFIRM = "Please use buttons to confirm"
STALE_BUTTON = "This button is no longer active"


class CashboxFlow:
    """Cashbox conversation logic, same session contract as ``ReportFlow``."""

    def __init__(
        self,
        sheets: SheetsService,
        cashbox_row: int = DEFAULT_CASHBOX_ROW,
        today: Callable[[], date] = date.today,
    ):
        self.sheets = sheets
        self.cashbox_row = cashbox_row
        self.today = today

    async def enter(self, replier: Replier) -> CashboxSession:
        session = CashboxSession()
        await replier.answer(CASHBOX_START)
        await replier.answer(CASHBOX_DATE, reply_markup=keyboards.date_keyboard(self.today()))
        logger.info(f"User {replier.user_id} started cashbox entry")
        return session

    async def cancel(self, replier: Replier, session: CashboxSession, from_button: bool = False) -> None:
        session.step = CashboxStep.CANCELLED
        if from_button:
            await replier.ack()
            await replier.edit(CASHBOX_CANCELLED)
        else:
            await replier.answer(CASHBOX_CANCELLED)
        logger.info(f"User {replier.user_id} cancelled cashbox entry")

    async def handle_text(self, replier: Replier, session: CashboxSession, text: str) -> None:
        if session.step == CashboxStep.CONFIRMATION:
            await replier.answer(USE_BUTTONS_CONFIRM, reply_markup=keyboards.cashbox_confirm_keyboard())
            return

        outcome = validate_amount(text)
        if not outcome.is_valid:
            await replier.answer(amount_error_message(outcome))
            return

        session.cashbox.amount = outcome.value
        logger.info(f"User {replier.user_id} entered cashbox amount: {outcome.value}")

        if session.cashbox.date is None:
            # Amount typed before the date was picked
            await replier.answer(
                f"✅ Amount saved: {format_amount(outcome.value)}\n\n{USE_BUTTONS_DATE}",
                reply_markup=keyboards.date_keyboard(self.today()),
            )
            return

        session.step = CashboxStep.CONFIRMATION
        await replier.answer(
            format_cashbox_summary(session.cashbox),
            reply_markup=keyboards.cashbox_confirm_keyboard(),
        )

    async def handle_callback(self, replier: Replier, session: CashboxSession, callback: Callback) -> None:
        action = callback.action
        if action == Action.DATE:
            await self._handle_date(replier, session, callback)
        elif action == Action.CASHBOX_CONFIRM:
            await self._confirm(replier, session)
        elif action == Action.CASHBOX_CANCEL:
            await self.cancel(replier, session, from_button=True)
        elif action == Action.INVALID:
            logger.warning(f"User {replier.user_id}: invalid callback data {callback.raw!r}")
            await replier.ack("Invalid selection")
        else:
            logger.warning(f"User {replier.user_id}: unexpected action {action.value} in cashbox")
            await replier.ack("Unknown action")

    async def _handle_date(self, replier: Replier, session: CashboxSession, callback: Callback) -> None:
        if session.step == CashboxStep.CONFIRMATION:
            await replier.ack(STALE_BUTTON)
            return

        day = self.today() - timedelta(days=callback.days_ago)
        session.cashbox.date = day
        await replier.ack()
        logger.info(f"User {replier.user_id} selected cashbox date: {day}")

        if session.cashbox.amount is not None:
            session.step = CashboxStep.CONFIRMATION
            await replier.edit(
                format_cashbox_summary(session.cashbox),
                reply_markup=keyboards.cashbox_confirm_keyboard(),
            )
            return

        session.step = CashboxStep.AMOUNT
        await replier.edit(f"📅 Date: {format_date_for_display(day)}\n\n{CASHBOX_AMOUNT}")

    async def _confirm(self, replier: Replier, session: CashboxSession) -> None:
        if session.step != CashboxStep.CONFIRMATION or not session.cashbox.is_complete:
            await replier.ack("Invalid cashbox data")
            logger.error(
                f"User {replier.user_id}: cashbox confirm with incomplete data "
                f"(step={session.step.value}, date={session.cashbox.date}, amount={session.cashbox.amount})"
            )
            return

        await replier.ack()
        try:
            await asyncio.to_thread(save_cashbox_to_sheets, self.sheets, session.cashbox, self.cashbox_row)
        except SheetsError as e:
            logger.error(
                f"User {replier.user_id}: failed to save cashbox "
                f"(kind={e.kind.value}, sheet={e.sheet_name}, date={e.date_string}): {e.message}"
            )
            await self._show_save_failure(replier, session, escape(sheets_error_message(e), quote=False))
            return
        except ReportValidationError as e:
            logger.error(f"User {replier.user_id}: cashbox is not valid for saving: {e}")
            await self._show_save_failure(replier, session, f"❌ {escape(str(e), quote=False)}")
            return

        session.step = CashboxStep.SAVED
        await replier.edit(
            f"{CASHBOX_SAVED}\n\n"
            f"📅 Date: {format_date_for_display(session.cashbox.date)}\n"
            f"💰 Amount: {format_amount(session.cashbox.amount)}"
        )
        logger.info(
            f"User {replier.user_id} saved cashbox {session.cashbox.amount} for {session.cashbox.date}"
        )

    async def _show_save_failure(self, replier: Replier, session: CashboxSession, reason: str) -> None:
        await replier.edit(
            f"{SAVE_FAILED}\n\n{reason}\n\n{format_cashbox_summary(session.cashbox)}",
            reply_markup=keyboards.cashbox_confirm_keyboard(),
        )
