"""Daily report conversation.

The operator enters white cash, black cash (plus the weekday envelope when it
is not zero), card sales, expenses and notes, reviews a summary, optionally
edits any field and confirms. Confirmed reports are written into the month
sheet column of the report date.

Text input is routed in this order: an expense being entered, then edit
mode, then the current step.
"""

import asyncio
import logging
from datetime import date, timedelta
from decimal import Decimal
from html import escape
from typing import Callable, Optional

from aiogram.types import InlineKeyboardMarkup

from daily_budget.bot import keyboards
from daily_budget.bot.callbacks import Action, Callback, EditField
from daily_budget.bot.replies import Replier
from daily_budget.bot.session import ReportSession, ReportStep
from daily_budget.calculations import (
    recalculate_derived,
    update_cash_amount,
    update_cashbox_amount,
    update_total_sales,
)
from daily_budget.formatters import (
    MAX_DISPLAY_NOTES_LENGTH,
    format_amount,
    format_current_value_message,
    format_date_for_display,
    format_expenses_list,
    format_report_summary,
    shorten_text,
)
from daily_budget.models import MAX_EXPENSES, Expense
from daily_budget.sheets import SheetsService
from daily_budget.sheets_errors import SheetsError, sheets_error_message
from daily_budget.sheets_helpers import ReportValidationError, save_report_to_sheets
from daily_budget.validators import (
    amount_error_message,
    is_skip,
    text_error_message,
    validate_amount,
    validate_expense_amount,
    validate_optional_text,
    validate_text,
)

logger = logging.getLogger(__name__)


class Prompt:
    """Questions asked at each step."""

    WHITE_CASH_AMOUNT = "💵 Enter White Cash amount:"
    BLACK_CASH_AMOUNT = "🖤 Enter Black Cash amount:"
    BLACK_CASH_LOCATION = "📅 Select the weekday when Black Cash was saved:"
    CARD_SALES_AMOUNT = "💳 Enter Card sales amount:"
    EXPENSES_QUESTION = "📦 Do you have any expenses to record?"
    EXPENSE_AMOUNT = "💸 Enter expense amount:"
    EXPENSE_DESCRIPTION = "📝 Enter expense description:"
    NOTES = "📄 Any additional notes? (Type message or /skip)"
    REPORT_DATE = "📅 Select the report date:"
    CONFIRM = "Please confirm your report:"
    EDIT_FIELD = "✏️ Select a field to edit:"
    EDIT_EXPENSES = (
        'Type an expense amount to add an expense, "clear" to remove all expenses '
        'or "skip" to keep them:'
    )


REPORT_START = "📊 Let's create a new report!"
REPORT_RESUMED = "📊 Continuing your report."
REPORT_CANCELLED = "❌ Report cancelled."
REPORT_SAVED = "✅ Report saved to Google Sheets!"
SAVE_FAILED = "⚠️ Report confirmed but failed to save to Google Sheets."
AMOUNT_SAVED = "✅ Amount saved"
USE_BUTTONS = "Please use the buttons to continue."
SKIP_NOT_ALLOWED = "You can only use /skip for optional fields (like notes)."
STALE_BUTTON = "This button is no longer active"
MAX_EXPENSES_REACHED = f"❌ Maximum {MAX_EXPENSES} expenses per report reached."
CLEAR_TOKEN = "clear"
LOCATION_REQUIRED = "❌ Black Cash is not zero, so its weekday is required."

FIELD_LABELS = {
    EditField.WHITE_CASH: "White Cash",
    EditField.BLACK_CASH: "Black Cash",
    EditField.BLACK_CASH_LOCATION: "Black Cash Location",
    EditField.CARD_SALES: "Card Sales",
    EditField.EXPENSES: "Expenses",
    EditField.CASHBOX: "Cashbox",
    EditField.NOTES: "Notes",
    EditField.REPORT_DATE: "Report Date",
}

AMOUNT_FIELDS = {
    EditField.WHITE_CASH: "white_cash_amount",
    EditField.BLACK_CASH: "black_cash_amount",
    EditField.CARD_SALES: "card_sales_amount",
    EditField.CASHBOX: "cashbox_amount",
}


class ReportFlow:
    """Report conversation logic.

    Methods take the session of the current conversation and mutate it in
    place. Once ``session.finished`` is true the caller drops the session.
    """

    def __init__(self, sheets: SheetsService, today: Callable[[], date] = date.today):
        """Initialize flow.

        Args:
            sheets: Adapter for the spreadsheet with month sheets.
            today: Source of the current date, used by the date keyboard.
        """
        self.sheets = sheets
        self.today = today

    # ============ Entry, cancel, skip ============

    async def enter(self, replier: Replier, session: Optional[ReportSession] = None) -> ReportSession:
        """Start a new report or resume a stored one."""
        if session is None or session.finished:
            session = ReportSession()
            await replier.answer(f"{REPORT_START}\n\n{Prompt.WHITE_CASH_AMOUNT}")
            logger.info(f"User {replier.user_id} started a new report")
            return session

        update_cash_amount(session.report)
        text, markup = self._current_prompt(session)
        await replier.answer(f"{REPORT_RESUMED}\n\n{text}", reply_markup=markup)
        logger.info(f"User {replier.user_id} resumed report at step {session.step.value}")
        return session

    async def cancel(self, replier: Replier, session: ReportSession, from_button: bool = False) -> None:
        session.reset_expense_input()
        session.step = ReportStep.CANCELLED
        if from_button:
            await replier.ack()
            await replier.edit(REPORT_CANCELLED)
        else:
            await replier.answer(REPORT_CANCELLED)
        logger.info(f"User {replier.user_id} cancelled report")

    async def skip(self, replier: Replier, session: ReportSession) -> None:
        """Handle /skip: keeps an edited value or skips the notes."""
        if session.collecting_expense:
            await replier.answer(SKIP_NOT_ALLOWED)
        elif session.edit_mode and session.editing_field is not None:
            await self._handle_edit_text(replier, session, "skip")
        elif not session.edit_mode and session.step == ReportStep.NOTES:
            await self._handle_notes(replier, session, "skip")
        else:
            await replier.answer(SKIP_NOT_ALLOWED)

    # ============ Text input ============

    async def handle_text(self, replier: Replier, session: ReportSession, text: str) -> None:
        if session.collecting_expense:
            await self._handle_expense_text(replier, session, text)
            return

        if session.edit_mode:
            await self._handle_edit_text(replier, session, text)
            return

        step = session.step
        if step == ReportStep.WHITE_CASH_AMOUNT:
            await self._handle_white_cash(replier, session, text)
        elif step == ReportStep.BLACK_CASH_AMOUNT:
            await self._handle_black_cash(replier, session, text)
        elif step == ReportStep.CARD_SALES_AMOUNT:
            await self._handle_card_sales(replier, session, text)
        elif step == ReportStep.NOTES:
            await self._handle_notes(replier, session, text)
        else:
            text_prompt, markup = self._current_prompt(session)
            await replier.answer(f"{USE_BUTTONS}\n\n{text_prompt}", reply_markup=markup)

    async def _handle_white_cash(self, replier: Replier, session: ReportSession, text: str) -> None:
        outcome = validate_amount(text)
        if not outcome.is_valid:
            await replier.answer(amount_error_message(outcome))
            return

        session.report.white_cash_amount = outcome.value
        recalculate_derived(session.report)
        session.step = ReportStep.BLACK_CASH_AMOUNT
        await replier.answer(
            f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.BLACK_CASH_AMOUNT}"
        )
        logger.info(f"User {replier.user_id} entered white cash amount: {outcome.value}")

    async def _handle_black_cash(self, replier: Replier, session: ReportSession, text: str) -> None:
        outcome = validate_amount(text)
        if not outcome.is_valid:
            await replier.answer(amount_error_message(outcome))
            return

        report = session.report
        report.black_cash_amount = outcome.value
        recalculate_derived(report)

        if outcome.value > 0:
            session.step = ReportStep.BLACK_CASH_LOCATION
            await replier.answer(
                f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.BLACK_CASH_LOCATION}",
                reply_markup=keyboards.weekday_keyboard(),
            )
        else:
            report.black_cash_location = None
            session.step = ReportStep.CARD_SALES_AMOUNT
            await replier.answer(
                f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.CARD_SALES_AMOUNT}"
            )
        logger.info(f"User {replier.user_id} entered black cash amount: {outcome.value}")

    async def _handle_card_sales(self, replier: Replier, session: ReportSession, text: str) -> None:
        outcome = validate_amount(text)
        if not outcome.is_valid:
            await replier.answer(amount_error_message(outcome))
            return

        session.report.card_sales_amount = outcome.value
        recalculate_derived(session.report)
        session.step = ReportStep.EXPENSES
        await replier.answer(
            f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.EXPENSES_QUESTION}",
            reply_markup=keyboards.expense_initial_keyboard(),
        )
        logger.info(f"User {replier.user_id} entered card sales amount: {outcome.value}")

    async def _handle_notes(self, replier: Replier, session: ReportSession, text: str) -> None:
        outcome = validate_optional_text(text)
        session.report.notes = outcome.value
        prefix = "✅ Notes saved\n\n" if outcome.value else ""
        await self._show_confirmation(replier, session, prefix=prefix)
        logger.info(f"User {replier.user_id} entered notes and reached confirmation")

    async def _handle_expense_text(self, replier: Replier, session: ReportSession, text: str) -> None:
        if session.current_expense_amount is None:
            outcome = validate_expense_amount(text)
            if not outcome.is_valid:
                await replier.answer(amount_error_message(outcome))
                return
            session.current_expense_amount = outcome.value
            await replier.answer(
                f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.EXPENSE_DESCRIPTION}"
            )
            logger.info(f"User {replier.user_id} entered expense amount: {outcome.value}")
            return

        outcome = validate_text(text)
        if not outcome.is_valid:
            await replier.answer(text_error_message(outcome))
            return

        amount = session.current_expense_amount
        session.report.expenses.append(Expense(amount=amount, description=outcome.value))
        session.reset_expense_input()
        recalculate_derived(session.report)
        await replier.answer(
            f"✅ Expense added!\n\n{format_expenses_list(session.report)}",
            reply_markup=keyboards.expense_next_keyboard(),
        )
        logger.info(f"User {replier.user_id} added expense: {outcome.value} - {amount}")

    # ============ Edit mode text ============

    async def _handle_edit_text(self, replier: Replier, session: ReportSession, text: str) -> None:
        field = session.editing_field
        if field is None:
            await replier.answer(
                f"{USE_BUTTONS}\n\n{Prompt.EDIT_FIELD}",
                reply_markup=keyboards.edit_fields_keyboard(session.report),
            )
            return

        if field in (EditField.BLACK_CASH_LOCATION, EditField.REPORT_DATE):
            location_needed = field == EditField.BLACK_CASH_LOCATION and self._location_missing(session)
            if is_skip(text) and location_needed:
                await replier.answer(
                    f"{LOCATION_REQUIRED}\n\n{Prompt.BLACK_CASH_LOCATION}",
                    reply_markup=keyboards.weekday_keyboard(),
                )
            elif is_skip(text):
                await self._back_to_fields(replier, session, f"⏭️ {FIELD_LABELS[field]} unchanged")
            else:
                text_prompt, markup = self._current_prompt(session)
                await replier.answer(f"{USE_BUTTONS}\n\n{text_prompt}", reply_markup=markup)
            return

        if field == EditField.EXPENSES:
            await self._handle_edit_expenses(replier, session, text)
        elif field == EditField.NOTES:
            await self._handle_edit_notes(replier, session, text)
        else:
            await self._handle_edit_amount(replier, session, field, text)

    async def _handle_edit_amount(
        self, replier: Replier, session: ReportSession, field: EditField, text: str
    ) -> None:
        label = FIELD_LABELS[field]
        if is_skip(text):
            await self._back_to_fields(replier, session, f"⏭️ {label} unchanged")
            return

        outcome = validate_amount(text)
        if not outcome.is_valid:
            await replier.answer(amount_error_message(outcome))
            return

        report = session.report
        setattr(report, AMOUNT_FIELDS[field], outcome.value)
        if field == EditField.CASHBOX:
            session.cashbox_overridden = True
        recalculate_derived(report)
        logger.info(f"User {replier.user_id} edited {field.value}: {outcome.value}")

        if field == EditField.BLACK_CASH:
            if outcome.value == 0:
                report.black_cash_location = None
            elif report.black_cash_location is None:
                session.editing_field = EditField.BLACK_CASH_LOCATION
                await replier.answer(
                    f"✅ {label} updated: {format_amount(outcome.value)}\n\n{Prompt.BLACK_CASH_LOCATION}",
                    reply_markup=keyboards.weekday_keyboard(),
                )
                return

        await self._back_to_fields(replier, session, f"✅ {label} updated: {format_amount(outcome.value)}")

    async def _handle_edit_notes(self, replier: Replier, session: ReportSession, text: str) -> None:
        if is_skip(text):
            await self._back_to_fields(replier, session, "⏭️ Notes unchanged")
            return

        outcome = validate_text(text)
        if not outcome.is_valid:
            await replier.answer(text_error_message(outcome))
            return

        session.report.notes = outcome.value
        logger.info(f"User {replier.user_id} edited notes")
        await self._back_to_fields(replier, session, "✅ Notes updated")

    async def _handle_edit_expenses(self, replier: Replier, session: ReportSession, text: str) -> None:
        command = text.strip().lower()
        if command == CLEAR_TOKEN:
            session.report.expenses = []
            self._complete_expenses(session)
            logger.info(f"User {replier.user_id} cleared all expenses")
            await self._back_to_fields(replier, session, "🗑️ All expenses cleared")
            return

        if is_skip(text):
            await self._back_to_fields(replier, session, "⏭️ Expenses unchanged")
            return

        if len(session.report.expenses) >= MAX_EXPENSES:
            await self._back_to_fields(replier, session, MAX_EXPENSES_REACHED)
            return

        # Anything else is the amount of a new expense
        outcome = validate_expense_amount(text)
        if not outcome.is_valid:
            await replier.answer(f"❌ {outcome.reason}\n\n{Prompt.EDIT_EXPENSES}")
            return

        session.collecting_expense = True
        session.current_expense_amount = outcome.value
        await replier.answer(
            f"{AMOUNT_SAVED}: {format_amount(outcome.value)}\n\n{Prompt.EXPENSE_DESCRIPTION}"
        )
        logger.info(f"User {replier.user_id} entered expense amount: {outcome.value}")

    # ============ Callbacks ============

    async def handle_callback(self, replier: Replier, session: ReportSession, callback: Callback) -> None:
        action = callback.action
        if action == Action.WEEKDAY:
            await self._handle_weekday(replier, session, callback)
        elif action == Action.DATE:
            await self._handle_date(replier, session, callback)
        elif action in (Action.EXPENSE_ADD, Action.EXPENSE_ANOTHER):
            await self._start_expense(replier, session)
        elif action == Action.EXPENSE_SKIP:
            await self._skip_expenses(replier, session)
        elif action == Action.EXPENSE_DONE:
            await self._finish_expenses(replier, session)
        elif action == Action.REPORT_CONFIRM:
            await self._confirm(replier, session)
        elif action == Action.REPORT_EDIT:
            await self._start_edit(replier, session)
        elif action == Action.REPORT_CANCEL:
            await self.cancel(replier, session, from_button=True)
        elif action == Action.EDIT_FIELD:
            await self._select_edit_field(replier, session, callback)
        elif action == Action.EDIT_DONE:
            await self._finish_edit(replier, session)
        elif action == Action.INVALID:
            logger.warning(f"User {replier.user_id}: invalid callback data {callback.raw!r}")
            await replier.ack("Invalid selection")
        else:
            logger.warning(f"User {replier.user_id}: unexpected action {action.value} in report")
            await replier.ack("Unknown action")

    async def _stale(self, replier: Replier, session: ReportSession, callback_name: str) -> None:
        logger.info(
            f"User {replier.user_id}: ignoring {callback_name} at step {session.step.value} "
            f"(edit_mode={session.edit_mode})"
        )
        await replier.ack(STALE_BUTTON)

    async def _handle_weekday(self, replier: Replier, session: ReportSession, callback: Callback) -> None:
        weekday = callback.weekday
        report = session.report

        if session.edit_mode and session.editing_field == EditField.BLACK_CASH_LOCATION:
            report.black_cash_location = weekday
            await replier.ack()
            await self._back_to_fields(
                replier, session, f"✅ Black Cash location saved: {weekday.value}", edit=True
            )
        elif not session.edit_mode and session.step == ReportStep.BLACK_CASH_LOCATION:
            report.black_cash_location = weekday
            session.step = ReportStep.CARD_SALES_AMOUNT
            await replier.ack()
            await replier.edit(
                "✅ Black Cash location saved\n\n"
                f"🖤 Black Cash: {format_amount(report.black_cash_amount)}\n"
                f"📍 Location: {weekday.value}\n\n"
                f"{Prompt.CARD_SALES_AMOUNT}"
            )
        else:
            await self._stale(replier, session, "weekday")
            return
        logger.info(
            f"User {replier.user_id} selected black cash location: {weekday.value} "
            f"for amount: {report.black_cash_amount}"
        )

    async def _start_expense(self, replier: Replier, session: ReportSession) -> None:
        if not self._expenses_active(session):
            await self._stale(replier, session, "expense add")
            return

        if len(session.report.expenses) >= MAX_EXPENSES:
            await replier.ack()
            await replier.answer(
                f"{MAX_EXPENSES_REACHED}\n\n{format_expenses_list(session.report)}",
                reply_markup=keyboards.expense_next_keyboard(),
            )
            logger.info(f"User {replier.user_id} hit the expense limit")
            return

        session.collecting_expense = True
        session.current_expense_amount = None
        await replier.ack()
        await replier.edit(Prompt.EXPENSE_AMOUNT)
        logger.info(f"User {replier.user_id} started adding expense")

    async def _skip_expenses(self, replier: Replier, session: ReportSession) -> None:
        if session.edit_mode or session.step != ReportStep.EXPENSES:
            await self._stale(replier, session, "expense skip")
            return

        self._complete_expenses(session)
        session.step = ReportStep.NOTES
        await replier.ack()
        await replier.edit(
            "⏭️ Expenses skipped\n\n"
            f"🏦 Cashbox: {format_amount(session.report.cashbox_amount)}\n\n"
            f"{Prompt.NOTES}"
        )
        logger.info(f"User {replier.user_id} skipped expenses")

    async def _finish_expenses(self, replier: Replier, session: ReportSession) -> None:
        if not self._expenses_active(session):
            await self._stale(replier, session, "expense done")
            return

        self._complete_expenses(session)
        await replier.ack()
        if session.edit_mode:
            await self._back_to_fields(
                replier, session, f"✅ Expenses saved\n\n{format_expenses_list(session.report)}", edit=True
            )
        else:
            session.step = ReportStep.NOTES
            await replier.edit(
                "✅ Expenses saved\n\n"
                f"🏦 Cashbox: {format_amount(session.report.cashbox_amount)}\n\n"
                f"{Prompt.NOTES}"
            )
        logger.info(f"User {replier.user_id} finished adding expenses")

    async def _confirm(self, replier: Replier, session: ReportSession) -> None:
        if session.edit_mode or session.step != ReportStep.CONFIRMATION:
            await self._stale(replier, session, "confirm")
            return

        await replier.ack()
        if session.report.report_date is None:
            session.step = ReportStep.REPORT_DATE
            await replier.edit(Prompt.REPORT_DATE, reply_markup=keyboards.date_keyboard(self.today()))
            return
        await self._persist(replier, session)

    async def _handle_date(self, replier: Replier, session: ReportSession, callback: Callback) -> None:
        day = self.today() - timedelta(days=callback.days_ago)

        if session.edit_mode and session.editing_field == EditField.REPORT_DATE:
            session.report.report_date = day
            await replier.ack()
            await self._back_to_fields(
                replier, session, f"✅ Report date set: {format_date_for_display(day)}", edit=True
            )
        elif not session.edit_mode and session.step == ReportStep.REPORT_DATE:
            session.report.report_date = day
            await replier.ack()
            await self._persist(replier, session)
        else:
            await self._stale(replier, session, "date")
            return
        logger.info(f"User {replier.user_id} selected report date: {day}")

    async def _start_edit(self, replier: Replier, session: ReportSession) -> None:
        if session.edit_mode or session.step != ReportStep.CONFIRMATION:
            await self._stale(replier, session, "edit")
            return

        recalculate_derived(session.report)
        session.edit_mode = True
        session.editing_field = None
        await replier.ack()
        await replier.edit(Prompt.EDIT_FIELD, reply_markup=keyboards.edit_fields_keyboard(session.report))
        logger.info(f"User {replier.user_id} entered edit mode")

    async def _select_edit_field(self, replier: Replier, session: ReportSession, callback: Callback) -> None:
        if not session.edit_mode or session.collecting_expense:
            await self._stale(replier, session, "edit field")
            return

        field = callback.edit_field
        session.editing_field = field
        await replier.ack()

        text, markup = self._current_prompt(session)
        await replier.edit(text, reply_markup=markup)
        logger.info(f"User {replier.user_id} editing field {field.value}")

    async def _finish_edit(self, replier: Replier, session: ReportSession) -> None:
        if not session.edit_mode or session.collecting_expense:
            await self._stale(replier, session, "done editing")
            return

        if self._location_missing(session):
            session.editing_field = EditField.BLACK_CASH_LOCATION
            await replier.ack()
            await replier.edit(
                f"{LOCATION_REQUIRED}\n\n{Prompt.BLACK_CASH_LOCATION}",
                reply_markup=keyboards.weekday_keyboard(),
            )
            return

        session.edit_mode = False
        session.editing_field = None
        await replier.ack()
        await self._show_confirmation(replier, session, edit=True)
        logger.info(f"User {replier.user_id} finished editing")

    # ============ Helpers ============

    @staticmethod
    def _location_missing(session: ReportSession) -> bool:
        report = session.report
        return (report.black_cash_amount or 0) > 0 and report.black_cash_location is None

    @staticmethod
    def _expenses_active(session: ReportSession) -> bool:
        """Check if expense buttons apply to the current position."""
        if session.edit_mode:
            return session.editing_field == EditField.EXPENSES
        return session.step == ReportStep.EXPENSES

    @staticmethod
    def _complete_expenses(session: ReportSession) -> None:
        """Close expense collection and refresh the cashbox amount."""
        session.reset_expense_input()
        update_cashbox_amount(session.report)
        session.cashbox_overridden = False
        recalculate_derived(session.report)

    async def _back_to_fields(
        self, replier: Replier, session: ReportSession, notice: str, edit: bool = False
    ) -> None:
        """Leave the edited field and show the field keyboard again."""
        session.editing_field = None
        text = f"{notice}\n\n{Prompt.EDIT_FIELD}"
        markup = keyboards.edit_fields_keyboard(session.report)
        if edit:
            await replier.edit(text, reply_markup=markup)
        else:
            await replier.answer(text, reply_markup=markup)

    async def _show_confirmation(
        self, replier: Replier, session: ReportSession, prefix: str = "", edit: bool = False
    ) -> None:
        recalculate_derived(session.report)
        session.step = ReportStep.CONFIRMATION
        text = f"{prefix}{format_report_summary(session.report)}\n\n{Prompt.CONFIRM}"
        if edit:
            await replier.edit(text, reply_markup=keyboards.confirmation_keyboard())
        else:
            await replier.answer(text, reply_markup=keyboards.confirmation_keyboard())

    def _current_prompt(self, session: ReportSession) -> tuple[str, Optional[InlineKeyboardMarkup]]:
        """Question and keyboard for the current position in the conversation."""
        report = session.report

        if session.collecting_expense:
            if session.current_expense_amount is None:
                return Prompt.EXPENSE_AMOUNT, None
            return Prompt.EXPENSE_DESCRIPTION, None

        if session.edit_mode:
            return self._edit_prompt(session)

        step = session.step
        if step == ReportStep.WHITE_CASH_AMOUNT:
            return Prompt.WHITE_CASH_AMOUNT, None
        elif step == ReportStep.BLACK_CASH_AMOUNT:
            return Prompt.BLACK_CASH_AMOUNT, None
        elif step == ReportStep.BLACK_CASH_LOCATION:
            return Prompt.BLACK_CASH_LOCATION, keyboards.weekday_keyboard()
        elif step == ReportStep.CARD_SALES_AMOUNT:
            return Prompt.CARD_SALES_AMOUNT, None
        elif step == ReportStep.EXPENSES:
            if report.expenses:
                return format_expenses_list(report), keyboards.expense_next_keyboard()
            return Prompt.EXPENSES_QUESTION, keyboards.expense_initial_keyboard()
        elif step == ReportStep.NOTES:
            return Prompt.NOTES, None
        elif step == ReportStep.CONFIRMATION:
            return (
                f"{format_report_summary(report)}\n\n{Prompt.CONFIRM}",
                keyboards.confirmation_keyboard(),
            )
        elif step == ReportStep.REPORT_DATE:
            return Prompt.REPORT_DATE, keyboards.date_keyboard(self.today())
        return REPORT_START, None

    def _edit_prompt(self, session: ReportSession) -> tuple[str, Optional[InlineKeyboardMarkup]]:
        report = session.report
        field = session.editing_field

        if field is None:
            return Prompt.EDIT_FIELD, keyboards.edit_fields_keyboard(report)
        elif field == EditField.BLACK_CASH_LOCATION:
            return Prompt.BLACK_CASH_LOCATION, keyboards.weekday_keyboard()
        elif field == EditField.REPORT_DATE:
            return Prompt.REPORT_DATE, keyboards.date_keyboard(self.today())
        elif field == EditField.EXPENSES:
            return f"{format_expenses_list(report)}\n\n{Prompt.EDIT_EXPENSES}", None
        elif field == EditField.NOTES:
            current = escape(shorten_text(report.notes, MAX_DISPLAY_NOTES_LENGTH)) if report.notes else None
            return format_current_value_message(FIELD_LABELS[field], current), None

        value: Optional[Decimal] = getattr(report, AMOUNT_FIELDS[field])
        return format_current_value_message(FIELD_LABELS[field], format_amount(value)), None

    # ============ Persistence ============

    async def _persist(self, replier: Replier, session: ReportSession) -> None:
        """Save the report, or keep it and show the reason when saving fails."""
        report = session.report
        update_cash_amount(report)
        if not session.cashbox_overridden:
            update_cashbox_amount(report)
        update_total_sales(report)

        try:
            await asyncio.to_thread(save_report_to_sheets, self.sheets, report)
        except SheetsError as e:
            logger.error(
                f"User {replier.user_id}: failed to save report "
                f"(kind={e.kind.value}, sheet={e.sheet_name}, date={e.date_string}): {e.message}"
            )
            await self._show_save_failure(replier, session, escape(sheets_error_message(e), quote=False))
            return
        except ReportValidationError as e:
            logger.error(f"User {replier.user_id}: report is not valid for saving: {e}")
            await self._show_save_failure(replier, session, f"❌ {escape(str(e), quote=False)}")
            return

        session.step = ReportStep.SAVED
        await replier.edit(
            f"{REPORT_SAVED}\n\n"
            f"📅 Date: {format_date_for_display(report.report_date)}\n"
            f"📈 Total Sales: {format_amount(report.total_sales)}"
        )
        logger.info(
            f"User {replier.user_id} saved report for {report.report_date}: "
            f"total_sales={report.total_sales}, cashbox={report.cashbox_amount}"
        )

    async def _show_save_failure(self, replier: Replier, session: ReportSession, reason: str) -> None:
        session.step = ReportStep.CONFIRMATION
        await replier.edit(
            f"{SAVE_FAILED}\n\n{reason}\n\n{format_report_summary(session.report)}",
            reply_markup=keyboards.confirmation_keyboard(),
        )
