"""Keyboard layouts for the bot."""

from datetime import date, timedelta

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from daily_budget.bot import callbacks
from daily_budget.bot.callbacks import DATE_OFFSETS, EditField
from daily_budget.formatters import format_amount, format_date_for_display
from daily_budget.models import ReportData, Weekday


# Button texts
class ButtonText:
    """Button text constants."""

    # Expenses
    ADD_EXPENSE = "➕ Add Expense"
    SKIP_EXPENSES = "⏭️ Skip Expenses"
    ADD_ANOTHER_EXPENSE = "➕ Add Another"
    DONE_EXPENSES = "✅ Done"

    # Confirmation
    CONFIRM = "✅ Confirm"
    EDIT = "✏️ Edit"
    CANCEL = "❌ Cancel"

    # Dates
    TODAY = "Today"
    YESTERDAY = "Yesterday"
    TWO_DAYS_AGO = "2 days ago"

    # Edit mode
    WHITE_CASH = "💵 White Cash"
    BLACK_CASH = "🖤 Black Cash"
    BLACK_CASH_LOCATION = "📅 Black Cash Location"
    CARD_SALES = "💳 Card Sales"
    EXPENSES = "📦 Expenses"
    CASHBOX = "🏦 Cashbox"
    NOTES = "📝 Notes"
    REPORT_DATE = "📅 Report Date"
    DONE_EDITING = "✅ Done Editing"

    # Checklist
    CHECKLIST_DONE = "✅ Done"
    CHECKLIST_CANCEL = "❌ Cancel"


DATE_LABELS = {
    0: ButtonText.TODAY,
    1: ButtonText.YESTERDAY,
    2: ButtonText.TWO_DAYS_AGO,
}


def weekday_keyboard() -> InlineKeyboardMarkup:
    """Create weekday selection inline keyboard (two per row)."""
    buttons = [
        InlineKeyboardButton(text=day.value, callback_data=callbacks.weekday_callback(day))
        for day in Weekday
    ]
    rows = [buttons[i : i + 2] for i in range(0, len(buttons), 2)]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def expense_initial_keyboard() -> InlineKeyboardMarkup:
    """Create the "any expenses?" inline keyboard."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=ButtonText.ADD_EXPENSE, callback_data=callbacks.EXPENSE_ADD),
                InlineKeyboardButton(text=ButtonText.SKIP_EXPENSES, callback_data=callbacks.EXPENSE_SKIP),
            ],
        ]
    )


def expense_next_keyboard() -> InlineKeyboardMarkup:
    """Create the keyboard shown after an expense was recorded."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=ButtonText.ADD_ANOTHER_EXPENSE, callback_data=callbacks.EXPENSE_ANOTHER
                ),
                InlineKeyboardButton(text=ButtonText.DONE_EXPENSES, callback_data=callbacks.EXPENSE_DONE),
            ],
        ]
    )


def confirmation_keyboard() -> InlineKeyboardMarkup:
    """Create report confirmation inline keyboard."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=ButtonText.CONFIRM, callback_data=callbacks.REPORT_CONFIRM),
                InlineKeyboardButton(text=ButtonText.EDIT, callback_data=callbacks.REPORT_EDIT),
            ],
            [
                InlineKeyboardButton(text=ButtonText.CANCEL, callback_data=callbacks.REPORT_CANCEL),
            ],
        ]
    )


def date_keyboard(today: date) -> InlineKeyboardMarkup:
    """Create date selection inline keyboard.

    Args:
        today: Reference date, button labels show the resulting dates.
    """
    buttons = []
    for days_ago in DATE_OFFSETS:
        day = today - timedelta(days=days_ago)
        buttons.append([
            InlineKeyboardButton(
                text=f"{DATE_LABELS[days_ago]} ({format_date_for_display(day)})",
                callback_data=callbacks.date_callback(days_ago),
            )
        ])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def _edit_button(text: str, field: EditField) -> list[InlineKeyboardButton]:
    return [InlineKeyboardButton(text=text, callback_data=callbacks.edit_field_callback(field))]


def edit_fields_keyboard(report: ReportData) -> InlineKeyboardMarkup:
    """Create edit mode keyboard with current values in button labels.

    Cash is derived from white and black cash and has no button of its own.
    """
    report_date = format_date_for_display(report.report_date) if report.report_date else "not set"
    buttons = [
        _edit_button(
            f"{ButtonText.WHITE_CASH} ({format_amount(report.white_cash_amount)})", EditField.WHITE_CASH
        ),
        _edit_button(
            f"{ButtonText.BLACK_CASH} ({format_amount(report.black_cash_amount)})", EditField.BLACK_CASH
        ),
    ]

    if report.black_cash_amount and report.black_cash_amount > 0:
        location = report.black_cash_location.value if report.black_cash_location else "None"
        buttons.append(
            _edit_button(f"{ButtonText.BLACK_CASH_LOCATION} ({location})", EditField.BLACK_CASH_LOCATION)
        )

    buttons.extend([
        _edit_button(
            f"{ButtonText.CARD_SALES} ({format_amount(report.card_sales_amount)})", EditField.CARD_SALES
        ),
        _edit_button(f"{ButtonText.EXPENSES} ({len(report.expenses)} items)", EditField.EXPENSES),
        _edit_button(f"{ButtonText.CASHBOX} ({format_amount(report.cashbox_amount)})", EditField.CASHBOX),
        _edit_button(f"{ButtonText.NOTES} {'(set)' if report.notes else '(none)'}", EditField.NOTES),
        _edit_button(f"{ButtonText.REPORT_DATE} ({report_date})", EditField.REPORT_DATE),
        [InlineKeyboardButton(text=ButtonText.DONE_EDITING, callback_data=callbacks.EDIT_DONE)],
    ])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def cashbox_confirm_keyboard() -> InlineKeyboardMarkup:
    """Create cashbox confirmation inline keyboard."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=ButtonText.CONFIRM, callback_data=callbacks.CASHBOX_CONFIRM),
                InlineKeyboardButton(text=ButtonText.CANCEL, callback_data=callbacks.CASHBOX_CANCEL),
            ],
        ]
    )


def checklist_list_keyboard(names: list[str]) -> InlineKeyboardMarkup:
    """Create checklist selection keyboard, one checklist per row."""
    buttons = [
        [InlineKeyboardButton(text=name, callback_data=callbacks.checklist_select_callback(idx))]
        for idx, name in enumerate(names)
    ]
    buttons.append(
        [InlineKeyboardButton(text=ButtonText.CHECKLIST_CANCEL, callback_data=callbacks.CHECKLIST_CANCEL)]
    )
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def checklist_actions_keyboard() -> InlineKeyboardMarkup:
    """Create Done/Cancel keyboard for the last checklist message."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=ButtonText.CHECKLIST_DONE, callback_data=callbacks.CHECKLIST_COMPLETE
                ),
                InlineKeyboardButton(
                    text=ButtonText.CHECKLIST_CANCEL, callback_data=callbacks.CHECKLIST_CANCEL
                ),
            ],
        ]
    )
