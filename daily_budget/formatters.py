"""Human-readable formatting of amounts, dates and report summaries.

The bot sends messages with HTML parse mode, so every piece of operator text
is escaped before it is embedded.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from html import escape
from typing import Optional, Union

from daily_budget.calculations import calculate_total_expenses, validate_total_sales
from daily_budget.models import CashboxData, Expense, ReportData

CURRENCY = "RSD"

MONTH_NAMES_EN = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Display limits for operator text embedded in messages
MAX_DISPLAY_DESCRIPTION_LENGTH = 100
MAX_DISPLAY_NOTES_LENGTH = 500

Number = Union[Decimal, int, float]


def format_amount(amount: Optional[Number]) -> str:
    """Format money like ``1.234,5 RSD`` (at most two decimals)."""
    value = Decimal(str(amount if amount is not None else 0))
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer, _, fraction = f"{abs(value):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    grouped = f"{int(integer):,}".replace(",", ".")
    if fraction:
        grouped = f"{grouped},{fraction}"
    return f"{sign}{grouped} {CURRENCY}"


def format_date_for_display(day: date) -> str:
    """Format date as DD.MM.YYYY."""
    return day.strftime("%d.%m.%Y")


def format_date_for_sheets(day: date) -> str:
    """Date string as it appears in the header row of a month sheet."""
    return day.strftime("%d.%m.%Y")


def get_month_name_english(day: date) -> str:
    """Month sheet name for a date, e.g. "November"."""
    return MONTH_NAMES_EN[day.month - 1]


def shorten_text(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def _expense_label(expense: Expense) -> str:
    return escape(shorten_text(expense.description, MAX_DISPLAY_DESCRIPTION_LENGTH))


def format_expenses_list(report: ReportData) -> str:
    """Numbered list of expenses with the running total."""
    if not report.expenses:
        return "No expenses recorded"

    lines = [
        f"{idx}. {_expense_label(expense)}: {format_amount(expense.amount)}"
        for idx, expense in enumerate(report.expenses, start=1)
    ]
    return (
        f"Expenses recorded ({len(report.expenses)}):\n"
        + "\n".join(lines)
        + f"\n\nTotal: {format_amount(calculate_total_expenses(report))}"
    )


def format_report_summary(report: ReportData) -> str:
    """Full report summary shown before confirmation."""
    if report.expenses:
        expenses_text = "\n".join(
            f"• {_expense_label(expense)}: {format_amount(expense.amount)}"
            for expense in report.expenses
        )
    else:
        expenses_text = "No expenses"

    location = report.black_cash_location.value if report.black_cash_location else "N/A"
    report_date = format_date_for_display(report.report_date) if report.report_date else "Not selected"
    notes = escape(shorten_text(report.notes, MAX_DISPLAY_NOTES_LENGTH)) if report.notes else "None"

    lines = [
        "📊 Report Summary:",
        "",
        f"📅 Date: {report_date}",
        f"💰 Cash: {format_amount(report.cash_amount)}",
        f"💵 White Cash: {format_amount(report.white_cash_amount)}",
        f"🖤 Black Cash: {format_amount(report.black_cash_amount)} ({location})",
        f"💳 Card Sales: {format_amount(report.card_sales_amount)}",
        f"📦 Expenses ({len(report.expenses)} items):",
        expenses_text,
        f"🏦 Cashbox: {format_amount(report.cashbox_amount)}",
        f"📝 Notes: {notes}",
        "",
        f"📈 Total Sales: {format_amount(report.total_sales)}",
    ]

    check = validate_total_sales(report)
    if not check.is_valid:
        lines.append(f"\n⚠️ {check.reason}")

    return "\n".join(lines)


def format_cashbox_summary(cashbox: CashboxData) -> str:
    """Cashbox summary shown before confirmation."""
    day = format_date_for_display(cashbox.date) if cashbox.date else "Not selected"
    return (
        "📊 Cashbox Summary:\n\n"
        f"📅 Date: {day}\n"
        f"💰 Amount: {format_amount(cashbox.amount)}\n\n"
        "Please confirm:"
    )


def format_current_value_message(field_name: str, current_value: Optional[str]) -> str:
    """Prompt shown when a field is selected in edit mode."""
    shown = current_value if current_value is not None else "None"
    return (
        f"✏️ Current {field_name}: {shown}\n\n"
        'Enter new value or type "skip" to keep current:'
    )
