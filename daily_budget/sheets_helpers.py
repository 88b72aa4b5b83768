"""Saving reports and cashbox counts into month sheets.

Month sheets are named after the month ("November"). Row 6 holds the dates of
the month as ``dd.MM.yyyy`` strings, one column per day. A report writes into
that day's column:

* row 13 - white (fiscal) cash
* row 14 - black cash
* row 16 - card sales
* rows 19-28 - up to 10 expenses, amount as value and description as note
"""

import logging
from datetime import date
from decimal import Decimal

from daily_budget.formatters import format_date_for_sheets, get_month_name_english
from daily_budget.models import (
    MAX_EXPENSE_DESCRIPTION_LENGTH,
    MAX_EXPENSES,
    CashboxData,
    Expense,
    ReportData,
)
from daily_budget.sheets import CellUpdate, SheetsService
from daily_budget.sheets_errors import SheetsError

logger = logging.getLogger(__name__)

WHITE_CASH_ROW = 13
BLACK_CASH_ROW = 14
CARD_SALES_ROW = 16
EXPENSES_START_ROW = 19
EXPENSES_END_ROW = 28

# Cashbox counts go below the expense block
DEFAULT_CASHBOX_ROW = 30


class ReportValidationError(ValueError):
    """Report data is not complete or not consistent enough to be saved."""


def _require_amount(value, field_name: str) -> None:
    if value is None:
        raise ReportValidationError(f"{field_name} is required")
    if not value.is_finite():
        raise ReportValidationError(f"{field_name} must be a valid number")
    if value < 0:
        raise ReportValidationError(f"{field_name} cannot be negative")


def validate_report_data(report: ReportData) -> None:
    """Check report data before saving.

    Raises:
        ReportValidationError: If a required field is missing or invalid.
    """
    if report.report_date is None:
        raise ReportValidationError("Report date is required")
    _require_amount(report.white_cash_amount, "White cash amount")
    _require_amount(report.black_cash_amount, "Black cash amount")
    _require_amount(report.card_sales_amount, "Card sales amount")
    if report.black_cash_amount > 0 and report.black_cash_location is None:
        raise ReportValidationError("Black cash location is required when black cash is not zero")

    if len(report.expenses) > MAX_EXPENSES:
        raise ReportValidationError(
            f"Maximum {MAX_EXPENSES} expenses allowed, got {len(report.expenses)}"
        )
    for idx, expense in enumerate(report.expenses):
        if expense.amount <= 0:
            raise ReportValidationError(f"Expense at index {idx}: amount must be greater than 0")


def create_cell_updates(column: str, report: ReportData) -> list[CellUpdate]:
    """Cell updates for the main report values (no expenses)."""
    return [
        CellUpdate(row=WHITE_CASH_ROW, column=column, value=report.white_cash_amount),
        CellUpdate(row=BLACK_CASH_ROW, column=column, value=report.black_cash_amount),
        CellUpdate(row=CARD_SALES_ROW, column=column, value=report.card_sales_amount),
    ]


def create_expense_cell_updates(column: str, expenses: list[Expense]) -> list[CellUpdate]:
    """Cell updates for all expense slots.

    Always returns MAX_EXPENSES updates: filled slots carry the amount and the
    description as a note, the rest are cleared so nothing stale remains from
    an earlier save of the same day.
    """
    updates = []
    for i in range(MAX_EXPENSES):
        row = EXPENSES_START_ROW + i
        if i >= len(expenses):
            updates.append(CellUpdate(row=row, column=column, value=""))
            continue

        expense = expenses[i]
        description = expense.description.strip()
        truncated = len(description) > MAX_EXPENSE_DESCRIPTION_LENGTH
        if truncated:
            logger.warning(
                f"Expense description truncated: index={i}, original_length={len(description)}, "
                f"truncated_length={MAX_EXPENSE_DESCRIPTION_LENGTH}, cell={column}{row}"
            )
            description = description[:MAX_EXPENSE_DESCRIPTION_LENGTH]

        logger.debug(
            f"Preparing expense cell update: index={i}, amount={expense.amount}, "
            f"description_length={len(description)}, cell={column}{row}"
        )
        updates.append(
            CellUpdate(
                row=row,
                column=column,
                value=expense.amount,
                note=description or None,
                truncated=truncated,
            )
        )
    return updates


def locate_day_column(service: SheetsService, day: date) -> tuple[str, str]:
    """Find the month sheet and the column for a day.

    Returns:
        Tuple of (sheet_name, column_letter).

    Raises:
        SheetsError: If the sheet or the date column is missing.
    """
    sheet_name = get_month_name_english(day)
    date_string = format_date_for_sheets(day)

    if not service.sheet_exists(sheet_name):
        raise SheetsError.sheet_not_found(sheet_name)

    column = service.find_date_column(sheet_name, date_string)
    if not column:
        raise SheetsError.date_column_not_found(sheet_name, date_string)
    return sheet_name, column


def save_report_to_sheets(service: SheetsService, report: ReportData) -> list[CellUpdate]:
    """Save report values and expenses into the report date's column.

    All updates are sent in a single batch request.

    Returns:
        The cell updates that were written.
    """
    validate_report_data(report)

    sheet_name, column = locate_day_column(service, report.report_date)
    logger.info(
        f"Saving report to Google Sheets: sheet={sheet_name}, column={column}, "
        f"white_cash={report.white_cash_amount}, black_cash={report.black_cash_amount}, "
        f"card_sales={report.card_sales_amount}, expenses={len(report.expenses)}"
    )

    main_updates = create_cell_updates(column, report)
    expense_updates = create_expense_cell_updates(column, report.expenses)
    all_updates = main_updates + expense_updates

    if not report.expenses:
        logger.info("No expenses to save, clearing all expense cells")

    service.update_cells_with_notes(sheet_name, all_updates)

    total_expenses = sum((e.amount for e in report.expenses), Decimal("0"))
    logger.info(
        f"Successfully saved report to {sheet_name}: cells={[u.a1 for u in all_updates]}, "
        f"total_expenses={total_expenses}"
    )
    return all_updates


def save_cashbox_to_sheets(
    service: SheetsService,
    cashbox: CashboxData,
    cashbox_row: int = DEFAULT_CASHBOX_ROW,
) -> CellUpdate:
    """Save a cashbox count into its day's column."""
    if cashbox.date is None:
        raise ReportValidationError("Cashbox date is required")
    if cashbox.amount is None:
        raise ReportValidationError("Cashbox amount is required")
    if cashbox.amount < 0:
        raise ReportValidationError("Cashbox amount cannot be negative")

    sheet_name, column = locate_day_column(service, cashbox.date)
    update = CellUpdate(row=cashbox_row, column=column, value=cashbox.amount)
    service.update_cells(sheet_name, [update])

    logger.info(f"Saved cashbox amount {cashbox.amount} to {sheet_name}!{update.a1}")
    return update
