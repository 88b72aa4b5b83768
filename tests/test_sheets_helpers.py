"""Tests for writing reports and cashbox counts into month sheets."""

from datetime import date
from decimal import Decimal

import pytest

from daily_budget.models import CashboxData, Expense, ReportData, Weekday
from daily_budget.sheets_errors import SheetsError, SheetsErrorKind
from daily_budget.sheets_helpers import (
    EXPENSES_START_ROW,
    ReportValidationError,
    create_cell_updates,
    create_expense_cell_updates,
    locate_day_column,
    save_cashbox_to_sheets,
    save_report_to_sheets,
    validate_report_data,
)


def make_report(**overrides) -> ReportData:
    values = dict(
        report_date=date(2025, 11, 3),
        white_cash_amount=Decimal("1000"),
        black_cash_amount=Decimal("500"),
        black_cash_location=Weekday.MONDAY,
        card_sales_amount=Decimal("1000"),
        expenses=[Expense(amount=Decimal("300"), description="Milk")],
    )
    values.update(overrides)
    return ReportData(**values)


class TestValidateReportData:
    """Tests for validate_report_data."""

    def test_complete_report(self):
        validate_report_data(make_report())

    def test_missing_date(self):
        with pytest.raises(ReportValidationError, match="Report date is required"):
            validate_report_data(make_report(report_date=None))

    def test_missing_amount(self):
        with pytest.raises(ReportValidationError, match="Card sales amount is required"):
            validate_report_data(make_report(card_sales_amount=None))

    def test_negative_amount(self):
        with pytest.raises(ReportValidationError, match="cannot be negative"):
            validate_report_data(make_report(white_cash_amount=Decimal("-1")))

    def test_black_cash_without_location(self):
        with pytest.raises(ReportValidationError, match="Black cash location is required"):
            validate_report_data(make_report(black_cash_location=None))

    def test_zero_black_cash_needs_no_location(self):
        validate_report_data(make_report(black_cash_amount=Decimal("0"), black_cash_location=None))

    def test_too_many_expenses(self):
        expenses = [Expense(amount=Decimal("1"), description=f"item {i}") for i in range(11)]
        with pytest.raises(ReportValidationError, match="Maximum 10 expenses"):
            validate_report_data(make_report(expenses=expenses))


class TestCellUpdates:
    """Tests for building cell updates."""

    def test_main_values(self):
        updates = create_cell_updates("D", make_report())
        assert [(u.a1, u.value) for u in updates] == [
            ("D13", Decimal("1000")),
            ("D14", Decimal("500")),
            ("D16", Decimal("1000")),
        ]

    def test_expense_slots_always_ten(self):
        expenses = [
            Expense(amount=Decimal("500"), description=" Bread "),
            Expense(amount=Decimal("300"), description="Ice"),
        ]
        updates = create_expense_cell_updates("D", expenses)
        assert len(updates) == 10
        assert [u.a1 for u in updates] == [f"D{row}" for row in range(19, 29)]
        assert (updates[0].value, updates[0].note) == (Decimal("500"), "Bread")
        assert (updates[1].value, updates[1].note) == (Decimal("300"), "Ice")
        assert all(u.value == "" and u.note is None for u in updates[2:])

    def test_long_description_truncated(self, caplog):
        expenses = [Expense(amount=Decimal("10"), description="x" * 1500)]
        updates = create_expense_cell_updates("B", expenses)
        assert len(updates[0].note) == 1000
        assert updates[0].truncated
        assert "truncated" in caplog.text


class TestLocateDayColumn:
    """Tests for locate_day_column."""

    def test_found(self, sheets):
        assert locate_day_column(sheets, date(2025, 11, 3)) == ("November", "D")

    def test_missing_month_sheet(self, sheets):
        with pytest.raises(SheetsError) as exc_info:
            locate_day_column(sheets, date(2025, 12, 1))
        assert exc_info.value.kind == SheetsErrorKind.SHEET_NOT_FOUND
        assert exc_info.value.sheet_name == "December"

    def test_missing_date(self, sheets):
        sheets.dates["November"] = ["01.11.2025"]
        with pytest.raises(SheetsError) as exc_info:
            locate_day_column(sheets, date(2025, 11, 3))
        assert exc_info.value.kind == SheetsErrorKind.DATE_COLUMN_NOT_FOUND
        assert exc_info.value.date_string == "03.11.2025"


class TestSaveReport:
    """Tests for save_report_to_sheets."""

    def test_single_batch(self, sheets):
        updates = save_report_to_sheets(sheets, make_report())
        assert len(sheets.updates_with_notes) == 1
        sheet_name, written = sheets.updates_with_notes[0]
        assert sheet_name == "November"
        assert written == updates
        assert len(written) == 13
        expense = next(u for u in written if u.row == EXPENSES_START_ROW)
        assert (expense.a1, expense.value, expense.note) == ("D19", Decimal("300"), "Milk")

    def test_no_expenses_clears_slots(self, sheets):
        updates = save_report_to_sheets(sheets, make_report(expenses=[]))
        assert all(u.value == "" for u in updates[3:])

    def test_invalid_report_not_written(self, sheets):
        with pytest.raises(ReportValidationError):
            save_report_to_sheets(sheets, make_report(report_date=None))
        assert sheets.updates_with_notes == []

    def test_date_not_found_not_written(self, sheets):
        sheets.dates["November"] = ["01.11.2025"]
        with pytest.raises(SheetsError):
            save_report_to_sheets(sheets, make_report())
        assert sheets.updates_with_notes == []


class TestSaveCashbox:
    """Tests for save_cashbox_to_sheets."""

    def test_writes_configured_row(self, sheets):
        update = save_cashbox_to_sheets(
            sheets, CashboxData(date=date(2025, 11, 3), amount=Decimal("5000")), cashbox_row=31
        )
        assert update.a1 == "D31"
        assert sheets.updates == [("November", [update])]

    def test_default_row(self, sheets):
        update = save_cashbox_to_sheets(sheets, CashboxData(date=date(2025, 11, 1), amount=Decimal("0")))
        assert update.a1 == "B30"

    def test_incomplete(self, sheets):
        with pytest.raises(ReportValidationError):
            save_cashbox_to_sheets(sheets, CashboxData(amount=Decimal("1")))
        with pytest.raises(ReportValidationError):
            save_cashbox_to_sheets(sheets, CashboxData(date=date(2025, 11, 1)))
        assert sheets.updates == []
