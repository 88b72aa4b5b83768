"""Derived report values: cash, expenses, cashbox and total sales."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from daily_budget.models import ReportData

NEGATIVE_TOTAL_REASON = "Total sales cannot be negative. Please check your expenses."

ZERO = Decimal("0")


def _or_zero(value: Optional[Decimal]) -> Decimal:
    return value if value is not None else ZERO


def calculate_cash_amount(report: ReportData) -> Decimal:
    """White cash + black cash, unset amounts count as zero."""
    return _or_zero(report.white_cash_amount) + _or_zero(report.black_cash_amount)


def calculate_total_expenses(report: ReportData) -> Decimal:
    """Sum of all expense amounts."""
    return sum((expense.amount for expense in report.expenses), ZERO)


def calculate_cashbox_amount(report: ReportData) -> Decimal:
    """Money expected in the cashbox once expenses are paid out."""
    return (
        calculate_cash_amount(report)
        + _or_zero(report.card_sales_amount)
        - calculate_total_expenses(report)
    )


def calculate_total_sales(report: ReportData) -> Decimal:
    """Cash + card sales - expenses.

    Same formula as the cashbox amount. The two are stored separately because
    the cashbox amount can be overridden by the operator while total sales is
    always recomputed.
    """
    return (
        calculate_cash_amount(report)
        + _or_zero(report.card_sales_amount)
        - calculate_total_expenses(report)
    )


def update_cash_amount(report: ReportData) -> None:
    report.cash_amount = calculate_cash_amount(report)


def update_cashbox_amount(report: ReportData) -> None:
    report.cashbox_amount = calculate_cashbox_amount(report)


def update_total_sales(report: ReportData) -> None:
    """Calculate and store total sales in the report."""
    report.total_sales = calculate_total_sales(report)


def recalculate_derived(report: ReportData) -> None:
    """Refresh cash amount and total sales."""
    update_cash_amount(report)
    update_total_sales(report)


@dataclass(frozen=True)
class TotalSalesBreakdown:
    """Components of the total sales calculation."""

    cash_amount: Decimal
    white_cash_amount: Decimal
    black_cash_amount: Decimal
    card_sales_amount: Decimal
    total_expenses: Decimal
    total_sales: Decimal


def get_total_sales_breakdown(report: ReportData) -> TotalSalesBreakdown:
    """Get individual components of the total sales calculation."""
    return TotalSalesBreakdown(
        cash_amount=calculate_cash_amount(report),
        white_cash_amount=_or_zero(report.white_cash_amount),
        black_cash_amount=_or_zero(report.black_cash_amount),
        card_sales_amount=_or_zero(report.card_sales_amount),
        total_expenses=calculate_total_expenses(report),
        total_sales=calculate_total_sales(report),
    )


@dataclass(frozen=True)
class TotalSalesCheck:
    """Soft check of the total sales value."""

    is_valid: bool
    total_sales: Decimal
    reason: Optional[str] = None


def validate_total_sales(report: ReportData) -> TotalSalesCheck:
    """Flag a negative total so the operator can re-check expenses.

    This never blocks the report.
    """
    total_sales = calculate_total_sales(report)
    if total_sales < 0:
        return TotalSalesCheck(is_valid=False, total_sales=total_sales, reason=NEGATIVE_TOTAL_REASON)
    return TotalSalesCheck(is_valid=True, total_sales=total_sales)
