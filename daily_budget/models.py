"""Data models for daily reports, cashbox entries and checklists."""

import datetime
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# Maximum number of expenses per report (rows 19-28 of a month sheet)
MAX_EXPENSES = 10

# Longer descriptions are cut before they are written as cell notes
MAX_EXPENSE_DESCRIPTION_LENGTH = 1000


class Weekday(str, Enum):
    """Weekday labels used for the black cash location."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class Expense(BaseModel):
    """Single expense line of a daily report."""

    amount: Decimal = Field(gt=0, description="Expense amount")
    description: str = Field(min_length=1, description="What the money was spent on")


class ReportData(BaseModel):
    """Daily report assembled step by step in the report conversation."""

    report_date: Optional[date] = Field(default=None, description="Day the report belongs to")
    white_cash_amount: Optional[Decimal] = Field(default=None, description="Fiscal cash")
    black_cash_amount: Optional[Decimal] = Field(default=None, description="Non-fiscal cash")
    black_cash_location: Optional[Weekday] = Field(
        default=None, description="Weekday envelope the black cash was put into"
    )
    card_sales_amount: Optional[Decimal] = Field(default=None, description="Card sales")
    expenses: list[Expense] = Field(default_factory=list, description="Expenses paid from the till")
    cashbox_amount: Optional[Decimal] = Field(
        default=None, description="Money left in the cashbox after expenses"
    )
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    cash_amount: Optional[Decimal] = Field(
        default=None, description="White cash + black cash (derived)"
    )
    total_sales: Optional[Decimal] = Field(
        default=None, description="Cash + card sales - expenses (derived)"
    )


class CashboxData(BaseModel):
    """Cashbox amount for a given day."""

    date: Optional[datetime.date] = Field(default=None, description="Day of the cashbox count")
    amount: Optional[Decimal] = Field(default=None, ge=0, description="Counted amount")

    @property
    def is_complete(self) -> bool:
        return self.date is not None and self.amount is not None


class ChecklistItem(BaseModel):
    """Single checklist line."""

    text: str


class ChecklistCategory(BaseModel):
    """Named group of checklist items."""

    name: str
    items: list[ChecklistItem] = Field(default_factory=list)


class Checklist(BaseModel):
    """Checklist loaded from one sheet of the checklist spreadsheet."""

    name: str
    categories: list[ChecklistCategory] = Field(default_factory=list)
    items_without_category: list[ChecklistItem] = Field(default_factory=list)
