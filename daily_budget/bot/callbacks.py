"""Callback data tokens for inline keyboards.

Tokens have the form ``prefix:value``. ``decode_callback`` turns a raw token
into a ``Callback``; anything it does not recognize becomes ``Action.INVALID``
so handlers can answer it explicitly instead of guessing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from daily_budget.models import Weekday


class Action(str, Enum):
    """What a pressed button asks for."""

    WEEKDAY = "weekday"
    DATE = "date"
    EXPENSE_ADD = "expense_add"
    EXPENSE_SKIP = "expense_skip"
    EXPENSE_ANOTHER = "expense_another"
    EXPENSE_DONE = "expense_done"
    REPORT_CONFIRM = "report_confirm"
    REPORT_EDIT = "report_edit"
    REPORT_CANCEL = "report_cancel"
    EDIT_FIELD = "edit_field"
    EDIT_DONE = "edit_done"
    CHECKLIST_SELECT = "checklist_select"
    CHECKLIST_COMPLETE = "checklist_complete"
    CHECKLIST_CANCEL = "checklist_cancel"
    CASHBOX_CONFIRM = "cashbox_confirm"
    CASHBOX_CANCEL = "cashbox_cancel"
    INVALID = "invalid"


class EditField(str, Enum):
    """Report fields that can be changed in edit mode."""

    WHITE_CASH = "white_cash"
    BLACK_CASH = "black_cash"
    BLACK_CASH_LOCATION = "black_cash_location"
    CARD_SALES = "card_sales"
    EXPENSES = "expenses"
    CASHBOX = "cashbox"
    NOTES = "notes"
    REPORT_DATE = "report_date"


# Days back from today offered by the date keyboard
DATE_OFFSETS = (0, 1, 2)

WEEKDAY_PREFIX = "weekday"
DATE_PREFIX = "date"
EXPENSE_PREFIX = "expense"
REPORT_PREFIX = "report"
EDIT_PREFIX = "edit"
CHECKLIST_PREFIX = "checklist"
CASHBOX_PREFIX = "cashbox"

EXPENSE_ADD = f"{EXPENSE_PREFIX}:add"
EXPENSE_SKIP = f"{EXPENSE_PREFIX}:skip"
EXPENSE_ANOTHER = f"{EXPENSE_PREFIX}:another"
EXPENSE_DONE = f"{EXPENSE_PREFIX}:done"
REPORT_CONFIRM = f"{REPORT_PREFIX}:confirm"
REPORT_EDIT = f"{REPORT_PREFIX}:edit"
REPORT_CANCEL = f"{REPORT_PREFIX}:cancel"
EDIT_DONE = f"{EDIT_PREFIX}:done"
CHECKLIST_COMPLETE = f"{CHECKLIST_PREFIX}:complete"
CHECKLIST_CANCEL = f"{CHECKLIST_PREFIX}:cancel"
CASHBOX_CONFIRM = f"{CASHBOX_PREFIX}:confirm"
CASHBOX_CANCEL = f"{CASHBOX_PREFIX}:cancel"

_SIMPLE_ACTIONS = {
    EXPENSE_ADD: Action.EXPENSE_ADD,
    EXPENSE_SKIP: Action.EXPENSE_SKIP,
    EXPENSE_ANOTHER: Action.EXPENSE_ANOTHER,
    EXPENSE_DONE: Action.EXPENSE_DONE,
    REPORT_CONFIRM: Action.REPORT_CONFIRM,
    REPORT_EDIT: Action.REPORT_EDIT,
    REPORT_CANCEL: Action.REPORT_CANCEL,
    EDIT_DONE: Action.EDIT_DONE,
    CHECKLIST_COMPLETE: Action.CHECKLIST_COMPLETE,
    CHECKLIST_CANCEL: Action.CHECKLIST_CANCEL,
    CASHBOX_CONFIRM: Action.CASHBOX_CONFIRM,
    CASHBOX_CANCEL: Action.CASHBOX_CANCEL,
}


@dataclass(frozen=True)
class Callback:
    """Decoded callback data."""

    action: Action
    value: Optional[str] = None
    raw: str = ""

    @property
    def weekday(self) -> Optional[Weekday]:
        if self.action != Action.WEEKDAY:
            return None
        return Weekday(self.value)

    @property
    def days_ago(self) -> Optional[int]:
        if self.action != Action.DATE:
            return None
        return int(self.value)

    @property
    def edit_field(self) -> Optional[EditField]:
        if self.action != Action.EDIT_FIELD:
            return None
        return EditField(self.value)

    @property
    def index(self) -> Optional[int]:
        if self.action != Action.CHECKLIST_SELECT:
            return None
        return int(self.value)


def weekday_callback(weekday: Weekday) -> str:
    return f"{WEEKDAY_PREFIX}:{weekday.name.lower()}"


def date_callback(days_ago: int) -> str:
    return f"{DATE_PREFIX}:{days_ago}"


def edit_field_callback(field: EditField) -> str:
    return f"{EDIT_PREFIX}:{field.value}"


def checklist_select_callback(index: int) -> str:
    return f"{CHECKLIST_PREFIX}:select:{index}"


def decode_callback(data: Optional[str]) -> Callback:
    """Decode raw callback data into a ``Callback``."""
    raw = data or ""
    invalid = Callback(Action.INVALID, raw=raw)

    if raw in _SIMPLE_ACTIONS:
        return Callback(_SIMPLE_ACTIONS[raw], raw=raw)

    prefix, _, value = raw.partition(":")
    if not value:
        return invalid

    if prefix == WEEKDAY_PREFIX:
        weekday = Weekday.__members__.get(value.upper())
        if weekday is None:
            return invalid
        return Callback(Action.WEEKDAY, weekday.value, raw)

    if prefix == DATE_PREFIX:
        if not value.isdigit() or int(value) not in DATE_OFFSETS:
            return invalid
        return Callback(Action.DATE, value, raw)

    if prefix == EDIT_PREFIX:
        try:
            field = EditField(value)
        except ValueError:
            return invalid
        return Callback(Action.EDIT_FIELD, field.value, raw)

    if prefix == CHECKLIST_PREFIX:
        kind, _, index = value.partition(":")
        if kind != "select" or not index.isdigit():
            return invalid
        return Callback(Action.CHECKLIST_SELECT, index, raw)

    return invalid
