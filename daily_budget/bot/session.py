"""Per-conversation session state kept in aiogram FSM storage.

aiogram keys FSM storage by chat and user, so each session model below
belongs to exactly one conversation. Sessions are stored as JSON-compatible
dicts under a single key per flow.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from aiogram.fsm.context import FSMContext
from pydantic import BaseModel, Field

from daily_budget.bot.callbacks import EditField
from daily_budget.models import CashboxData, ReportData

REPORT_KEY = "report"
CASHBOX_KEY = "cashbox"
CHECKLIST_KEY = "checklist"


class ReportStep(str, Enum):
    """Steps of the report conversation."""

    WHITE_CASH_AMOUNT = "white_cash_amount"
    BLACK_CASH_AMOUNT = "black_cash_amount"
    BLACK_CASH_LOCATION = "black_cash_location"
    CARD_SALES_AMOUNT = "card_sales_amount"
    EXPENSES = "expenses"
    NOTES = "notes"
    CONFIRMATION = "confirmation"
    REPORT_DATE = "report_date"
    SAVED = "saved"
    CANCELLED = "cancelled"


class CashboxStep(str, Enum):
    """Steps of the cashbox conversation."""

    DATE = "date"
    AMOUNT = "amount"
    CONFIRMATION = "confirmation"
    SAVED = "saved"
    CANCELLED = "cancelled"


class ChecklistStep(str, Enum):
    """Steps of the checklist conversation."""

    SELECTING = "selecting"
    VIEWING = "viewing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReportSession(BaseModel):
    """Report being entered plus the position in the conversation."""

    report: ReportData = Field(default_factory=ReportData)
    step: ReportStep = ReportStep.WHITE_CASH_AMOUNT
    edit_mode: bool = False
    editing_field: Optional[EditField] = None
    collecting_expense: bool = False
    current_expense_amount: Optional[Decimal] = None
    cashbox_overridden: bool = False

    @property
    def finished(self) -> bool:
        return self.step in (ReportStep.SAVED, ReportStep.CANCELLED)

    def reset_expense_input(self) -> None:
        self.collecting_expense = False
        self.current_expense_amount = None


class CashboxSession(BaseModel):
    """Cashbox count being entered."""

    cashbox: CashboxData = Field(default_factory=CashboxData)
    step: CashboxStep = CashboxStep.DATE

    @property
    def finished(self) -> bool:
        return self.step in (CashboxStep.SAVED, CashboxStep.CANCELLED)


class ChecklistSession(BaseModel):
    """Checklist names offered to the operator and the one being viewed."""

    names: list[str] = Field(default_factory=list)
    selected: Optional[str] = None
    step: ChecklistStep = ChecklistStep.SELECTING

    @property
    def finished(self) -> bool:
        return self.step in (ChecklistStep.COMPLETED, ChecklistStep.CANCELLED)


async def load_report_session(state: FSMContext) -> Optional[ReportSession]:
    data = await state.get_data()
    raw = data.get(REPORT_KEY)
    if raw is None:
        return None
    return ReportSession.model_validate(raw)


async def load_cashbox_session(state: FSMContext) -> Optional[CashboxSession]:
    data = await state.get_data()
    raw = data.get(CASHBOX_KEY)
    if raw is None:
        return None
    return CashboxSession.model_validate(raw)


async def load_checklist_session(state: FSMContext) -> Optional[ChecklistSession]:
    data = await state.get_data()
    raw = data.get(CHECKLIST_KEY)
    if raw is None:
        return None
    return ChecklistSession.model_validate(raw)


async def save_session(state: FSMContext, key: str, session: BaseModel) -> None:
    """Store a session under ``key``, replacing the previous value."""
    await state.update_data({key: session.model_dump(mode="json")})


async def drop_session(state: FSMContext, key: str) -> None:
    """Forget a finished session and leave the flow state.

    Sessions of other flows stay in storage, so an interrupted report can be
    resumed after a cashbox entry.
    """
    data = await state.get_data()
    data.pop(key, None)
    await state.set_data(data)
    await state.set_state(None)


async def store_session(state: FSMContext, key: str, session) -> None:
    """Save an ongoing session, drop a finished one."""
    if session.finished:
        await drop_session(state, key)
    else:
        await save_session(state, key, session)
