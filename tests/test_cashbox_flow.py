"""Tests for the cashbox conversation."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from conftest import TODAY
from daily_budget.bot import keyboards
from daily_budget.bot.callbacks import decode_callback
from daily_budget.bot.scenes.cashbox import (
    CASHBOX_CANCELLED,
    CASHBOX_DATE,
    CASHBOX_SAVED,
    SAVE_FAILED,
    USE_BUTTONS_CONFIRM,
    USE_BUTTONS_DATE,
    CashboxFlow,
)
from daily_budget.bot.session import CashboxSession, CashboxStep
from daily_budget.sheets_errors import SheetsError, SheetsErrorKind


@pytest.fixture
def flow(sheets):
    return CashboxFlow(sheets, cashbox_row=30, today=lambda: TODAY)


def type_text(flow, replier, session, text):
    asyncio.run(flow.handle_text(replier, session, text))


def press(flow, replier, session, data):
    asyncio.run(flow.handle_callback(replier, session, decode_callback(data)))


class TestCashboxFlow:
    """Tests for CashboxFlow."""

    def test_date_then_amount(self, flow, replier, sheets):
        session = asyncio.run(flow.enter(replier))
        assert replier.answers[-1] == (CASHBOX_DATE, keyboards.date_keyboard(TODAY))

        press(flow, replier, session, "date:0")
        assert session.step == CashboxStep.AMOUNT
        assert session.cashbox.date == TODAY

        type_text(flow, replier, session, "5000")
        assert session.step == CashboxStep.CONFIRMATION
        assert "💰 Amount: 5.000 RSD" in replier.last_text
        assert replier.last_markup == keyboards.cashbox_confirm_keyboard()

        press(flow, replier, session, "cashbox:confirm")
        assert session.step == CashboxStep.SAVED
        assert session.finished
        assert replier.last_text.startswith(CASHBOX_SAVED)

        sheet_name, updates = sheets.updates[0]
        assert sheet_name == "November"
        assert [(u.a1, u.value) for u in updates] == [("P30", Decimal("5000"))]

    def test_amount_before_date(self, flow, replier):
        session = CashboxSession()
        type_text(flow, replier, session, "1200")
        assert session.cashbox.amount == Decimal("1200")
        assert session.step == CashboxStep.DATE
        assert USE_BUTTONS_DATE in replier.last_text

        press(flow, replier, session, "date:1")
        assert session.step == CashboxStep.CONFIRMATION
        assert session.cashbox.date == date(2025, 11, 14)

    def test_text_at_confirmation(self, flow, replier):
        session = CashboxSession(step=CashboxStep.CONFIRMATION)
        session.cashbox.date = TODAY
        session.cashbox.amount = Decimal("10")
        type_text(flow, replier, session, "20")
        assert session.cashbox.amount == Decimal("10")
        assert replier.last_text == USE_BUTTONS_CONFIRM

    def test_negative_amount(self, flow, replier):
        session = CashboxSession(step=CashboxStep.AMOUNT)
        type_text(flow, replier, session, "-1")
        assert session.cashbox.amount is None
        assert "cannot be negative" in replier.last_text

    def test_confirm_incomplete(self, flow, replier, sheets):
        session = CashboxSession(step=CashboxStep.AMOUNT)
        press(flow, replier, session, "cashbox:confirm")
        assert replier.acks == ["Invalid cashbox data"]
        assert sheets.updates == []

    def test_save_failure_keeps_entry(self, flow, replier, sheets):
        sheets.fail_with = SheetsError(SheetsErrorKind.PERMISSION_DENIED, "forbidden")
        session = CashboxSession(step=CashboxStep.CONFIRMATION)
        session.cashbox.date = TODAY
        session.cashbox.amount = Decimal("10")

        press(flow, replier, session, "cashbox:confirm")
        assert session.step == CashboxStep.CONFIRMATION
        assert replier.last_text.startswith(SAVE_FAILED)
        assert "Permission denied" in replier.last_text
        assert replier.last_markup == keyboards.cashbox_confirm_keyboard()

    def test_cancel_button(self, flow, replier):
        session = CashboxSession()
        press(flow, replier, session, "cashbox:cancel")
        assert session.step == CashboxStep.CANCELLED
        assert replier.last_text == CASHBOX_CANCELLED

    def test_report_buttons_are_ignored(self, flow, replier):
        session = CashboxSession()
        press(flow, replier, session, "report:confirm")
        assert replier.acks == ["Unknown action"]
        assert session.step == CashboxStep.DATE
