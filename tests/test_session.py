"""Tests for session storage in aiogram FSM context."""

import asyncio
from datetime import date
from decimal import Decimal

from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from daily_budget.bot.callbacks import EditField
from daily_budget.bot.session import (
    CASHBOX_KEY,
    REPORT_KEY,
    CashboxSession,
    ReportSession,
    ReportStep,
    drop_session,
    load_cashbox_session,
    load_report_session,
    save_session,
    store_session,
)
from daily_budget.bot.states import ReportStates
from daily_budget.models import Expense, Weekday


def make_state() -> FSMContext:
    return FSMContext(storage=MemoryStorage(), key=StorageKey(bot_id=1, chat_id=10, user_id=10))


class TestSessionStorage:
    """Tests for saving and loading sessions."""

    def test_report_session_survives_storage(self):
        async def scenario():
            state = make_state()
            session = ReportSession(step=ReportStep.EXPENSES, edit_mode=True, editing_field=EditField.NOTES)
            session.report.report_date = date(2025, 11, 15)
            session.report.black_cash_amount = Decimal("500.50")
            session.report.black_cash_location = Weekday.SUNDAY
            session.report.expenses.append(Expense(amount=Decimal("300"), description="Milk"))
            await save_session(state, REPORT_KEY, session)
            return await load_report_session(state)

        loaded = asyncio.run(scenario())
        assert loaded.step == ReportStep.EXPENSES
        assert loaded.editing_field == EditField.NOTES
        assert loaded.report.report_date == date(2025, 11, 15)
        assert loaded.report.black_cash_amount == Decimal("500.50")
        assert loaded.report.black_cash_location == Weekday.SUNDAY
        assert loaded.report.expenses[0].description == "Milk"

    def test_missing_session(self):
        assert asyncio.run(load_report_session(make_state())) is None

    def test_finished_session_dropped_others_kept(self):
        async def scenario():
            state = make_state()
            await state.set_state(ReportStates.active)
            await save_session(state, REPORT_KEY, ReportSession(step=ReportStep.NOTES))
            await save_session(state, CASHBOX_KEY, CashboxSession())

            report = await load_report_session(state)
            report.step = ReportStep.SAVED
            await store_session(state, REPORT_KEY, report)
            return (
                await load_report_session(state),
                await load_cashbox_session(state),
                await state.get_state(),
            )

        report, cashbox, current_state = asyncio.run(scenario())
        assert report is None
        assert cashbox is not None
        assert current_state is None

    def test_drop_keeps_other_flow(self):
        async def scenario():
            state = make_state()
            await save_session(state, REPORT_KEY, ReportSession(step=ReportStep.CARD_SALES_AMOUNT))
            await save_session(state, CASHBOX_KEY, CashboxSession())
            await drop_session(state, CASHBOX_KEY)
            return await load_report_session(state), await load_cashbox_session(state)

        report, cashbox = asyncio.run(scenario())
        assert report.step == ReportStep.CARD_SALES_AMOUNT
        assert cashbox is None
