"""FSM states for bot dialogs.

Each flow uses a single state; the position inside the flow is kept in the
session model stored alongside it (see ``session.py``).
"""

from aiogram.fsm.state import State, StatesGroup


class ReportStates(StatesGroup):
    """States for daily report flow."""

    active = State()


class CashboxStates(StatesGroup):
    """States for cashbox flow."""

    active = State()


class ChecklistStates(StatesGroup):
    """States for checklist flow."""

    active = State()
