"""Shared fakes for bot flow and Sheets tests."""

from datetime import date
from typing import Optional

import pytest

from daily_budget.bot.replies import Replier
from daily_budget.models import Checklist
from daily_budget.sheets import index_to_column_letter
from daily_budget.sheets_errors import SheetsError

TODAY = date(2025, 11, 15)


class FakeReplier(Replier):
    """Replier that records everything a flow sends."""

    def __init__(self, user_id: int = 42):
        self.user_id = user_id
        self.answers: list[tuple[str, object]] = []
        self.edits: list[tuple[str, object]] = []
        self.acks: list[Optional[str]] = []
        # answers and edits in the order they were sent
        self.sent: list[tuple[str, object]] = []

    async def answer(self, text, reply_markup=None):
        self.answers.append((text, reply_markup))
        self.sent.append((text, reply_markup))

    async def edit(self, text, reply_markup=None):
        self.edits.append((text, reply_markup))
        self.sent.append((text, reply_markup))

    async def ack(self, text=None):
        self.acks.append(text)

    @property
    def last_text(self) -> str:
        return self.sent[-1][0] if self.sent else ""

    @property
    def last_markup(self):
        return self.sent[-1][1] if self.sent else None


class FakeSheetsService:
    """In-memory stand-in for ``SheetsService``.

    ``dates`` maps sheet names to the date strings of their header row. The
    first date sits in column B, like in the real month sheets.
    """

    def __init__(self, dates: Optional[dict[str, list[str]]] = None, checklists=None):
        self.dates = dates or {}
        self.checklists: dict[str, Checklist] = checklists or {}
        self.updates_with_notes: list[tuple[str, list]] = []
        self.updates: list[tuple[str, list]] = []
        self.fail_with: Optional[Exception] = None

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_sheet_names(self) -> list[str]:
        self._maybe_fail()
        return list(self.dates) + list(self.checklists)

    def sheet_exists(self, sheet_name: str) -> bool:
        return sheet_name in self.get_sheet_names()

    def find_date_column(self, sheet_name: str, date_string: str) -> Optional[str]:
        header = self.dates.get(sheet_name, [])
        if date_string not in header:
            return None
        return index_to_column_letter(header.index(date_string) + 1)

    def update_cells_with_notes(self, sheet_name, updates):
        self._maybe_fail()
        self.updates_with_notes.append((sheet_name, updates))

    def update_cells(self, sheet_name, updates):
        self._maybe_fail()
        self.updates.append((sheet_name, updates))

    def get_checklist_data(self, sheet_name: str) -> Checklist:
        self._maybe_fail()
        if sheet_name not in self.checklists:
            raise SheetsError.sheet_not_found(sheet_name)
        return self.checklists[sheet_name]


def month_dates(month: int = 11, year: int = 2025, days: int = 30) -> list[str]:
    return [f"{day:02d}.{month:02d}.{year}" for day in range(1, days + 1)]


@pytest.fixture
def replier():
    return FakeReplier()


@pytest.fixture
def sheets():
    return FakeSheetsService(dates={"November": month_dates()})
