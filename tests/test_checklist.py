"""Tests for checklist rendering and the checklist conversation."""

import asyncio

import pytest

from conftest import FakeSheetsService
from daily_budget.bot import keyboards
from daily_budget.bot.callbacks import decode_callback
from daily_budget.bot.scenes.checklist import (
    CHECKLIST_COMPLETED,
    CHECKLIST_ERROR,
    CHECKLIST_LIST,
    NO_CHECKLISTS,
    USE_BUTTONS,
    ChecklistFlow,
)
from daily_budget.bot.session import ChecklistSession, ChecklistStep
from daily_budget.checklists import (
    EMPTY_CHECKLIST,
    GREETINGS,
    format_checklist_display,
    get_checklist_greeting,
)
from daily_budget.models import Checklist, ChecklistCategory, ChecklistItem
from daily_budget.sheets_errors import SheetsError, SheetsErrorKind


def items(*texts):
    return [ChecklistItem(text=text) for text in texts]


def opening_checklist() -> Checklist:
    return Checklist(
        name="Opening",
        categories=[
            ChecklistCategory(name="Kitchen", items=items("Turn on the oven", "Wash hands")),
            ChecklistCategory(name="Empty"),
            ChecklistCategory(name="Hall", items=items("Open windows")),
        ],
        items_without_category=items("Smile"),
    )


class TestFormatChecklistDisplay:
    """Tests for format_checklist_display."""

    def test_single_message(self):
        messages = format_checklist_display(opening_checklist())
        assert messages == [
            "📋 <b>Opening</b>\n\n"
            "📋 <b>Kitchen</b>\n"
            "1. Turn on the oven\n\n"
            "2. Wash hands\n\n"
            "📋 <b>Hall</b>\n"
            "1. Open windows\n\n"
            "📋 <b>No Category</b>\n"
            "1. Smile"
        ]

    def test_empty(self):
        checklist = Checklist(name="Closing", categories=[ChecklistCategory(name="Empty")])
        assert format_checklist_display(checklist) == [EMPTY_CHECKLIST]

    def test_escapes_html(self):
        checklist = Checklist(name="A & B", items_without_category=items("<check> the till"))
        message = format_checklist_display(checklist)[0]
        assert "A &amp; B" in message
        assert "&lt;check&gt; the till" in message

    def test_sections_moved_to_next_message(self):
        checklist = Checklist(
            name="Long",
            categories=[
                ChecklistCategory(name="First", items=items("a" * 60)),
                ChecklistCategory(name="Second", items=items("b" * 60)),
            ],
        )
        messages = format_checklist_display(checklist, max_length=120)
        assert len(messages) == 2
        assert "First" in messages[0] and "Second" not in messages[0]
        assert messages[1].startswith("📋 <b>Long</b> (continuation)")
        assert "📋 <b>Second</b>" in messages[1]

    def test_oversized_section_split(self):
        checklist = Checklist(
            name="Big",
            categories=[ChecklistCategory(name="Kitchen", items=items(*[f"task {i:02d}" for i in range(30)]))],
        )
        messages = format_checklist_display(checklist, max_length=150)
        assert len(messages) > 1
        assert all(len(message) <= 150 for message in messages)
        for message in messages[1:]:
            assert message.startswith("📋 <b>Big</b> (continuation)\n\n📋 <b>Kitchen</b>")

        joined = "\n".join(messages)
        for i in range(30):
            assert f"task {i:02d}" in joined
        assert "30. task 29" in messages[-1]

    def test_greeting(self):
        assert get_checklist_greeting() in GREETINGS


@pytest.fixture
def checklist_sheets():
    return FakeSheetsService(checklists={"Opening": opening_checklist(), "Closing": Checklist(name="Closing")})


@pytest.fixture
def flow(checklist_sheets):
    return ChecklistFlow(checklist_sheets)


def press(flow, replier, session, data):
    asyncio.run(flow.handle_callback(replier, session, decode_callback(data)))


class TestChecklistFlow:
    """Tests for ChecklistFlow."""

    def test_enter_lists_checklists(self, flow, replier):
        session = asyncio.run(flow.enter(replier))
        assert session.names == ["Opening", "Closing"]
        assert session.step == ChecklistStep.SELECTING
        assert replier.answers[-1] == (CHECKLIST_LIST, keyboards.checklist_list_keyboard(["Opening", "Closing"]))

    def test_no_checklists(self, replier):
        flow = ChecklistFlow(FakeSheetsService())
        session = asyncio.run(flow.enter(replier))
        assert session.finished
        assert replier.last_text == NO_CHECKLISTS

    def test_select_and_complete(self, flow, replier):
        session = asyncio.run(flow.enter(replier))
        press(flow, replier, session, "checklist:select:0")
        assert session.selected == "Opening"
        assert session.step == ChecklistStep.VIEWING

        text, markup = replier.edits[-1]
        assert text.split("\n\n", 1)[0] in GREETINGS
        assert "1. Turn on the oven" in text
        assert markup == keyboards.checklist_actions_keyboard()

        press(flow, replier, session, "checklist:complete")
        assert session.step == ChecklistStep.COMPLETED
        assert replier.last_text == CHECKLIST_COMPLETED

    def test_long_checklist_keyboard_on_last_message(self, replier):
        big = Checklist(
            name="Big",
            categories=[ChecklistCategory(name="All", items=items(*["x" * 200 for _ in range(40)]))],
        )
        flow = ChecklistFlow(FakeSheetsService(checklists={"Big": big}))
        session = ChecklistSession(names=["Big"])
        press(flow, replier, session, "checklist:select:0")

        assert len(replier.edits) == 1
        assert len(replier.answers) >= 1
        assert replier.edits[0][1] is None
        assert all(markup is None for _, markup in replier.answers[:-1])
        assert replier.answers[-1][1] == keyboards.checklist_actions_keyboard()

    def test_invalid_index(self, flow, replier):
        session = ChecklistSession(names=["Opening"])
        press(flow, replier, session, "checklist:select:5")
        assert replier.acks == ["Invalid checklist selection"]
        assert session.step == ChecklistStep.SELECTING

    def test_load_error(self, flow, replier, checklist_sheets):
        session = ChecklistSession(names=["Opening"])
        checklist_sheets.fail_with = SheetsError(SheetsErrorKind.CONNECTION, "reset")
        press(flow, replier, session, "checklist:select:0")
        assert replier.last_text.startswith(CHECKLIST_ERROR)
        assert "Connection error" in replier.last_text
        assert session.step == ChecklistStep.SELECTING

    def test_text_is_not_accepted(self, flow, replier):
        session = ChecklistSession(names=["Opening"])
        asyncio.run(flow.handle_text(replier, session, "Opening"))
        assert replier.last_text == USE_BUTTONS

    def test_cancel_button(self, flow, replier):
        session = ChecklistSession(names=["Opening"])
        press(flow, replier, session, "checklist:cancel")
        assert session.finished
