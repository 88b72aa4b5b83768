"""Tests for callback data encoding and decoding."""

from daily_budget.bot import callbacks
from daily_budget.bot.callbacks import Action, EditField, decode_callback
from daily_budget.models import Weekday


class TestDecodeCallback:
    """Tests for decode_callback."""

    def test_simple_tokens(self):
        assert decode_callback("expense:add").action == Action.EXPENSE_ADD
        assert decode_callback("report:confirm").action == Action.REPORT_CONFIRM
        assert decode_callback("edit:done").action == Action.EDIT_DONE
        assert decode_callback("cashbox:cancel").action == Action.CASHBOX_CANCEL
        assert decode_callback("checklist:complete").action == Action.CHECKLIST_COMPLETE

    def test_weekday(self):
        data = callbacks.weekday_callback(Weekday.WEDNESDAY)
        assert data == "weekday:wednesday"
        callback = decode_callback(data)
        assert callback.action == Action.WEEKDAY
        assert callback.weekday == Weekday.WEDNESDAY

    def test_date(self):
        callback = decode_callback(callbacks.date_callback(2))
        assert callback.action == Action.DATE
        assert callback.days_ago == 2

    def test_edit_field(self):
        callback = decode_callback(callbacks.edit_field_callback(EditField.CASHBOX))
        assert callback.action == Action.EDIT_FIELD
        assert callback.edit_field == EditField.CASHBOX

    def test_checklist_select(self):
        callback = decode_callback(callbacks.checklist_select_callback(3))
        assert callback.action == Action.CHECKLIST_SELECT
        assert callback.index == 3

    def test_invalid(self):
        for data in (
            None,
            "",
            "weekday:funday",
            "date:3",
            "date:-1",
            "date:today",
            "edit:cash",
            "checklist:select:x",
            "checklist:open:1",
            "expense",
            "unknown:value",
        ):
            callback = decode_callback(data)
            assert callback.action == Action.INVALID, data
            assert callback.raw == (data or "")

    def test_accessors_of_other_actions(self):
        callback = decode_callback("report:edit")
        assert callback.weekday is None
        assert callback.days_ago is None
        assert callback.edit_field is None
        assert callback.index is None
