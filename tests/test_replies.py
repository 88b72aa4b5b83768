"""Tests for the reply capability."""

import asyncio

import pytest

from conftest import FakeReplier
from daily_budget.bot.replies import Replier


class PartialReplier(Replier):
    async def answer(self, text, reply_markup=None):
        pass


class TestReplierContract:
    """Tests for the abstract Replier."""

    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            Replier()

    def test_missing_method_rejected(self):
        with pytest.raises(TypeError):
            PartialReplier()

    def test_complete_implementation(self):
        replier = FakeReplier(user_id=7)
        asyncio.run(replier.answer("hello"))
        assert isinstance(replier, Replier)
        assert replier.user_id == 7
        assert replier.last_text == "hello"
