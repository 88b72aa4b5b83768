"""Checklist conversation: choose a checklist and go through it."""

import asyncio
import logging
from html import escape

from daily_budget.bot import keyboards
from daily_budget.bot.callbacks import Action, Callback
from daily_budget.bot.replies import Replier
from daily_budget.bot.session import ChecklistSession, ChecklistStep
from daily_budget.checklists import format_checklist_display, get_checklist_greeting
from daily_budget.sheets import SheetsService
from daily_budget.sheets_errors import SheetsError, sheets_error_message

logger = logging.getLogger(__name__)

CHECKLIST_LIST = "📋 Available checklists:"
NO_CHECKLISTS = "No checklists available."
CHECKLIST_COMPLETED = "✅ Checklist completed!"
CHECKLIST_CANCELLED = "❌ Checklist cancelled."
USE_BUTTONS = "Please use the buttons to interact with checklists."
CHECKLIST_ERROR = "An error occurred while loading checklist."


class ChecklistFlow:
    """Checklist conversation logic."""

    def __init__(self, sheets: SheetsService):
        """Initialize flow.

        Args:
            sheets: Adapter for the checklist spreadsheet.
        """
        self.sheets = sheets

    async def enter(self, replier: Replier) -> ChecklistSession:
        """Offer the available checklists.

        Returns a finished session when there is nothing to choose from.
        """
        names = await asyncio.to_thread(self.sheets.get_sheet_names)
        logger.info(f"User {replier.user_id}: loaded {len(names)} checklist names")

        session = ChecklistSession(names=names)
        if not names:
            session.step = ChecklistStep.CANCELLED
            await replier.answer(NO_CHECKLISTS)
            return session

        await replier.answer(CHECKLIST_LIST, reply_markup=keyboards.checklist_list_keyboard(names))
        logger.info(f"User {replier.user_id} entered checklist selection")
        return session

    async def cancel(self, replier: Replier, session: ChecklistSession, from_button: bool = False) -> None:
        session.step = ChecklistStep.CANCELLED
        if from_button:
            await replier.ack()
            await replier.edit(CHECKLIST_CANCELLED)
        else:
            await replier.answer(CHECKLIST_CANCELLED)
        logger.info(f"User {replier.user_id} cancelled checklist")

    async def handle_text(self, replier: Replier, session: ChecklistSession, text: str) -> None:
        await replier.answer(USE_BUTTONS)

    async def handle_callback(self, replier: Replier, session: ChecklistSession, callback: Callback) -> None:
        action = callback.action
        if action == Action.CHECKLIST_SELECT:
            await self._select(replier, session, callback.index)
        elif action == Action.CHECKLIST_COMPLETE:
            session.step = ChecklistStep.COMPLETED
            await replier.ack()
            await replier.edit(CHECKLIST_COMPLETED)
            logger.info(f"User {replier.user_id} completed checklist {session.selected}")
        elif action == Action.CHECKLIST_CANCEL:
            await self.cancel(replier, session, from_button=True)
        elif action == Action.INVALID:
            logger.warning(f"User {replier.user_id}: invalid callback data {callback.raw!r}")
            await replier.ack("Invalid selection")
        else:
            logger.warning(f"User {replier.user_id}: unexpected action {action.value} in checklist")
            await replier.ack("Unknown action")

    async def _select(self, replier: Replier, session: ChecklistSession, index: int) -> None:
        if index < 0 or index >= len(session.names):
            logger.warning(
                f"User {replier.user_id}: invalid checklist selection {index}, "
                f"{len(session.names)} checklists available"
            )
            await replier.ack("Invalid checklist selection")
            return

        name = session.names[index]
        try:
            checklist = await asyncio.to_thread(self.sheets.get_checklist_data, name)
        except SheetsError as e:
            logger.error(f"User {replier.user_id}: failed to load checklist {name}: {e.message}")
            await replier.ack()
            await replier.answer(f"{CHECKLIST_ERROR}\n\n{escape(sheets_error_message(e), quote=False)}")
            return

        session.selected = name
        session.step = ChecklistStep.VIEWING

        messages = format_checklist_display(checklist)
        await replier.ack()

        last = len(messages) - 1
        for i, text in enumerate(messages):
            markup = keyboards.checklist_actions_keyboard() if i == last else None
            if i == 0:
                await replier.edit(f"{get_checklist_greeting()}\n\n{text}", reply_markup=markup)
            else:
                await replier.answer(text, reply_markup=markup)

        logger.info(f"User {replier.user_id} selected checklist: {name} ({len(messages)} messages)")
