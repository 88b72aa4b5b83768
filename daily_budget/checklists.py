"""Rendering checklists into Telegram-sized messages."""

import random
from html import escape

from daily_budget.models import Checklist, ChecklistItem

# Telegram allows 4096 characters, leave room for the greeting on the first message
MAX_MESSAGE_LENGTH = 3900

CONTINUATION = "(continuation)"
NO_CATEGORY = "No Category"
EMPTY_CHECKLIST = "📋 <b>Checklist is empty</b>"

GREETINGS = [
    "Alright, let's go through this! 😊",
    "Here we go, checking everything step by step 📝",
    "Nothing fancy, just going through the list ✨",
    "Quick check and we're done! ⚡",
    "Okay, let me see what we have here 👀",
    "Let's check everything so we don't miss anything 🎯",
    "Take it easy, you got this! 💪",
]


def get_checklist_greeting() -> str:
    """Random friendly line shown above a checklist."""
    return random.choice(GREETINGS)


def _checklist_header(name: str) -> str:
    return f"📋 <b>{escape(name)}</b>\n\n"


def _continuation_header(name: str) -> str:
    return f"📋 <b>{escape(name)}</b> {CONTINUATION}\n\n"


def _section_header(title: str) -> str:
    return f"📋 <b>{escape(title)}</b>\n"


def _item_line(number: int, item: ChecklistItem) -> str:
    return f"{number}. {escape(item.text)}\n\n"


def _format_section(title: str, items: list[ChecklistItem]) -> str:
    return _section_header(title) + "".join(
        _item_line(number, item) for number, item in enumerate(items, start=1)
    )


def _split_section(
    title: str, items: list[ChecklistItem], checklist_name: str, opening: str, max_length: int
) -> list[str]:
    """Split one oversized section into chunks, never inside an item.

    The first chunk starts with ``opening``, the following ones repeat the
    checklist and section headers.
    """
    chunks = []
    current = opening + _section_header(title)
    has_items = False
    for number, item in enumerate(items, start=1):
        line = _item_line(number, item)
        if has_items and len(current) + len(line) > max_length:
            chunks.append(current)
            current = _continuation_header(checklist_name) + _section_header(title)
            has_items = False
        current += line
        has_items = True
    chunks.append(current)
    return chunks


def format_checklist_display(checklist: Checklist, max_length: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Format a checklist as a list of messages, each within ``max_length``.

    Category blocks are packed into the current message while they fit. A
    category that does not fit into a message on its own is split into
    continuation messages. A single item longer than the limit is sent alone.
    """
    sections = [
        (category.name, category.items)
        for category in checklist.categories
        if category.items
    ]
    if checklist.items_without_category:
        sections.append((NO_CATEGORY, checklist.items_without_category))

    if not sections:
        return [EMPTY_CHECKLIST]

    messages: list[str] = []
    current = _checklist_header(checklist.name)
    current_has_section = False

    for title, items in sections:
        section = _format_section(title, items)
        if len(current) + len(section) <= max_length:
            current += section
            current_has_section = True
            continue

        if current_has_section:
            messages.append(current)
            current = _continuation_header(checklist.name)
            current_has_section = False

        if len(current) + len(section) <= max_length:
            current += section
            current_has_section = True
            continue

        # The section alone is too long for one message
        parts = _split_section(title, items, checklist.name, current, max_length)
        messages.extend(parts[:-1])
        current = parts[-1]
        current_has_section = True

    messages.append(current)
    return [message.strip() for message in messages]
