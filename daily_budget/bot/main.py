"""Bot entry point."""

import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from daily_budget.bot.config import Settings, get_settings
from daily_budget.bot.handlers import setup_routers
from daily_budget.bot.scenes.cashbox import CashboxFlow
from daily_budget.bot.scenes.checklist import ChecklistFlow
from daily_budget.bot.scenes.report import ReportFlow
from daily_budget.sheets import SheetsService

BOT_COMMANDS = [
    BotCommand(command="report", description="Create a new daily report"),
    BotCommand(command="cashbox", description="Record the cashbox amount"),
    BotCommand(command="checklist", description="Go through a checklist"),
    BotCommand(command="cancel", description="Cancel the current action"),
    BotCommand(command="help", description="Show help"),
]


def create_sheets_service(settings: Settings, spreadsheet_id: str) -> SheetsService:
    """Create a Sheets adapter authorized with the configured service account."""
    return SheetsService.from_credentials(
        spreadsheet_id,
        credentials_path=settings.google_credentials_path,
        credentials_info=settings.credentials_info(),
    )


def create_dispatcher(settings: Settings) -> Dispatcher:
    """Create dispatcher with routers and flows wired in.

    Flows are passed as dispatcher data, handlers receive them by argument
    name (``report_flow``, ``cashbox_flow``, ``checklist_flow``).
    """
    reports_sheets = create_sheets_service(settings, settings.google_sheets_id)
    checklist_sheets = create_sheets_service(settings, settings.checklist_sheets_id)

    dp = Dispatcher(
        storage=MemoryStorage(),
        report_flow=ReportFlow(reports_sheets),
        cashbox_flow=CashboxFlow(reports_sheets, cashbox_row=settings.cashbox_row),
        checklist_flow=ChecklistFlow(checklist_sheets),
        reports_sheets=reports_sheets,
    )
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)
    dp.include_router(setup_routers())
    return dp


async def on_startup(bot: Bot, reports_sheets: SheetsService) -> None:
    """Startup actions."""
    await bot.set_my_commands(BOT_COMMANDS)

    connected = await asyncio.to_thread(reports_sheets.test_connection)
    if connected:
        logging.info("Google Sheets connection OK")
    else:
        logging.warning("Google Sheets is not reachable, reports will fail to save until it is")


async def on_shutdown(bot: Bot) -> None:
    """Shutdown actions."""
    logging.info("Shutting down bot...")


async def run_bot() -> None:
    """Run the bot."""
    settings = get_settings()

    # Validate config
    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Create bot and dispatcher
    bot = Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = create_dispatcher(settings)

    # Start polling
    logging.info("Starting bot...")
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()


def main() -> None:
    """Entry point for the bot."""
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        print("\nBot stopped.")


if __name__ == "__main__":
    main()
