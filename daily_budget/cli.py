"""CLI interface for the daily budget bot."""

from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from daily_budget.bot.config import Settings, get_settings
from daily_budget.formatters import format_date_for_sheets, get_month_name_english
from daily_budget.sheets import DATE_ROW, SheetsService
from daily_budget.sheets_errors import SheetsError, sheets_error_message
from daily_budget.sheets_helpers import (
    BLACK_CASH_ROW,
    CARD_SALES_ROW,
    EXPENSES_END_ROW,
    EXPENSES_START_ROW,
    WHITE_CASH_ROW,
    locate_day_column,
)

app = typer.Typer(
    name="daily-budget",
    help="Telegram bot for daily reports stored in Google Sheets.",
    no_args_is_help=True,
)

console = Console()


def get_service(spreadsheet_id: str | None) -> SheetsService:
    """Get Sheets adapter for a spreadsheet, exit if it cannot be created."""
    settings = get_settings()
    if not spreadsheet_id:
        console.print("[red]Spreadsheet ID is not configured[/red]")
        raise typer.Exit(1)
    try:
        return SheetsService.from_credentials(
            spreadsheet_id,
            credentials_path=settings.google_credentials_path,
            credentials_info=settings.credentials_info(),
        )
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def parse_date(date_str: str) -> datetime:
    """Parse date string in DD.MM.YYYY format."""
    try:
        return datetime.strptime(date_str, "%d.%m.%Y")
    except ValueError:
        raise typer.BadParameter("Date must be in DD.MM.YYYY format")


@app.command("bot")
def run_bot() -> None:
    """Run the Telegram bot."""
    from daily_budget.bot.main import main

    main()


@app.command("check")
def check_config() -> None:
    """Validate configuration and test the connection to both spreadsheets."""
    settings: Settings = get_settings()
    errors = settings.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Error: {error}[/red]")
        raise typer.Exit(1)
    console.print("[green]Configuration OK[/green]")

    failed = False
    for label, spreadsheet_id in (
        ("Reports", settings.google_sheets_id),
        ("Checklists", settings.checklist_sheets_id),
    ):
        service = get_service(spreadsheet_id)
        try:
            names = service.get_sheet_names()
        except SheetsError as e:
            console.print(f"[red]{label}: {sheets_error_message(e)}[/red]")
            failed = True
            continue
        console.print(f"[green]{label}: connected, {len(names)} sheets[/green]")

    if failed:
        raise typer.Exit(1)


@app.command("find-date")
def find_date(
    date_str: Annotated[str, typer.Argument(help="Report date (DD.MM.YYYY)")],
) -> None:
    """Show which sheet and column a report for the date is written to."""
    day = parse_date(date_str).date()
    service = get_service(get_settings().google_sheets_id)

    console.print(
        f"[cyan]Looking for {format_date_for_sheets(day)} in row {DATE_ROW} "
        f"of sheet {get_month_name_english(day)}...[/cyan]"
    )
    try:
        sheet_name, column = locate_day_column(service, day)
    except SheetsError as e:
        console.print(f"[red]{sheets_error_message(e)}[/red]")
        raise typer.Exit(1)

    settings = get_settings()
    table = Table(title=f"{sheet_name}, column {column}")
    table.add_column("Field", style="cyan")
    table.add_column("Cell", justify="right", style="green")
    table.add_row("White cash", f"{column}{WHITE_CASH_ROW}")
    table.add_row("Black cash", f"{column}{BLACK_CASH_ROW}")
    table.add_row("Card sales", f"{column}{CARD_SALES_ROW}")
    table.add_row("Expenses", f"{column}{EXPENSES_START_ROW}:{column}{EXPENSES_END_ROW}")
    table.add_row("Cashbox", f"{column}{settings.cashbox_row}")
    console.print(table)


@app.command("checklists")
def list_checklists() -> None:
    """List checklists available in the checklist spreadsheet."""
    service = get_service(get_settings().checklist_sheets_id)
    try:
        names = service.get_sheet_names()
    except SheetsError as e:
        console.print(f"[red]{sheets_error_message(e)}[/red]")
        raise typer.Exit(1)

    if not names:
        console.print("[yellow]No checklists available[/yellow]")
        raise typer.Exit(0)

    console.print("\n[bold]Available checklists:[/bold]\n")
    for name in names:
        console.print(f"  • {name}")
    console.print()


if __name__ == "__main__":
    app()
