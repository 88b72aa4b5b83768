"""Google Sheets access: authentication, cell addressing and batched writes."""

import logging
import math
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import gspread
from google.oauth2.service_account import Credentials
from pydantic import BaseModel

from daily_budget.models import Checklist, ChecklistCategory, ChecklistItem
from daily_budget.sheets_errors import SheetsError, classify_error

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Row of month sheets that holds dates (01.10.2025, 02.10.2025, ...)
DATE_ROW = 6

CellValue = Union[Decimal, int, float, str]


class CellUpdate(BaseModel):
    """Value to write into a single cell, optionally with a note."""

    row: int
    column: str
    value: CellValue
    note: Optional[str] = None
    truncated: bool = False

    @property
    def a1(self) -> str:
        return f"{self.column}{self.row}"


def column_letter_to_index(column: str) -> int:
    """Convert a column letter to a 0-based index (A=0, Z=25, AA=26)."""
    letters = column.strip().upper()
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"Invalid column letter: {column!r}")
    index = 0
    for char in letters:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def index_to_column_letter(index: int) -> str:
    """Convert a 0-based column index to its letter (0=A, 25=Z, 26=AA)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letters = ""
    number = index + 1
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def _validate_update(update: CellUpdate, allow_clear: bool) -> None:
    if update.row < 1:
        raise ValueError(f"Invalid row {update.row} for cell update, rows start at 1")
    if not update.column or not update.column.strip():
        raise ValueError("Column must not be empty")
    column_letter_to_index(update.column)
    if allow_clear and update.value == "":
        return
    if not _is_finite_number(update.value):
        raise ValueError(f"Invalid value {update.value!r} for cell {update.a1}")


def _number(value: CellValue) -> Union[int, float]:
    """JSON-friendly number for the Sheets API."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


class SheetsService:
    """Thin wrapper around a gspread spreadsheet."""

    def __init__(self, client: gspread.Client, spreadsheet_id: str):
        """Initialize service.

        Args:
            client: Authorized gspread client.
            spreadsheet_id: Google Sheets spreadsheet ID.
        """
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self._spreadsheet = None

    @classmethod
    def from_credentials(
        cls,
        spreadsheet_id: str,
        credentials_path: Optional[Path] = None,
        credentials_info: Optional[dict[str, Any]] = None,
    ) -> "SheetsService":
        """Create a service authorized with a service account.

        Inline credentials take priority over the file path.

        Raises:
            ValueError: If no credentials provided.
            FileNotFoundError: If credentials file not found.
        """
        if credentials_info:
            logger.info(f"Using credentials_info, client_email={credentials_info.get('client_email', 'N/A')}")
            credentials = Credentials.from_service_account_info(credentials_info, scopes=SCOPES)
        elif credentials_path:
            credentials_path = Path(credentials_path)
            if not credentials_path.exists():
                raise FileNotFoundError(f"Google credentials not found at {credentials_path}")
            logger.info(f"Using credentials from file: {credentials_path}")
            credentials = Credentials.from_service_account_file(str(credentials_path), scopes=SCOPES)
        else:
            raise ValueError(
                "No Google credentials provided. "
                "Set GOOGLE_CREDENTIALS_PATH or GOOGLE_CREDENTIALS_JSON."
            )
        return cls(gspread.authorize(credentials), spreadsheet_id)

    @property
    def spreadsheet(self):
        if self._spreadsheet is None:
            try:
                self._spreadsheet = self.client.open_by_key(self.spreadsheet_id)
            except Exception as e:
                raise classify_error(e) from e
            logger.info(f"Spreadsheet opened: {self._spreadsheet.title}")
        return self._spreadsheet

    def _worksheet(self, sheet_name: str):
        try:
            return self.spreadsheet.worksheet(sheet_name)
        except SheetsError:
            raise
        except Exception as e:
            raise classify_error(e, sheet_name=sheet_name) from e

    def get_sheet_names(self) -> list[str]:
        """Titles of all sheets in the spreadsheet, in tab order."""
        try:
            return [ws.title for ws in self.spreadsheet.worksheets()]
        except SheetsError:
            raise
        except Exception as e:
            raise classify_error(e) from e

    def sheet_exists(self, sheet_name: str) -> bool:
        """Check if a sheet with this exact title exists."""
        return sheet_name in self.get_sheet_names()

    def find_date_column(self, sheet_name: str, date_string: str) -> Optional[str]:
        """Find the column whose date header matches ``date_string``.

        Returns:
            Column letter, or None if the date is not in the header row.
        """
        worksheet = self._worksheet(sheet_name)
        try:
            header = worksheet.row_values(DATE_ROW)
        except Exception as e:
            raise classify_error(e, sheet_name=sheet_name) from e

        target = date_string.strip()
        for index, cell in enumerate(header):
            if str(cell).strip() == target:
                column = index_to_column_letter(index)
                logger.debug(f"Date {date_string} found in {sheet_name}!{column}{DATE_ROW}")
                return column

        logger.warning(f"Date {date_string} not found in row {DATE_ROW} of sheet {sheet_name}")
        return None

    def update_cells(self, sheet_name: str, updates: list[CellUpdate]) -> None:
        """Write numeric values to several cells in one request."""
        if not updates:
            return
        for update in updates:
            _validate_update(update, allow_clear=False)

        data = [
            {"range": update.a1, "values": [[_number(update.value)]]}
            for update in updates
        ]
        worksheet = self._worksheet(sheet_name)
        try:
            worksheet.batch_update(data, value_input_option="USER_ENTERED")
        except Exception as e:
            logger.error(f"Failed to update cells in {sheet_name}: {e}")
            raise classify_error(e, sheet_name=sheet_name) from e

        logger.info(f"Updated {len(updates)} cells in {sheet_name}: {[u.a1 for u in updates]}")

    def update_cells_with_notes(self, sheet_name: str, updates: list[CellUpdate]) -> None:
        """Write values and notes to several cells in one atomic batchUpdate.

        An empty string value clears the cell, a missing note clears the note.
        """
        if not updates:
            return
        for update in updates:
            _validate_update(update, allow_clear=True)

        worksheet = self._worksheet(sheet_name)
        requests = []
        for update in updates:
            if update.value == "":
                cell: dict[str, Any] = {"userEnteredValue": {"stringValue": ""}}
            else:
                cell = {"userEnteredValue": {"numberValue": _number(update.value)}}
            if update.note:
                cell["note"] = update.note

            row_index = update.row - 1
            column_index = column_letter_to_index(update.column)
            requests.append({
                "updateCells": {
                    "range": {
                        "sheetId": worksheet.id,
                        "startRowIndex": row_index,
                        "endRowIndex": row_index + 1,
                        "startColumnIndex": column_index,
                        "endColumnIndex": column_index + 1,
                    },
                    "rows": [{"values": [cell]}],
                    "fields": "userEnteredValue,note",
                }
            })

        try:
            self.spreadsheet.batch_update({"requests": requests})
        except Exception as e:
            logger.error(f"Failed to update cells with notes in {sheet_name}: {e}")
            raise classify_error(e, sheet_name=sheet_name) from e

        logger.info(f"Updated {len(updates)} cells with notes in {sheet_name}")

    def get_checklist_data(self, sheet_name: str) -> Checklist:
        """Load a checklist from a sheet.

        Layout: row 1 is a header, column A holds the category (may be
        blank), column B the item text.
        """
        worksheet = self._worksheet(sheet_name)
        try:
            rows = worksheet.get_all_values()
        except Exception as e:
            raise classify_error(e, sheet_name=sheet_name) from e

        categories: dict[str, ChecklistCategory] = {}
        without_category: list[ChecklistItem] = []
        for row in rows[1:]:
            category_name = row[0].strip() if len(row) > 0 else ""
            item_text = row[1].strip() if len(row) > 1 else ""
            if not item_text:
                continue
            item = ChecklistItem(text=item_text)
            if not category_name:
                without_category.append(item)
                continue
            if category_name not in categories:
                categories[category_name] = ChecklistCategory(name=category_name)
            categories[category_name].items.append(item)

        logger.info(
            f"Loaded checklist {sheet_name}: {len(categories)} categories, "
            f"{len(without_category)} items without category"
        )
        return Checklist(
            name=sheet_name,
            categories=list(categories.values()),
            items_without_category=without_category,
        )

    def test_connection(self) -> bool:
        """Check that the spreadsheet can be opened and read."""
        try:
            names = self.get_sheet_names()
        except SheetsError as e:
            logger.error(f"Google Sheets connection test failed: {e}")
            return False
        logger.info(f"Google Sheets connection test successful, {len(names)} sheets")
        return True

