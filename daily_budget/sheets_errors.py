"""Error taxonomy for Google Sheets operations."""

import logging
from enum import Enum
from typing import Optional

import requests
from google.auth.exceptions import RefreshError, TransportError
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound

logger = logging.getLogger(__name__)


class SheetsErrorKind(str, Enum):
    """Kinds of spreadsheet failures the bot can explain to the operator."""

    SHEET_NOT_FOUND = "sheet_not_found"
    DATE_COLUMN_NOT_FOUND = "date_column_not_found"
    PERMISSION_DENIED = "permission_denied"
    CONNECTION = "connection"
    QUOTA_EXCEEDED = "quota_exceeded"
    GENERIC = "generic"


RETRYABLE_KINDS = {SheetsErrorKind.CONNECTION, SheetsErrorKind.QUOTA_EXCEEDED}


class SheetsError(Exception):
    """Spreadsheet failure tagged with its kind and optional context."""

    def __init__(
        self,
        kind: SheetsErrorKind,
        message: str,
        sheet_name: Optional[str] = None,
        date_string: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.sheet_name = sheet_name
        self.date_string = date_string

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    @classmethod
    def sheet_not_found(cls, sheet_name: str) -> "SheetsError":
        return cls(
            SheetsErrorKind.SHEET_NOT_FOUND,
            f'Sheet "{sheet_name}" not found in spreadsheet',
            sheet_name=sheet_name,
        )

    @classmethod
    def date_column_not_found(cls, sheet_name: str, date_string: str) -> "SheetsError":
        return cls(
            SheetsErrorKind.DATE_COLUMN_NOT_FOUND,
            f'Date "{date_string}" not found in sheet "{sheet_name}"',
            sheet_name=sheet_name,
            date_string=date_string,
        )

    def __repr__(self) -> str:
        return f"SheetsError(kind={self.kind.value!r}, message={self.message!r})"


def _api_error_status(error: APIError) -> tuple[Optional[int], str]:
    """Extract HTTP code and Google status string from a gspread APIError."""
    code = None
    status = ""
    response = getattr(error, "response", None)
    if response is not None:
        code = getattr(response, "status_code", None)
    details = getattr(error, "error", None)
    if isinstance(details, dict):
        code = details.get("code", code)
        status = str(details.get("status", ""))
    return code, status


def classify_error(error: BaseException, sheet_name: Optional[str] = None) -> SheetsError:
    """Map a library exception to a ``SheetsError``."""
    if isinstance(error, SheetsError):
        return error

    message = str(error) or type(error).__name__

    if isinstance(error, WorksheetNotFound):
        return SheetsError.sheet_not_found(sheet_name or message)

    if isinstance(error, RefreshError):
        # invalid_grant and friends: the service account cannot authenticate
        return SheetsError(SheetsErrorKind.PERMISSION_DENIED, message, sheet_name=sheet_name)

    if isinstance(error, SpreadsheetNotFound):
        return SheetsError(SheetsErrorKind.GENERIC, "Spreadsheet not found", sheet_name=sheet_name)

    if isinstance(
        error,
        (requests.exceptions.ConnectionError, requests.exceptions.Timeout, TransportError,
         ConnectionError, TimeoutError),
    ):
        return SheetsError(SheetsErrorKind.CONNECTION, message, sheet_name=sheet_name)

    code = None
    status = ""
    if isinstance(error, APIError):
        code, status = _api_error_status(error)

    text = f"{status} {message}".upper()
    if code == 403 or "PERMISSION_DENIED" in text:
        kind = SheetsErrorKind.PERMISSION_DENIED
    elif code == 429 or "RESOURCE_EXHAUSTED" in text or "QUOTA" in text:
        kind = SheetsErrorKind.QUOTA_EXCEEDED
    elif code in (500, 502, 503, 504) or "UNAVAILABLE" in text or "DEADLINE_EXCEEDED" in text:
        kind = SheetsErrorKind.CONNECTION
    else:
        kind = SheetsErrorKind.GENERIC

    logger.debug(f"Classified {type(error).__name__} (code={code}, status={status}) as {kind.value}")
    return SheetsError(kind, message, sheet_name=sheet_name)


def sheets_error_message(error: SheetsError) -> str:
    """User-facing explanation for a failed save."""
    if error.kind == SheetsErrorKind.SHEET_NOT_FOUND:
        return (
            f'Sheet "{error.sheet_name}" not found. '
            "Please ensure the sheet exists in your spreadsheet."
        )
    elif error.kind == SheetsErrorKind.DATE_COLUMN_NOT_FOUND:
        return (
            f'Date "{error.date_string}" not found in sheet "{error.sheet_name}". '
            "Please ensure the date exists in the sheet."
        )
    elif error.kind == SheetsErrorKind.PERMISSION_DENIED:
        return (
            "Permission denied. Please check that the service account "
            "has access to the spreadsheet."
        )
    elif error.kind == SheetsErrorKind.CONNECTION:
        return "Connection error. Please try again in a few moments."
    elif error.kind == SheetsErrorKind.QUOTA_EXCEEDED:
        return "Google Sheets request limit exceeded. Please wait a minute and try again."
    elif error.kind == SheetsErrorKind.GENERIC:
        return "Please contact support or try again later."
    raise ValueError(f"Unknown sheets error kind: {error.kind}")
