"""Tests for Sheets error classification and messages."""

import json

import pytest
import requests
from google.auth.exceptions import RefreshError
from gspread.exceptions import APIError, WorksheetNotFound

from daily_budget.sheets_errors import (
    SheetsError,
    SheetsErrorKind,
    classify_error,
    sheets_error_message,
)


def api_error(code: int, status: str, message: str = "error") -> APIError:
    response = requests.Response()
    response.status_code = code
    response._content = json.dumps(
        {"error": {"code": code, "status": status, "message": message}}
    ).encode()
    return APIError(response)


class TestClassifyError:
    """Tests for classify_error."""

    def test_api_error_codes(self):
        assert classify_error(api_error(403, "PERMISSION_DENIED")).kind == SheetsErrorKind.PERMISSION_DENIED
        assert classify_error(api_error(429, "RESOURCE_EXHAUSTED")).kind == SheetsErrorKind.QUOTA_EXCEEDED
        assert classify_error(api_error(503, "UNAVAILABLE")).kind == SheetsErrorKind.CONNECTION
        assert classify_error(api_error(400, "INVALID_ARGUMENT")).kind == SheetsErrorKind.GENERIC

    def test_network_errors(self):
        assert classify_error(requests.exceptions.ConnectionError()).kind == SheetsErrorKind.CONNECTION
        assert classify_error(requests.exceptions.Timeout()).kind == SheetsErrorKind.CONNECTION
        assert classify_error(TimeoutError("slow")).kind == SheetsErrorKind.CONNECTION

    def test_auth_error(self):
        error = classify_error(RefreshError("invalid_grant: account not found"))
        assert error.kind == SheetsErrorKind.PERMISSION_DENIED
        assert not error.retryable

    def test_worksheet_not_found(self):
        error = classify_error(WorksheetNotFound("March"), sheet_name="March")
        assert error.kind == SheetsErrorKind.SHEET_NOT_FOUND
        assert error.sheet_name == "March"

    def test_sheets_error_passes_through(self):
        original = SheetsError.date_column_not_found("November", "31.11.2025")
        assert classify_error(original) is original

    def test_retryable(self):
        assert SheetsError(SheetsErrorKind.QUOTA_EXCEEDED, "quota").retryable
        assert not SheetsError(SheetsErrorKind.GENERIC, "boom").retryable


class TestSheetsErrorMessage:
    """Tests for user-facing messages."""

    def test_sheet_not_found(self):
        message = sheets_error_message(SheetsError.sheet_not_found("November"))
        assert message == (
            'Sheet "November" not found. Please ensure the sheet exists in your spreadsheet.'
        )

    def test_date_column_not_found(self):
        message = sheets_error_message(SheetsError.date_column_not_found("November", "15.11.2025"))
        assert '"15.11.2025"' in message
        assert '"November"' in message

    @pytest.mark.parametrize(
        "kind, fragment",
        [
            (SheetsErrorKind.PERMISSION_DENIED, "Permission denied"),
            (SheetsErrorKind.CONNECTION, "Connection error"),
            (SheetsErrorKind.QUOTA_EXCEEDED, "request limit"),
            (SheetsErrorKind.GENERIC, "contact support"),
        ],
    )
    def test_other_kinds(self, kind, fragment):
        assert fragment in sheets_error_message(SheetsError(kind, "details"))
