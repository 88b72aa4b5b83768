"""Tests for operator input validation."""

from decimal import Decimal

from daily_budget.validators import (
    MAX_AMOUNT,
    ValidationErrorKind,
    amount_error_message,
    is_skip,
    validate_amount,
    validate_expense_amount,
    validate_optional_text,
    validate_text,
)


class TestValidateAmount:
    """Tests for validate_amount."""

    def test_valid_amounts(self):
        assert validate_amount("1000").value == Decimal("1000")
        assert validate_amount("0").value == Decimal("0")
        assert validate_amount("  250.5 ").value == Decimal("250.5")

    def test_comma_and_spaces(self):
        """Comma decimal separator and thousand spaces are accepted."""
        assert validate_amount("1 000,50").value == Decimal("1000.50")

    def test_not_a_number(self):
        for text in ("abc", "", "   ", "12a", "NaN", "inf"):
            outcome = validate_amount(text)
            assert not outcome.is_valid, text
            assert outcome.error == ValidationErrorKind.NOT_A_NUMBER

    def test_negative(self):
        outcome = validate_amount("-5")
        assert not outcome.is_valid
        assert outcome.error == ValidationErrorKind.NEGATIVE_AMOUNT
        assert outcome.reason == "Amount cannot be negative"

    def test_too_large(self):
        for text in ("1e30", "1000000000", "12345678901234567890123456789"):
            outcome = validate_amount(text)
            assert not outcome.is_valid, text
            assert outcome.error == ValidationErrorKind.AMOUNT_TOO_LARGE
        assert validate_amount("999999999").value == MAX_AMOUNT
        assert validate_expense_amount("1e30").error == ValidationErrorKind.AMOUNT_TOO_LARGE

    def test_error_message(self):
        message = amount_error_message(validate_amount("-5"))
        assert message.startswith("❌ Amount cannot be negative")
        assert message.endswith("Please enter a valid amount:")


class TestValidateExpenseAmount:
    """Tests for validate_expense_amount."""

    def test_zero_rejected(self):
        outcome = validate_expense_amount("0")
        assert not outcome.is_valid
        assert outcome.error == ValidationErrorKind.ZERO_AMOUNT

    def test_positive_accepted(self):
        assert validate_expense_amount("300").value == Decimal("300")

    def test_negative_rejected(self):
        assert validate_expense_amount("-1").error == ValidationErrorKind.NEGATIVE_AMOUNT


class TestTextValidation:
    """Tests for text validators and the skip token."""

    def test_required_text(self):
        assert validate_text("  Milk ").value == "Milk"
        outcome = validate_text("   ")
        assert not outcome.is_valid
        assert outcome.error == ValidationErrorKind.TOO_SHORT

    def test_optional_text(self):
        assert validate_optional_text("skip").value is None
        assert validate_optional_text("SKIP").value is None
        assert validate_optional_text("").value is None
        assert validate_optional_text(" late delivery ").value == "late delivery"

    def test_is_skip(self):
        assert is_skip("Skip")
        assert is_skip(" skip ")
        assert not is_skip("skipped")
        assert not is_skip("")
