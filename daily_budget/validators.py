"""Validation of operator input.

Every validator is a pure function returning a ``ValidationOutcome``: either a
success carrying the parsed value or a failure carrying an error kind and a
human readable reason. Validators never raise, callers must check
``outcome.is_valid``.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

SKIP_TOKEN = "skip"

# Largest amount a single field accepts
MAX_AMOUNT = Decimal("999999999")

INVALID_AMOUNT_PROMPT = "❌ Please enter a valid amount:"
INVALID_TEXT_PROMPT = "❌ Please enter valid text:"


class ValidationErrorKind(str, Enum):
    """Why a value was rejected."""

    NOT_A_NUMBER = "not_a_number"
    NEGATIVE_AMOUNT = "negative_amount"
    ZERO_AMOUNT = "zero_amount"
    AMOUNT_TOO_LARGE = "amount_too_large"
    TOO_SHORT = "too_short"


@dataclass(frozen=True)
class ValidationOutcome(Generic[T]):
    """Result of validating a single piece of input."""

    is_valid: bool
    value: Optional[T] = None
    error: Optional[ValidationErrorKind] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T]) -> "ValidationOutcome[T]":
        return cls(is_valid=True, value=value)

    @classmethod
    def failure(cls, error: ValidationErrorKind, reason: str) -> "ValidationOutcome[T]":
        return cls(is_valid=False, error=error, reason=reason)


def _parse_decimal(text: str) -> Optional[Decimal]:
    """Parse a decimal number, allowing spaces and a comma separator."""
    if text is None:
        return None
    cleaned = text.strip().replace(" ", "").replace(",", ".")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def validate_amount(text: str) -> ValidationOutcome[Decimal]:
    """Validate a non-negative money amount."""
    amount = _parse_decimal(text)
    if amount is None:
        return ValidationOutcome.failure(
            ValidationErrorKind.NOT_A_NUMBER, "Please enter a valid number"
        )
    if amount < 0:
        return ValidationOutcome.failure(
            ValidationErrorKind.NEGATIVE_AMOUNT, "Amount cannot be negative"
        )
    if amount > MAX_AMOUNT:
        return ValidationOutcome.failure(
            ValidationErrorKind.AMOUNT_TOO_LARGE, "Amount cannot exceed 999.999.999"
        )
    return ValidationOutcome.success(amount)


def validate_expense_amount(text: str) -> ValidationOutcome[Decimal]:
    """Validate an expense amount, which must be strictly positive."""
    outcome = validate_amount(text)
    if outcome.is_valid and outcome.value == 0:
        return ValidationOutcome.failure(
            ValidationErrorKind.ZERO_AMOUNT, "Expense amount must be greater than 0"
        )
    return outcome


def validate_text(text: str, min_length: int = 1) -> ValidationOutcome[str]:
    """Validate a required text field."""
    value = (text or "").strip()
    if len(value) < min_length:
        return ValidationOutcome.failure(
            ValidationErrorKind.TOO_SHORT, f"Minimum length: {min_length} characters"
        )
    return ValidationOutcome.success(value)


def validate_optional_text(text: str) -> ValidationOutcome[str]:
    """Validate an optional text field.

    Empty input and the word "skip" (any case) mean "no value".
    """
    value = (text or "").strip()
    if not value or value.lower() == SKIP_TOKEN:
        return ValidationOutcome.success(None)
    return ValidationOutcome.success(value)


def is_skip(text: str) -> bool:
    """Check if the operator asked to keep the current value."""
    return (text or "").strip().lower() == SKIP_TOKEN


def amount_error_message(outcome: ValidationOutcome) -> str:
    """Message sent back when an amount was rejected."""
    return f"❌ {outcome.reason}\n\n{INVALID_AMOUNT_PROMPT}"


def text_error_message(outcome: ValidationOutcome) -> str:
    """Message sent back when a text field was rejected."""
    return f"❌ {outcome.reason}\n\n{INVALID_TEXT_PROMPT}"
