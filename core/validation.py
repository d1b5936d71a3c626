# core/validation.py
from typing import Any, Dict, List

from email_validator import EmailNotValidError, validate_email

from core.exceptions import ValidationError

MAX_STRING_LENGTH = 255
MAX_ISBN_DIGITS = 13


class _Errors:
    """Collects messages per field so callers see every problem at once."""

    def __init__(self):
        self.errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def _check_string(errors: _Errors, field: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.add(field, f"The {field} field is required.")
    elif not isinstance(value, str):
        errors.add(field, f"The {field} field must be a string.")
    elif len(value) > MAX_STRING_LENGTH:
        errors.add(field, f"The {field} field must not be greater than {MAX_STRING_LENGTH} characters.")


def _check_isbn(errors: _Errors, value: Any) -> None:
    if value is None:
        errors.add("isbn", "The isbn field is required.")
    elif isinstance(value, bool) or not isinstance(value, int):
        errors.add("isbn", "The isbn field must be an integer.")
    elif value < 0:
        errors.add("isbn", "The isbn field must not be negative.")
    elif len(str(value)) > MAX_ISBN_DIGITS:
        errors.add("isbn", f"The isbn field must not have more than {MAX_ISBN_DIGITS} digits.")


def validate_book_input(isbn: Any, title: Any, author: Any) -> None:
    errors = _Errors()
    _check_isbn(errors, isbn)
    _check_string(errors, "title", title)
    _check_string(errors, "author", author)
    errors.raise_if_any()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_borrower_input(name: Any, email: Any) -> None:
    errors = _Errors()
    _check_string(errors, "name", name)
    _check_string(errors, "email", email)
    if "email" not in errors.errors:
        try:
            validate_email(email.strip(), check_deliverability=False)
        except EmailNotValidError:
            errors.add("email", "The email field must be a valid email address.")
    errors.raise_if_any()


def validate_id(field: str, value: Any) -> None:
    """Raise ValidationError unless value is a positive integer id."""
    errors = _Errors()
    if value is None:
        errors.add(field, f"The {field} field is required.")
    elif isinstance(value, bool) or not isinstance(value, int):
        errors.add(field, f"The {field} field must be an integer.")
    elif value < 1:
        errors.add(field, f"The {field} field must be at least 1.")
    errors.raise_if_any()
