# core/exceptions.py
from typing import Dict, List, Optional, Sequence


class LendingError(Exception):
    """Base class for every error raised by the lending core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LendingError):
    """Raised when input fields are missing or malformed.

    Args:
        errors: Mapping of field name to the list of messages for that field
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid input for field(s): {fields}")

    @property
    def fields(self) -> List[str]:
        return sorted(self.errors)


class NotFoundError(LendingError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class IsbnMismatchError(LendingError):
    """An ISBN is already registered with a different title and/or author."""

    def __init__(self, isbn: int, fields: Sequence[str]):
        self.isbn = isbn
        self.fields = list(fields)
        super().__init__("The ISBN does not match the title and author provided.")


class ConflictError(LendingError):
    def __init__(self, book_id: int, message: str = "Book is currently borrowed and not yet returned"):
        self.book_id = book_id
        super().__init__(message)


class AlreadyReturnedError(LendingError):
    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__("Book is already returned.")


class DuplicateEmailError(LendingError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("The email has already been taken.")


class StorageError(LendingError):
    """Persistence failure not explained by a domain rule.

    The message is meant for logs only; callers surface an opaque error.
    """

    def __init__(self, message: str, retryable: bool = False, original: Optional[BaseException] = None):
        self.retryable = retryable
        self.original = original
        super().__init__(message)
