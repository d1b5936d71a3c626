# core/services/lending_service.py

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import LendingError, NotFoundError, StorageError
from core.sa.database import Database
from core.sa.models import Book, Borrower, BorrowRecord, BookState
from core.sa.repositories import BookRepository, BorrowerRepository, BorrowLedger
from core.settings import settings
from core.validation import validate_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

@dataclass
class BookPage:
    page: int
    per_page: int
    total_items: int
    items: List[Book]

    @property
    def total_pages(self) -> int:
        return (self.total_items + self.per_page - 1) // self.per_page

class LendingService:
    """Entry point used by the API and CLI.

    Every operation runs in its own transaction and returns detached model
    instances. Domain errors propagate unchanged; persistence failures are
    retried when transient and otherwise surfaced as StorageError.
    """

    def __init__(self, database: Database, storage_retries: Optional[int] = None, page_size: Optional[int] = None):
        self.database = database
        self.storage_retries = settings.storage_retries if storage_retries is None else storage_retries
        self.page_size = page_size or settings.page_size

    def _run(self, operation: str, work: Callable[[Session], T]) -> T:
        attempts = self.storage_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                with self.database.transaction() as session:
                    return work(session)
            except LendingError:
                raise
            except OperationalError as e:
                if attempt < attempts:
                    logger.warning(f"Transient storage error during {operation} (attempt {attempt}/{attempts}), retrying: {e}")
                    continue
                logger.error(f"Storage error during {operation} after {attempts} attempt(s): {e}")
                raise StorageError(f"{operation} failed", retryable=True, original=e) from e
            except SQLAlchemyError as e:
                logger.exception(f"Storage error during {operation}")
                raise StorageError(f"{operation} failed", original=e) from e

    # Catalog

    def add_book(self, isbn: int, title: str, author: str) -> Book:
        return self._run("add_book", lambda s: BookRepository(s).create(isbn, title, author))

    def list_books(self, page: int = 1) -> BookPage:
        page = max(page, 1)

        def work(session: Session) -> BookPage:
            books, total = BookRepository(session).list_books(page=page, per_page=self.page_size)
            return BookPage(page=page, per_page=self.page_size, total_items=total, items=books)

        return self._run("list_books", work)

    # Borrowers

    def register_borrower(self, name: str, email: str) -> Borrower:
        return self._run("register_borrower", lambda s: BorrowerRepository(s).create(name, email))

    # Loans

    def borrow_book(self, book_id: int, borrower_id: int) -> BorrowRecord:
        validate_id("book_id", book_id)
        validate_id("borrower_id", borrower_id)
        return self._run("borrow_book", lambda s: BorrowLedger(s).borrow(book_id, borrower_id))

    def return_book(self, record_id: int) -> BorrowRecord:
        validate_id("id", record_id)
        return self._run("return_book", lambda s: BorrowLedger(s).return_loan(record_id))

    def book_status(self, book_id: int) -> Tuple[BookState, Optional[BorrowRecord]]:
        """Current state of a book and its open record, if on loan."""
        validate_id("book_id", book_id)

        def work(session: Session) -> Tuple[BookState, Optional[BorrowRecord]]:
            if not BookRepository(session).exists(book_id):
                raise NotFoundError("Book", book_id)
            ledger = BorrowLedger(session)
            return ledger.current_status(book_id), ledger.open_record_for(book_id)

        return self._run("book_status", work)

    def loan_history(self, book_id: int) -> List[BorrowRecord]:
        validate_id("book_id", book_id)

        def work(session: Session) -> List[BorrowRecord]:
            if not BookRepository(session).exists(book_id):
                raise NotFoundError("Book", book_id)
            return BorrowLedger(session).history(book_id)

        return self._run("loan_history", work)
