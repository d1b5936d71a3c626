# core/sa/repositories/borrow.py
import logging
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ConflictError, AlreadyReturnedError
from core.sa.models import BorrowRecord, LoanStatus, BookState
from .book import BookRepository
from .borrower import BorrowerRepository

logger = logging.getLogger(__name__)

class BorrowLedger:
    """Loan events per book and the borrow/return state machine.

    Per book: AVAILABLE --borrow--> ON_LOAN --return--> AVAILABLE.

    The ledger is the only writer of borrow records. Every operation runs in the
    caller's transaction, and exclusion is scoped to a single book or record:

    * borrow locks the book row (FOR UPDATE) before reading its state, and the
      partial unique index on open records rejects a second open loan even on
      backends without row locks.
    * return_loan is a conditional UPDATE on status = 'borrowed', so of two
      concurrent returns exactly one matches a row.
    """

    def __init__(self, session: Session):
        self.session = session
        self.books = BookRepository(session)
        self.borrowers = BorrowerRepository(session)

    def borrow(self, book_id: int, borrower_id: int) -> BorrowRecord:
        """Open a loan of a book to a borrower.

        Raises:
            NotFoundError: If the book or the borrower does not exist
            ConflictError: If the book is currently on loan
        """
        book = self.books.get_for_update(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        if not self.borrowers.exists(borrower_id):
            raise NotFoundError("Borrower", borrower_id)

        if self.current_status(book_id) is BookState.ON_LOAN:
            logger.info(f"Borrow of book {book_id} rejected: already on loan")
            raise ConflictError(book_id)

        record = BorrowRecord(
            book_id=book_id,
            borrower_id=borrower_id,
            status=LoanStatus.BORROWED.value,
            borrowed_at=datetime.now(UTC),
        )
        self.session.add(record)
        try:
            self.session.flush()
        except IntegrityError:
            # Another transaction opened a loan for this book after our read
            self.session.rollback()
            if self.open_record_for(book_id) is not None:
                logger.info(f"Borrow of book {book_id} lost a concurrent race")
                raise ConflictError(book_id)
            raise

        logger.info(f"Book {book_id} borrowed by borrower {borrower_id} (record {record.id})")
        return record

    def return_loan(self, record_id: int) -> BorrowRecord:
        """Close an open loan.

        Raises:
            NotFoundError: If no record has this id
            AlreadyReturnedError: If the record is already closed
        """
        now = datetime.now(UTC)
        stmt = (
            update(BorrowRecord)
            .where(
                BorrowRecord.id == record_id,
                BorrowRecord.status == LoanStatus.BORROWED.value,
            )
            .values(status=LoanStatus.RETURNED.value, returned_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)

        if result.rowcount == 0:
            if self.get_record(record_id) is None:
                raise NotFoundError("Borrow record", record_id)
            logger.info(f"Return of record {record_id} rejected: already returned")
            raise AlreadyReturnedError(record_id)

        record = self.session.get(BorrowRecord, record_id, populate_existing=True)
        logger.info(f"Record {record_id} returned (book {record.book_id})")
        return record

    def current_status(self, book_id: int) -> BookState:
        """Derive a book's state from its latest record (by borrowed_at, then id)."""
        stmt = (
            select(BorrowRecord.status)
            .where(BorrowRecord.book_id == book_id)
            .order_by(BorrowRecord.borrowed_at.desc(), BorrowRecord.id.desc())
            .limit(1)
        )
        status = self.session.execute(stmt).scalar_one_or_none()
        if status == LoanStatus.BORROWED.value:
            return BookState.ON_LOAN
        return BookState.AVAILABLE

    def get_record(self, record_id: int) -> Optional[BorrowRecord]:
        return self.session.get(BorrowRecord, record_id)

    def open_record_for(self, book_id: int) -> Optional[BorrowRecord]:
        stmt = select(BorrowRecord).where(
            BorrowRecord.book_id == book_id,
            BorrowRecord.status == LoanStatus.BORROWED.value,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def history(self, book_id: int) -> List[BorrowRecord]:
        """All records for a book, newest first."""
        stmt = (
            select(BorrowRecord)
            .where(BorrowRecord.book_id == book_id)
            .order_by(BorrowRecord.borrowed_at.desc(), BorrowRecord.id.desc())
        )
        return list(self.session.execute(stmt).scalars())
