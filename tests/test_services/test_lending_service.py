# tests/test_services/test_lending_service.py
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError
from core.exceptions import (
    ValidationError, NotFoundError, IsbnMismatchError, ConflictError,
    AlreadyReturnedError, DuplicateEmailError, StorageError
)
from core.sa.models import Book, Borrower, BorrowRecord, BookState, LoanStatus
from core.sa.repositories.borrow import BorrowLedger
from core.services.lending_service import LendingService

def test_isbn_scenario(service, db_session):
    """Second book with the same ISBN but another title is refused"""
    book = service.add_book(1234567890, "The Amazing Book", "Jane Smith")
    assert book.id == 1

    with pytest.raises(IsbnMismatchError) as exc_info:
        service.add_book(1234567890, "Other Title", "Jane Smith")
    assert exc_info.value.fields == ["title"]

    count = db_session.execute(select(func.count(Book.id)).where(Book.isbn == 1234567890)).scalar_one()
    assert count == 1

def test_borrow_return_scenario(service, sample_book, sample_borrower, other_borrower):
    """A borrows, B is refused, A returns, B borrows"""
    record_a = service.borrow_book(sample_book.id, sample_borrower.id)
    assert record_a.status == LoanStatus.BORROWED.value

    with pytest.raises(ConflictError):
        service.borrow_book(sample_book.id, other_borrower.id)

    returned = service.return_book(record_a.id)
    assert returned.status == LoanStatus.RETURNED.value

    record_b = service.borrow_book(sample_book.id, other_borrower.id)
    assert record_b.id != record_a.id
    assert record_b.borrower_id == other_borrower.id

    history = service.loan_history(sample_book.id)
    assert [r.id for r in history] == [record_b.id, record_a.id]

def test_return_twice_keeps_first_returned_at(service, sample_book, sample_borrower):
    record = service.borrow_book(sample_book.id, sample_borrower.id)
    first = service.return_book(record.id)

    with pytest.raises(AlreadyReturnedError):
        service.return_book(record.id)

    history = service.loan_history(sample_book.id)
    assert history[0].status == LoanStatus.RETURNED.value
    assert history[0].returned_at == first.returned_at

def test_borrow_unknown_ids_create_nothing(service, db_session, sample_book, sample_borrower):
    with pytest.raises(NotFoundError):
        service.borrow_book(999, sample_borrower.id)
    with pytest.raises(NotFoundError):
        service.borrow_book(sample_book.id, 999)
    assert db_session.execute(select(func.count(BorrowRecord.id))).scalar_one() == 0

def test_borrow_rejects_malformed_ids(service):
    with pytest.raises(ValidationError) as exc_info:
        service.borrow_book(None, "abc")
    assert exc_info.value.fields == ["book_id"]

def test_return_rejects_malformed_id(service):
    with pytest.raises(ValidationError):
        service.return_book(0)

def test_book_status(service, sample_book, sample_borrower):
    state, open_record = service.book_status(sample_book.id)
    assert state is BookState.AVAILABLE
    assert open_record is None

    record = service.borrow_book(sample_book.id, sample_borrower.id)
    state, open_record = service.book_status(sample_book.id)
    assert state is BookState.ON_LOAN
    assert open_record.id == record.id

def test_book_status_unknown_book(service):
    with pytest.raises(NotFoundError):
        service.book_status(42)

def test_register_duplicate_borrower(service, sample_borrower):
    with pytest.raises(DuplicateEmailError):
        service.register_borrower("Other John", "john@example.com")

@pytest.mark.parametrize("email", [
    "john@example..com", "john@.example.com", "jo..hn@example.com", "john@-example.com",
])
def test_register_borrower_malformed_email(service, db_session, email):
    with pytest.raises(ValidationError) as exc_info:
        service.register_borrower("John", email)
    assert exc_info.value.fields == ["email"]
    assert db_session.execute(select(func.count(Borrower.id))).scalar_one() == 0

def test_list_books_pages(service):
    for i in range(23):
        service.add_book(5000 + i, f"Book {i}", "Author")

    page = service.list_books(page=3)
    assert page.total_items == 23
    assert page.total_pages == 3
    assert len(page.items) == 3
    assert service.list_books(page=4).items == []

def test_transient_storage_error_is_retried(service, sample_book, sample_borrower, monkeypatch):
    original = BorrowLedger.borrow
    calls = []

    def flaky_borrow(self, book_id, borrower_id):
        calls.append(book_id)
        if len(calls) == 1:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return original(self, book_id, borrower_id)

    monkeypatch.setattr(BorrowLedger, "borrow", flaky_borrow)
    record = service.borrow_book(sample_book.id, sample_borrower.id)

    assert len(calls) == 2
    assert record.status == LoanStatus.BORROWED.value

def test_storage_error_after_retries(database, sample_book, sample_borrower, db_session, monkeypatch):
    service = LendingService(database, storage_retries=1)

    def failing_borrow(self, book_id, borrower_id):
        self.session.add(BorrowRecord(book_id=book_id, borrower_id=borrower_id))
        self.session.flush()
        raise OperationalError("INSERT", {}, Exception("lock wait timeout"))

    monkeypatch.setattr(BorrowLedger, "borrow", failing_borrow)
    with pytest.raises(StorageError) as exc_info:
        service.borrow_book(sample_book.id, sample_borrower.id)

    assert exc_info.value.retryable
    # Both attempts were rolled back
    assert db_session.execute(select(func.count(BorrowRecord.id))).scalar_one() == 0

def test_domain_errors_are_not_retried(service, sample_book, sample_borrower, monkeypatch):
    calls = []

    def conflicting_borrow(self, book_id, borrower_id):
        calls.append(book_id)
        raise ConflictError(book_id)

    monkeypatch.setattr(BorrowLedger, "borrow", conflicting_borrow)
    with pytest.raises(ConflictError):
        service.borrow_book(sample_book.id, sample_borrower.id)
    assert len(calls) == 1
