# tests/test_sa/test_models.py
import pytest
from datetime import datetime, UTC
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from core.sa.models import Book, IsbnEntry, Borrower, BorrowRecord, LoanStatus

def test_tables_created(database):
    """The three lending relations and the ISBN registry exist"""
    tables = set(inspect(database.engine).get_table_names())
    assert {"books", "borrowers", "borrow_records", "isbn_entries"} <= tables

def test_borrow_records_foreign_keys(database):
    fks = inspect(database.engine).get_foreign_keys("borrow_records")
    referred = {fk["referred_table"] for fk in fks}
    assert referred == {"books", "borrowers"}

def test_book_must_match_isbn_entry(db_session):
    """The composite foreign key rejects a book that disagrees with its ISBN entry"""
    db_session.add(IsbnEntry(isbn=111, title="Dune", author="Frank Herbert"))
    db_session.commit()

    db_session.add(Book(isbn=111, title="Dune Messiah", author="Frank Herbert"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

    db_session.add(Book(isbn=111, title="Dune", author="Frank Herbert"))
    db_session.commit()
    assert db_session.query(Book).filter(Book.isbn == 111).count() == 1

def test_borrower_email_unique(db_session):
    db_session.add(Borrower(name="A", email="same@example.com"))
    db_session.commit()
    db_session.add(Borrower(name="B", email="same@example.com"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_single_open_record_per_book_enforced_by_index(db_session, sample_book, sample_borrower, other_borrower):
    """Two open records for one book violate the partial unique index"""
    db_session.add(BorrowRecord(book_id=sample_book.id, borrower_id=sample_borrower.id))
    db_session.commit()
    db_session.add(BorrowRecord(book_id=sample_book.id, borrower_id=other_borrower.id))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_returned_records_do_not_block_new_loans(db_session, sample_book, sample_borrower, other_borrower):
    db_session.add(BorrowRecord(
        book_id=sample_book.id,
        borrower_id=sample_borrower.id,
        status=LoanStatus.RETURNED.value,
        returned_at=datetime.now(UTC),
    ))
    db_session.add(BorrowRecord(
        book_id=sample_book.id,
        borrower_id=sample_borrower.id,
        status=LoanStatus.RETURNED.value,
        returned_at=datetime.now(UTC),
    ))
    db_session.add(BorrowRecord(book_id=sample_book.id, borrower_id=other_borrower.id))
    db_session.commit()

    records = db_session.execute(select(BorrowRecord).where(BorrowRecord.book_id == sample_book.id)).scalars().all()
    assert len(records) == 3
    assert sum(1 for r in records if r.is_open) == 1

def test_status_check_constraint(db_session, sample_book, sample_borrower):
    db_session.add(BorrowRecord(book_id=sample_book.id, borrower_id=sample_borrower.id, status="lost"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_borrow_record_defaults(db_session, sample_book, sample_borrower):
    record = BorrowRecord(book_id=sample_book.id, borrower_id=sample_borrower.id)
    db_session.add(record)
    db_session.commit()
    assert record.status == LoanStatus.BORROWED.value
    assert record.borrowed_at is not None
    assert record.returned_at is None
    assert record.created_at is not None
