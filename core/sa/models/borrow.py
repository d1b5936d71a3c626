# core/sa/models/borrow.py
from datetime import datetime, UTC
from enum import Enum
from sqlalchemy import Integer, String, ForeignKey, DateTime, Index, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin

class LoanStatus(str, Enum):
    BORROWED = "borrowed"   # Open loan, book is out
    RETURNED = "returned"   # Closed loan

class BookState(str, Enum):
    AVAILABLE = "AVAILABLE"
    ON_LOAN = "ON_LOAN"

OPEN_LOAN_CLAUSE = text("status = 'borrowed'")

class BorrowRecord(Base, TimestampMixin):
    __tablename__ = 'borrow_records'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('books.id'), nullable=False)
    borrower_id: Mapped[int] = mapped_column(ForeignKey('borrowers.id'), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LoanStatus.BORROWED.value)
    borrowed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        # At most one open record per book, enforced by the store itself
        Index(
            'uix_borrow_records_open_book',
            'book_id',
            unique=True,
            sqlite_where=OPEN_LOAN_CLAUSE,
            postgresql_where=OPEN_LOAN_CLAUSE,
        ),
        Index('idx_borrow_records_book_borrowed_at', 'book_id', 'borrowed_at'),
        Index('idx_borrow_records_borrower', 'borrower_id'),
        CheckConstraint("status IN ('borrowed', 'returned')", name='ck_borrow_records_status'),
    )

    @property
    def is_open(self) -> bool:
        return self.status == LoanStatus.BORROWED.value

    def __repr__(self):
        return f"<BorrowRecord(id={self.id}, book_id={self.book_id}, status='{self.status}')>"
