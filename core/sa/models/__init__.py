# core/sa/models/__init__.py
from .base import Base, TimestampMixin
from .book import Book, IsbnEntry
from .borrower import Borrower
from .borrow import BorrowRecord, LoanStatus, BookState

__all__ = [
    'Base',
    'TimestampMixin',
    'Book',
    'IsbnEntry',
    'Borrower',
    'BorrowRecord',
    'LoanStatus',
    'BookState',
]
