# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Book, IsbnEntry, Borrower,
    BorrowRecord, LoanStatus, BookState
)

__all__ = [
    'Database',
    'Base',
    'Book',
    'IsbnEntry',
    'Borrower',
    'BorrowRecord',
    'LoanStatus',
    'BookState',
]
