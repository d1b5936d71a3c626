# core/sa/repositories/__init__.py
from .book import BookRepository
from .borrower import BorrowerRepository
from .borrow import BorrowLedger

__all__ = ['BookRepository', 'BorrowerRepository', 'BorrowLedger']
