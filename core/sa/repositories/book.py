# core/sa/repositories/book.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.isbn import check_isbn_consistency, register_isbn
from core.sa.models import Book
from core.validation import validate_book_input

logger = logging.getLogger(__name__)

class BookRepository:
    """Catalog store. Books are append-only once created."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, isbn: int, title: str, author: str) -> Book:
        """Add a book to the catalog.

        Args:
            isbn: Catalog number, at most 13 digits
            title: Title of the work
            author: Author of the work

        Returns:
            The created Book, flushed so it carries its id

        Raises:
            ValidationError: If a field is missing or malformed
            IsbnMismatchError: If the ISBN is registered with another title/author
        """
        validate_book_input(isbn, title, author)
        try:
            register_isbn(self.session, isbn, title, author)
            book = Book(isbn=isbn, title=title, author=author)
            self.session.add(book)
            self.session.flush()
        except IntegrityError:
            # Lost a race to register this ISBN; the committed entry decides
            self.session.rollback()
            logger.info(f"ISBN {isbn} was registered concurrently, re-checking")
            check_isbn_consistency(self.session, isbn, title, author)
            book = Book(isbn=isbn, title=title, author=author)
            self.session.add(book)
            self.session.flush()

        logger.info(f"Created book {book.id} (isbn={isbn})")
        return book

    def get_by_id(self, book_id: int) -> Optional[Book]:
        return self.session.get(Book, book_id)

    def get_for_update(self, book_id: int) -> Optional[Book]:
        """Fetch a book and lock its row until the transaction ends.

        Backends without row locks (SQLite) ignore FOR UPDATE.
        """
        stmt = select(Book).where(Book.id == book_id).with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def exists(self, book_id: int) -> bool:
        stmt = select(Book.id).where(Book.id == book_id)
        return self.session.execute(stmt).first() is not None

    def find_by_isbn(self, isbn: int) -> Optional[Book]:
        """Return the first catalogued book carrying this ISBN, if any."""
        stmt = select(Book).where(Book.isbn == isbn).order_by(Book.id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def count_by_isbn(self, isbn: int) -> int:
        stmt = select(func.count(Book.id)).where(Book.isbn == isbn)
        return self.session.execute(stmt).scalar_one()

    def count_books(self) -> int:
        return self.session.execute(select(func.count(Book.id))).scalar_one()

    def list_books(self, page: int = 1, per_page: int = 10) -> Tuple[List[Book], int]:
        """Get one page of the catalog, oldest first.

        Returns:
            Tuple of (books on the page, total number of books)
        """
        total = self.count_books()
        offset = (page - 1) * per_page
        stmt = select(Book).order_by(Book.id).offset(offset).limit(per_page)
        books = list(self.session.execute(stmt).scalars())
        return books, total
