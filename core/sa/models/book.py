# core/sa/models/book.py
from sqlalchemy import BigInteger, Integer, String, ForeignKeyConstraint, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin

class IsbnEntry(Base, TimestampMixin):
    """Canonical title/author for an ISBN.

    One row per ISBN. Every book references the entry for its ISBN through a
    composite foreign key on (isbn, title, author), so the database rejects a
    book whose title or author differ from the registered work.
    """
    __tablename__ = 'isbn_entries'

    isbn: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint('isbn', 'title', 'author', name='uix_isbn_entries_work'),
    )

class Book(Base, TimestampMixin):
    __tablename__ = 'books'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    isbn: Mapped[int] = mapped_column(BigInteger, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ['isbn', 'title', 'author'],
            ['isbn_entries.isbn', 'isbn_entries.title', 'isbn_entries.author'],
            name='fk_books_isbn_entry',
        ),
        Index('idx_books_isbn', 'isbn'),
    )

    def __repr__(self):
        return f"<Book(id={self.id}, isbn={self.isbn}, title='{self.title}')>"
