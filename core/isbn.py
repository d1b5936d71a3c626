# core/isbn.py
"""ISBN consistency: an ISBN always denotes the same title and author."""
import logging
from typing import List

from sqlalchemy.orm import Session

from core.exceptions import IsbnMismatchError
from core.sa.models import IsbnEntry

logger = logging.getLogger(__name__)


def _mismatched_fields(entry: IsbnEntry, title: str, author: str) -> List[str]:
    fields = []
    if entry.title != title:
        fields.append("title")
    if entry.author != author:
        fields.append("author")
    return fields


def check_isbn_consistency(session: Session, isbn: int, title: str, author: str) -> None:
    """Check a candidate (isbn, title, author) against the catalog.

    An unknown ISBN is always admissible. A known one is admissible only if title
    and author match the registered work exactly (case-sensitive).

    Raises:
        IsbnMismatchError: naming the field(s) that differ
    """
    entry = session.get(IsbnEntry, isbn)
    if entry is None:
        return
    fields = _mismatched_fields(entry, title, author)
    if fields:
        raise IsbnMismatchError(isbn, fields)


def register_isbn(session: Session, isbn: int, title: str, author: str) -> IsbnEntry:
    """Verify the candidate and make sure the ISBN has a registry entry.

    Runs inside the caller's transaction. A first registration is flushed right
    away; if a concurrent transaction registered the same ISBN first, the primary
    key rejects the flush with IntegrityError and the caller re-checks.
    """
    check_isbn_consistency(session, isbn, title, author)
    entry = session.get(IsbnEntry, isbn)
    if entry is None:
        logger.debug(f"Registering new ISBN {isbn}")
        entry = IsbnEntry(isbn=isbn, title=title, author=author)
        session.add(entry)
        session.flush()
    return entry
