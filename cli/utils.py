# cli/utils.py
import functools
import click
from typing import Callable

from core.exceptions import IsbnMismatchError, LendingError, StorageError, ValidationError
from core.sa.models import Book, BorrowRecord
from core.services.lending_service import LendingService

def get_service(ctx: click.Context) -> LendingService:
    """Build the lending service for the database selected on the command line"""
    return LendingService(ctx.obj['database'])

def handle_lending_errors(func: Callable) -> Callable:
    """Print domain errors in red and exit with status 1"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            for field, messages in e.errors.items():
                for message in messages:
                    click.echo(click.style(f"{field}: {message}", fg='red'), err=True)
            raise SystemExit(1)
        except IsbnMismatchError as e:
            click.echo(click.style(f"{e} Mismatched: {', '.join(e.fields)}", fg='red'), err=True)
            raise SystemExit(1)
        except StorageError:
            click.echo(click.style("Storage error, see logs for details", fg='red'), err=True)
            raise SystemExit(1)
        except LendingError as e:
            click.echo(click.style(str(e), fg='red'), err=True)
            raise SystemExit(1)
    return wrapper

def format_book(book: Book) -> str:
    return f"#{book.id}  {book.title} by {book.author} (ISBN {book.isbn})"

def format_record(record: BorrowRecord) -> str:
    line = (f"Record #{record.id}: book {record.book_id} -> borrower {record.borrower_id}, "
            f"{record.status} at {record.borrowed_at:%Y-%m-%d %H:%M}")
    if record.returned_at:
        line += f", returned at {record.returned_at:%Y-%m-%d %H:%M}"
    return line
