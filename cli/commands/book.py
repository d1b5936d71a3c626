# cli/commands/book.py
import click
from core.sa.models import BookState
from ..utils import get_service, handle_lending_errors, format_book, format_record

@click.group()
def book():
    """Catalog commands"""
    pass

@book.command()
@click.option('--isbn', required=True, type=int, help='ISBN, at most 13 digits')
@click.option('--title', required=True, help='Book title')
@click.option('--author', required=True, help='Book author')
@click.pass_context
@handle_lending_errors
def add(ctx, isbn: int, title: str, author: str):
    """Add a book to the catalog"""
    created = get_service(ctx).add_book(isbn, title, author)
    click.echo(click.style("Created ", fg='green') + format_book(created))

@book.command(name='list')
@click.option('--page', default=1, type=click.IntRange(min=1), help='Page number')
@click.pass_context
@handle_lending_errors
def list_books(ctx, page: int):
    """List the catalog, one page at a time"""
    result = get_service(ctx).list_books(page=page)
    if not result.items:
        click.echo("No books found")
        return
    for item in result.items:
        click.echo(format_book(item))
    click.echo(click.style(f"\nPage {result.page} of {result.total_pages} ({result.total_items} books)", fg='blue'))

@book.command()
@click.argument('book_id', type=int)
@click.pass_context
@handle_lending_errors
def status(ctx, book_id: int):
    """Show whether a book is available or on loan"""
    state, open_record = get_service(ctx).book_status(book_id)
    if state is BookState.ON_LOAN:
        click.echo(click.style(state.value, fg='yellow') + f" ({format_record(open_record)})")
    else:
        click.echo(click.style(state.value, fg='green'))

@book.command()
@click.argument('book_id', type=int)
@click.pass_context
@handle_lending_errors
def history(ctx, book_id: int):
    """Show every loan of a book, newest first"""
    records = get_service(ctx).loan_history(book_id)
    if not records:
        click.echo("Never borrowed")
        return
    for record in records:
        click.echo(format_record(record))
