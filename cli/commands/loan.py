# cli/commands/loan.py
import click
from ..utils import get_service, handle_lending_errors, format_record

@click.group()
def loan():
    """Borrow and return books"""
    pass

@loan.command()
@click.option('--book-id', required=True, type=int, help='Book to lend')
@click.option('--borrower-id', required=True, type=int, help='Borrower taking the book')
@click.pass_context
@handle_lending_errors
def borrow(ctx, book_id: int, borrower_id: int):
    """Lend a book to a borrower"""
    record = get_service(ctx).borrow_book(book_id, borrower_id)
    click.echo(click.style("Book borrowed successfully. ", fg='green') + format_record(record))

@loan.command(name='return')
@click.argument('record_id', type=int)
@click.pass_context
@handle_lending_errors
def return_loan(ctx, record_id: int):
    """Return a borrowed book by its borrow record id"""
    record = get_service(ctx).return_book(record_id)
    click.echo(click.style("Book returned successfully. ", fg='green') + format_record(record))
