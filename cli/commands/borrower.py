# cli/commands/borrower.py
import click
from ..utils import get_service, handle_lending_errors

@click.group()
def borrower():
    """Borrower commands"""
    pass

@borrower.command()
@click.option('--name', required=True, help='Borrower name')
@click.option('--email', required=True, help='Borrower email, must be unique')
@click.pass_context
@handle_lending_errors
def add(ctx, name: str, email: str):
    """Register a borrower"""
    created = get_service(ctx).register_borrower(name, email)
    click.echo(click.style("Registered ", fg='green') + f"#{created.id}  {created.name} <{created.email}>")
