# cli/main.py
import logging
import click
from core.sa.database import Database
from core.settings import settings
from .commands.book import book
from .commands.borrower import borrower
from .commands.loan import loan

@click.group()
@click.option('--database-url', default=None, envvar='LIBRARY_DATABASE_URL',
              help='Database connection string (defaults to sqlite:///library.db)')
@click.option('--verbose/--no-verbose', default=False, help='Show debug logging')
@click.pass_context
def cli(ctx, database_url: str, verbose: bool):
    """Library Lending CLI"""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj['database'] = Database(database_url)

@cli.command(name='init-db')
@click.pass_context
def init_db(ctx):
    """Create the books, borrowers and borrow_records tables"""
    ctx.obj['database'].init_db()
    click.echo(click.style("Database initialized", fg='green'))

@cli.command()
@click.option('--host', default=settings.api_host, help='Interface to bind')
@click.option('--port', default=settings.api_port, type=int, help='Port to listen on')
def serve(host: str, port: int):
    """Run the HTTP API"""
    import uvicorn
    uvicorn.run("api.main:app", host=host, port=port)

cli.add_command(book)
cli.add_command(borrower)
cli.add_command(loan)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
