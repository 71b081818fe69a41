# cli/main.py
import logging
import click
from core import config
from .utils import CliContext
from .commands.db import db
from .commands.users import users
from .commands.templates import templates
from .commands.lists import lists
from .commands.sync import sync
from .commands.serve import serve

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None,
              help='Database connection string (defaults to DATABASE_URL)')
@click.option('--log-level', default=config.LOG_LEVEL, show_default=True, help='Logging level')
@click.pass_context
def cli(ctx: click.Context, database_url: str, log_level: str):
    """audioshelf CLI"""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliContext(database_url)

cli.add_command(db)
cli.add_command(users)
cli.add_command(templates)
cli.add_command(lists)
cli.add_command(sync)
cli.add_command(serve)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
