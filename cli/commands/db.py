# cli/commands/db.py
import click
from ..utils import CliContext, pass_context

@click.group()
def db():
    """Database management commands"""
    pass

@db.command()
@pass_context
def init(ctx: CliContext):
    """Create all tables that do not exist yet"""
    ctx.database.init_db()
    click.echo(click.style("Database initialized", fg='green'))

@db.command()
@click.confirmation_option(prompt='This deletes every user, library and list. Continue?')
@pass_context
def drop(ctx: CliContext):
    """Drop all tables"""
    ctx.database.drop_all()
    click.echo(click.style("All tables dropped", fg='yellow'))
