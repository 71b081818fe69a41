# cli/commands/users.py
import click
from core.sa.repositories import UserRepository
from ..utils import CliContext, pass_context, print_table

@click.group()
def users():
    """User management commands"""
    pass

@users.command('list')
@pass_context
def list_users(ctx: CliContext):
    """List every user"""
    session = ctx.database.get_session()
    try:
        all_users = UserRepository(session).list_all()
        if not all_users:
            click.echo(click.style("No users found", fg='yellow'))
            return

        print_table(
            [[u.id, u.email, u.username or '-', 'yes' if u.is_admin else 'no'] for u in all_users],
            ['ID', 'Email', 'Username', 'Admin'],
        )
    finally:
        session.close()

@users.command()
@click.argument('email')
@click.option('--name', default=None, help='Display name')
@click.option('--admin/--no-admin', default=False, help='Create the user as an admin')
@pass_context
def create(ctx: CliContext, email: str, name: str, admin: bool):
    """Create a user without going through sign-in"""
    session = ctx.database.get_session()
    try:
        user = UserRepository(session).create_user(email, name=name, is_admin=admin)
        click.echo(click.style("Created user ", fg='green') + click.style(f"{user.email} ({user.id})", fg='cyan'))
    except ValueError as e:
        raise click.ClickException(str(e))
    finally:
        session.close()

def _set_admin(ctx: CliContext, email: str, is_admin: bool) -> None:
    session = ctx.database.get_session()
    try:
        user = UserRepository(session).set_admin(email, is_admin)
        if user is None:
            raise click.ClickException(f"No user with email {email}")
        state = "now an admin" if is_admin else "no longer an admin"
        click.echo(click.style(f"{user.email} is {state}", fg='green'))
    finally:
        session.close()

@users.command()
@click.argument('email')
@pass_context
def promote(ctx: CliContext, email: str):
    """Grant admin rights to a user"""
    _set_admin(ctx, email, True)

@users.command()
@click.argument('email')
@pass_context
def demote(ctx: CliContext, email: str):
    """Revoke admin rights from a user"""
    _set_admin(ctx, email, False)
