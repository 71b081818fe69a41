# cli/commands/lists.py
import click
from core.sa.repositories import ListRepository
from core.services.list_images import regenerate_list_images, MissingTemplateError
from ..utils import CliContext, pass_context, print_key_value

@click.group()
def lists():
    """List management commands"""
    pass

@lists.command()
@click.argument('list_id')
@pass_context
def regenerate(ctx: CliContext, list_id: str):
    """Render and upload fresh share images for a list

    Ignores the regeneration cooldown that applies to the web endpoint.
    """
    session = ctx.database.get_session()
    try:
        lst = ListRepository(session).get_by_id(list_id)
        if lst is None:
            raise click.ClickException(f"List not found: {list_id}")

        try:
            regenerate_list_images(session, lst)
        except MissingTemplateError as e:
            raise click.ClickException(str(e))
        except Exception as e:
            click.echo("\n" + click.style(f"Error during image generation: {str(e)}", fg='red'), err=True)
            raise click.exceptions.Exit(1)

        click.echo(click.style("Images ready", fg='green'))
        print_key_value("Version", lst.image_version)
        print_key_value("OG key", lst.image_og_key)
        print_key_value("Square key", lst.image_square_key)
    finally:
        session.close()
