# cli/commands/templates.py
import click
from core.images import get_template_list, render_template_preview, TemplateNotFoundError, UnsupportedSizeError
from ..utils import print_table

@click.group()
def templates():
    """Share image template commands"""
    pass

@templates.command('list')
@click.option('--list-type', type=click.Choice(['RECOMMENDATION', 'TIER']), default=None,
              help='Only templates usable for this list type')
def list_templates(list_type: str):
    """List registered templates"""
    print_table(
        [
            [t['id'], t['name'], t['slotCount'], ','.join(t['supportedSizes']), ','.join(t['listTypes'])]
            for t in get_template_list(list_type)
        ],
        ['ID', 'Name', 'Slots', 'Sizes', 'List types'],
    )

@templates.command()
@click.argument('template_id')
@click.option('--size', type=click.Choice(['og', 'square']), default='og', show_default=True, help='Size preset')
@click.option('--output', required=True, type=click.Path(dir_okay=False, writable=True), help='PNG file to write')
def preview(template_id: str, size: str, output: str):
    """Render a template with placeholder covers

    Example:
        audioshelf templates preview grid-3x3 --size square --output grid.png
    """
    try:
        result = render_template_preview(template_id, size)
    except TemplateNotFoundError:
        raise click.ClickException(f"Template not found: {template_id}")
    except UnsupportedSizeError as e:
        raise click.ClickException(str(e))

    with open(output, 'wb') as f:
        f.write(result.buffer)
    click.echo(click.style(f"Wrote {result.width}x{result.height} preview to ", fg='green') + click.style(output, fg='cyan'))
