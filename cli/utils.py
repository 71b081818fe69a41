# cli/utils.py
import click
from typing import List, Optional
from core.sa.database import Database


class CliContext:
    """Shared state for every command: lazily opens the configured database"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url
        self._database: Optional[Database] = None

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database(self.database_url)
        return self._database


pass_context = click.make_pass_decorator(CliContext, ensure=True)


def print_key_value(label: str, value, color: str = 'cyan') -> None:
    click.echo(click.style(f"{label}: ", fg='blue') + click.style(str(value), fg=color))


def print_import_results(result, total: int) -> None:
    """Print the counts and warnings of a library import"""
    click.echo("\n" + click.style("Results:", fg='blue'))
    print_key_value("Processed", total)
    print_key_value("Imported", result.imported, 'green')
    print_key_value("New to catalog", result.new_to_catalog)
    print_key_value("Library", result.library_count)
    print_key_value("Wishlist", result.wishlist_count)

    if result.warnings:
        click.echo("\n" + click.style(f"Warnings ({len(result.warnings)}):", fg='yellow'))
        for warning in result.warnings:
            click.echo(click.style(f"  {warning}", fg='yellow'))


def print_table(rows: List[List[str]], headers: List[str]) -> None:
    """Print rows as left-aligned columns"""
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(str(cell))) for w, cell in zip(widths, row)]

    click.echo(click.style("  ".join(h.ljust(w) for h, w in zip(headers, widths)), fg='blue'))
    for row in rows:
        click.echo("  ".join(str(cell).ljust(w) for cell, w in zip(row, widths)))
