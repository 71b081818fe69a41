# cli/commands/sync.py
import json
import click
from core.sa.repositories import SyncRepository, UserRepository
from core.services.sync_import import process_sync_import, validate_import_payload
from ..utils import CliContext, pass_context, print_import_results

@click.group()
def sync():
    """Library sync commands"""
    pass

@sync.command('import')
@click.argument('user_id')
@click.argument('file', type=click.File('r', encoding='utf-8'))
@pass_context
def import_library(ctx: CliContext, user_id: str, file):
    """Replace a user's library with a JSON export

    FILE holds the same {"titles": [...]} payload the browser extension uploads.

    Example:
        audioshelf sync import 3f2a... library.json
    """
    try:
        body = json.load(file)
    except ValueError as e:
        raise click.ClickException(f"Invalid JSON payload: {e}")

    error = validate_import_payload(body)
    if error:
        raise click.ClickException(error)

    session = ctx.database.get_session()
    try:
        if UserRepository(session).get_by_id(user_id) is None:
            raise click.ClickException(f"User not found: {user_id}")

        titles = body['titles']
        result = process_sync_import(session, user_id, titles)
        SyncRepository(session).record_history(
            user_id,
            titles_imported=result.imported,
            new_to_catalog=result.new_to_catalog,
            library_count=result.library_count,
            wishlist_count=result.wishlist_count,
            warnings=result.warnings,
            success=result.success,
        )
        print_import_results(result, len(titles))
    finally:
        session.close()
