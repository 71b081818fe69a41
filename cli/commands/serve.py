# cli/commands/serve.py
import click
import uvicorn

@click.command()
@click.option('--host', default='127.0.0.1', show_default=True, help='Interface to bind')
@click.option('--port', default=8000, type=int, show_default=True, help='Port to listen on')
@click.option('--reload/--no-reload', default=False, help='Restart on code changes')
def serve(host: str, port: int, reload: bool):
    """Run the API server"""
    click.echo(click.style("Serving audioshelf on ", fg='blue') + click.style(f"http://{host}:{port}", fg='cyan'))
    uvicorn.run('api.main:app', host=host, port=port, reload=reload)
