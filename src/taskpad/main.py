"""Main entry point for the Taskpad CLI."""

import typer

from taskpad import __version__
from taskpad.commands import auth, config, server, tasks
from taskpad.commands.decorators import command_wrapper
from taskpad.services.api import AuthAPI, get_client
from taskpad.utils.typer_helpers import SuggestingGroup
from taskpad.utils.ui.formatters import format_success, get_console

app = typer.Typer(
    name="taskpad",
    cls=SuggestingGroup,
    help="Personal task manager: REST backend and command-line client",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(config.app, name="config", help="Configuration management")
app.command("serve")(server.serve)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Taskpad[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
@command_wrapper(auth_required=False)
async def health() -> None:
    """Check that the backend is reachable."""
    async with get_client() as client:
        result = await AuthAPI(client).health()
    format_success(f"{result.get('message', 'API is running')} ({client.base_url})")


if __name__ == "__main__":
    app()
