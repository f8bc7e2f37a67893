"""Authentication commands."""

import typer
from rich.prompt import Prompt

from taskpad.commands.decorators import AppError, command_wrapper
from taskpad.commands.utils import client_services
from taskpad.models import PublicUser
from taskpad.services.local_storage import CURRENT_USER_KEY, get_local_storage
from taskpad.utils.exit_codes import ERROR_AUTH_FAILURE, ERROR_INVALID_ARGS
from taskpad.utils.typer_helpers import SuggestingGroup
from taskpad.utils.ui.formatters import format_info, format_success, get_console

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
async def signup(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
    name: str | None = typer.Option(None, "--name", help="Display name"),
) -> None:
    """Create a new account and sign in."""
    if not email:
        email = Prompt.ask("Email")
    if not name:
        name = Prompt.ask("Name")
    if not password:
        password = Prompt.ask("Password", password=True)
        confirm_password = Prompt.ask("Confirm password", password=True)
        if password != confirm_password:
            raise AppError("Passwords do not match", ERROR_INVALID_ARGS)

    if not email or not password or not name:
        raise AppError("Email, name and password are required", ERROR_INVALID_ARGS)

    async with client_services() as services:
        result = await services.auth.signup(email, password, name)

    if not result.success:
        raise AppError(result.message, ERROR_INVALID_ARGS)
    format_success(f"{result.message}: {result.user.email}")


@app.command()
@command_wrapper(auth_required=False)
async def login(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Sign in to Taskpad."""
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    if not email or not password:
        raise AppError("Email and password are required", ERROR_INVALID_ARGS)

    async with client_services() as services:
        result = await services.auth.login(email, password)

    if not result.success:
        raise AppError(result.message, ERROR_AUTH_FAILURE)
    format_success(f"Logged in as {result.user.name} <{result.user.email}>")


@app.command()
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Sign out and forget the stored token."""
    async with client_services() as services:
        if not services.auth.is_authenticated.value:
            format_info("Not logged in")
            return
        await services.auth.logout()
    format_success("Logged out")


@app.command()
@command_wrapper
def whoami() -> None:
    """Show the signed-in user."""
    stored = get_local_storage().get(CURRENT_USER_KEY)
    if not stored:
        raise AppError("Not logged in", ERROR_AUTH_FAILURE)
    user = PublicUser.model_validate(stored)
    console.print(f"[bold]{user.name}[/bold] <{user.email}> [dim](id {user.id})[/dim]")
