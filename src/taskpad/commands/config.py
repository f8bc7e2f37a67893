"""Configuration commands."""

import json

import typer

from taskpad.commands.decorators import AppError, command_wrapper
from taskpad.services.config_service import get_config_service
from taskpad.utils.exit_codes import ERROR_INVALID_ARGS
from taskpad.utils.typer_helpers import SuggestingGroup
from taskpad.utils.ui.formatters import format_success, get_console

app = typer.Typer(cls=SuggestingGroup, help="Configuration management")
console = get_console()


@app.command("show")
@command_wrapper(auth_required=False)
def show() -> None:
    """Print the whole configuration."""
    data = get_config_service().config.model_dump()
    data["server"]["jwt_secret"] = "********"
    console.print_json(json.dumps(data))


@app.command("get")
@command_wrapper(auth_required=False)
def get(key: str = typer.Argument(..., help="Dot-separated key, e.g. api.endpoint")) -> None:
    """Print one configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        raise AppError(f"Unknown config key: {key}", ERROR_INVALID_ARGS) from e
    console.print(value)


@app.command("set")
@command_wrapper(auth_required=False)
def set_value(
    key: str = typer.Argument(..., help="Dot-separated key"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change one configuration value."""
    try:
        get_config_service().set(key, value)
    except KeyError as e:
        raise AppError(f"Unknown config key: {key}", ERROR_INVALID_ARGS) from e
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"{key} updated")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset(key: str | None = typer.Argument(None, help="Key to reset; all when omitted")) -> None:
    """Restore defaults."""
    try:
        get_config_service().reset(key)
    except KeyError as e:
        raise AppError(f"Unknown config key: {key}", ERROR_INVALID_ARGS) from e
    format_success(f"{key or 'Configuration'} reset to defaults")
