"""Command 'serve' - run the Taskpad backend."""

import typer
import uvicorn

from taskpad.models.config_models import DEFAULT_JWT_SECRET
from taskpad.server.app import create_app
from taskpad.services.config_service import get_config_service
from taskpad.utils.logger import enable_console_logging, get_logger
from taskpad.utils.ui.formatters import get_console

console = get_console()


def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", help="Port to listen on"),
) -> None:
    """Run the REST API (data lives in memory and is lost on exit)."""
    settings = get_config_service().config.server.with_env_overrides()
    if host:
        settings = settings.model_copy(update={"host": host})
    if port:
        settings = settings.model_copy(update={"port": port})

    enable_console_logging()
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        get_logger().warning("using the default JWT secret; set JWT_SECRET in production")

    console.print(f"[bold green]Task Manager API[/bold green] on http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
