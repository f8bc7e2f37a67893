"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import httpx
import typer

from taskpad.services.api.client import error_message
from taskpad.services.local_storage import AUTH_TOKEN_KEY, get_local_storage
from taskpad.utils.exit_codes import (
    ERROR_AUTH_FAILURE,
    ERROR_GENERAL,
    exit_code_for,
    get_exit_code_name,
)
from taskpad.utils.logger import get_logger
from taskpad.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a stored session token."""
    if not get_local_storage().get(AUTH_TOKEN_KEY):
        format_error("Not logged in. Use 'taskpad auth login' to authenticate.")
        raise typer.Exit(ERROR_AUTH_FAILURE)


def _log_failure(
    logger, cmd: str, start: float, code: int, exc: BaseException, trace: str = ""
) -> None:
    logger.error(
        "command failed: %s (%.3fs) [%s] - %s%s",
        cmd,
        time.monotonic() - start,
        get_exit_code_name(code),
        exc,
        f"\n{trace}" if trace else "",
    )


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
                return result

            except AppError as e:
                _log_failure(logger, cmd, start, e.exit_code, e)
                format_error(str(e))
                raise typer.Exit(code=e.exit_code) from e

            except typer.Exit:
                raise

            except httpx.HTTPError as e:
                code = exit_code_for(e)
                _log_failure(logger, cmd, start, code, e)
                format_error(error_message(e, "Request failed"))
                raise typer.Exit(code=code) from e

            except Exception as e:
                _log_failure(logger, cmd, start, ERROR_GENERAL, e, traceback.format_exc())
                format_error(f"An unexpected error occurred: {e}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
