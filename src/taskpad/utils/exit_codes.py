"""
Exit codes for the Taskpad CLI.

Semantic exit codes so scripts can tell what went wrong without parsing
output.
"""

import httpx

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (not logged in, invalid credentials, expired token)
ERROR_AUTH_FAILURE = 3

# Network or API error (server unreachable, timeout, 5xx)
ERROR_NETWORK = 4

# Resource not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_AUTH_FAILURE: "ERROR_AUTH_FAILURE",
        ERROR_NETWORK: "ERROR_NETWORK",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(exc: BaseException) -> int:
    """Pick the exit code that best describes a failed API call."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status in (401, 403):
            return ERROR_AUTH_FAILURE
        if status == 404:
            return ERROR_NOT_FOUND
        if status == 400:
            return ERROR_INVALID_ARGS
        return ERROR_NETWORK
    if isinstance(exc, httpx.RequestError):
        return ERROR_NETWORK
    return ERROR_GENERAL
