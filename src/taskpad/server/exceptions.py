"""Custom exceptions for the Taskpad backend."""


class TaskpadError(Exception):
    """Base exception for all Taskpad backend errors."""


class DuplicateUserError(TaskpadError):
    """Raised when signing up with an email that is already registered."""


class InvalidCredentialsError(TaskpadError):
    """Raised when the email is unknown or the password does not match."""


class MissingTokenError(TaskpadError):
    """Raised when a protected operation is attempted without a token."""


class InvalidTokenError(TaskpadError):
    """Raised when a token is malformed, tampered with, or expired."""


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token's validity window has passed."""


class TaskNotFoundError(TaskpadError):
    """Raised when a task does not exist or belongs to another user."""
