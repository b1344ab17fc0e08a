"""Errors raised by the task service, with their HTTP status codes."""

from __future__ import annotations


class ApiError(Exception):
    """Base class for service errors; ``status`` is the HTTP status code."""

    status = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)

    def to_json(self) -> dict:
        """Return the JSON error body sent to clients."""
        return {"error": str(self)}


class InvalidInputError(ApiError):
    """The request carried invalid data."""

    status = 400
    default_message = "Invalid input data"


class FileNotFoundError_(ApiError):
    """The requested resource does not exist."""

    status = 404
    default_message = "File not found"


class InsertionError(ApiError):
    """A record could not be inserted into a table."""

    def __init__(self, table: str, type_name: str) -> None:
        self.table = table
        self.type_name = type_name
        super().__init__(f"Error inserting type `{type_name}` into table `{table}`")


class AuthError(ApiError):
    """The database rejected the credentials."""

    default_message = "Authorization error: invalid username or password"


class GeneralDbError(ApiError):
    """Wraps an underlying database or I/O failure, keeping its message."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(str(cause))
        self.__cause__ = cause