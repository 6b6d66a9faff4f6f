"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the command layer can map them
to an exit code in one place.
"""

from typing import Optional

from src.cms_client.errors import (
    APIAccessError,
    APIUnreachableError,
    EditorError,
    InvalidCredentialsError,
    PageSaveError,
)

from .models import ExitCode


class CLIError(EditorError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when the editor config file is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Config error in field '{config_field}': {message}"
        else:
            full_message = f"Config error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ConfigFilesystemError(CLIError):
    """Raised when the config file cannot be read."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Config file operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class EditArgumentError(CLIError):
    """Raised when an edit assignment is not PAGE.FIELD=VALUE."""

    def __init__(self, argument: str):
        super().__init__(
            f"Invalid edit '{argument}': expected PAGE.FIELD=VALUE"
        )
        self.argument = argument


def exit_code_for(error: Exception) -> ExitCode:
    """Map an exception raised by a command to its exit code."""
    if isinstance(error, PageSaveError):
        return ExitCode.SAVE_FAILED
    if isinstance(error, InvalidCredentialsError):
        return ExitCode.AUTH_ERROR
    if isinstance(error, (APIUnreachableError, APIAccessError)):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR
