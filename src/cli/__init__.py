"""Command-line interface for inline page-content editing.

This package provides the `page-editor` CLI tool that reads pages from the
site's pages API and applies field edits through the same edit session,
field editors and save reconciler the inline editor uses.
"""

__version__ = "0.1.0"

from .edit_command import EditCommand
from .meta_command import MetaCommand
from .models import ExitCode, EditorConfig
from .errors import (
    CLIError,
    ConfigError,
    ConfigFilesystemError,
    EditArgumentError,
)

__all__ = [
    'EditCommand',
    'MetaCommand',
    'ExitCode',
    'EditorConfig',
    'CLIError',
    'ConfigError',
    'ConfigFilesystemError',
    'EditArgumentError',
]
