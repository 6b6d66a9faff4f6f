"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, bad arguments)
    - SAVE_FAILED (2): A page could not be saved
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    SAVE_FAILED = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class EditorConfig:
    """Editor settings loaded from .page-editor/config.yaml.

    Attributes:
        autosave_enabled: Whether page-scoped edits save on a timer
        autosave_debounce_ms: Quiet period before an autosave fires
        image_max_size_mb: Byte budget for uploaded images
        image_max_dimension: Largest width or height for uploaded images
        request_timeout: Per-request timeout for the pages API in seconds

    Example:
        >>> config = EditorConfig(autosave_debounce_ms=500)
    """
    autosave_enabled: bool = True
    autosave_debounce_ms: int = 2000
    image_max_size_mb: float = 1.0
    image_max_dimension: int = 1920
    request_timeout: float = 30
