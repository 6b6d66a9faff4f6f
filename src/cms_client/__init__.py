"""Client library for the site's pages API.

This package wraps the `/api/pages` REST endpoints that hold each page's
editable content document, plus the read cache that saves invalidate.
"""

from .errors import (
    EditorError,
    CMSError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    PageSaveError,
)

__all__ = [
    "EditorError",
    "CMSError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "PageSaveError",
]
