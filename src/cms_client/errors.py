"""Typed exception hierarchy for page-content errors.

This module defines the exceptions raised by the pages API client and the
save path. All exceptions inherit from EditorError so callers can catch any
application-level failure in one place, and each carries the context needed
to tell the user what went wrong.
"""

from typing import List, Optional

from src.models.page_document import display_title


class EditorError(Exception):
    """Base exception for all page-content-editor errors.

    Use this to catch any application-level error from the editor.
    """
    pass


class CMSError(EditorError):
    """Base exception for all pages API errors."""
    pass


class InvalidCredentialsError(CMSError):
    """Raised when the API token is missing, invalid or not allowed to edit."""

    def __init__(self, endpoint: str):
        super().__init__(f"API token is invalid or missing (endpoint: {endpoint})")
        self.endpoint = endpoint


class PageNotFoundError(CMSError):
    """Raised when a requested page document does not exist."""

    def __init__(self, page_key: str):
        super().__init__(f"Page '{page_key}' not found")
        self.page_key = page_key


class APIUnreachableError(CMSError):
    """Raised when the pages API cannot be reached (timeout, refused, DNS)."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(CMSError):
    """Raised when an API call fails for any other reason, including rate limits."""

    def __init__(self, message: str = "Pages API failure (after 3 retries)"):
        super().__init__(message)


class PageSaveError(CMSError):
    """Raised when persisting one page of a multi-page save fails.

    Pages listed in saved_pages were written before the failure and stay
    written; pages after page_key were never attempted.
    """

    def __init__(
        self,
        page_key: str,
        saved_pages: Optional[List[str]] = None,
        reason: Optional[str] = None,
    ):
        message = f"Failed to save {display_title(page_key)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.page_key = page_key
        self.saved_pages = list(saved_pages or [])
        self.reason = reason
