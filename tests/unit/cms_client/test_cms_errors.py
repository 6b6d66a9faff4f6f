"""Unit tests for cms_client.errors module."""

import pytest

from src.cms_client.errors import (
    APIAccessError,
    APIUnreachableError,
    CMSError,
    EditorError,
    InvalidCredentialsError,
    PageNotFoundError,
    PageSaveError,
)


class TestErrorHierarchy:
    """All API errors are catchable as CMSError and EditorError."""

    @pytest.mark.parametrize("error", [
        InvalidCredentialsError("https://rentals.example.com"),
        PageNotFoundError("homepage"),
        APIUnreachableError("https://rentals.example.com"),
        APIAccessError(),
        PageSaveError("homepage"),
    ])
    def test_subclasses(self, error):
        assert isinstance(error, CMSError)
        assert isinstance(error, EditorError)


class TestMessages:
    """Error messages carry their context."""

    def test_unreachable_message(self):
        error = APIUnreachableError("https://rentals.example.com")
        assert str(error) == "API is not available at https://rentals.example.com"

    def test_not_found_message(self):
        assert "homepage" in str(PageNotFoundError("homepage"))

    def test_access_error_default(self):
        assert "after 3 retries" in str(APIAccessError())


class TestPageSaveError:
    """Test cases for PageSaveError."""

    def test_uses_display_title(self):
        error = PageSaveError("aboutUs")
        assert str(error) == "Failed to save AboutUs"
        assert error.saved_pages == []

    def test_includes_reason(self):
        error = PageSaveError("about", saved_pages=["homepage"], reason="HTTP 500")

        assert str(error) == "Failed to save About: HTTP 500"
        assert error.saved_pages == ["homepage"]
        assert error.reason == "HTTP 500"

    def test_saved_pages_is_copied(self):
        saved = ["homepage"]
        error = PageSaveError("about", saved_pages=saved)
        saved.append("contact")

        assert error.saved_pages == ["homepage"]
