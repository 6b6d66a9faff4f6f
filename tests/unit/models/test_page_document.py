"""Unit tests for models.page_document module."""

from datetime import datetime, timezone

import pytest

from src.models.page_document import PageDocument, display_title
from tests.fixtures.sample_pages import API_HOMEPAGE, API_PAGE_WITH_STRING_CONTENT


class TestDisplayTitle:
    @pytest.mark.parametrize("key,expected", [
        ("homepage", "Homepage"),
        ("aboutUs", "AboutUs"),
        ("faq", "Faq"),
        ("", ""),
    ])
    def test_upper_cases_first_letter_only(self, key, expected):
        assert display_title(key) == expected


class TestPageDocumentFromApi:
    """Test cases for PageDocument.from_api."""

    def test_maps_camel_case_fields(self):
        page = PageDocument.from_api(API_HOMEPAGE)

        assert page.page_key == "homepage"
        assert page.title == API_HOMEPAGE["title"]
        assert page.content == API_HOMEPAGE["content"]
        assert page.meta_title == API_HOMEPAGE["metaTitle"]
        assert page.meta_description == API_HOMEPAGE["metaDescription"]
        assert page.updated_at == datetime(2026, 2, 1, 12, 30, tzinfo=timezone.utc)

    def test_content_is_copied(self):
        page = PageDocument.from_api(API_HOMEPAGE)
        page.content["heroTitle"] = "Changed"

        assert API_HOMEPAGE["content"]["heroTitle"] == "Find Your Home"

    def test_non_mapping_content_reads_as_empty(self):
        assert PageDocument.from_api(API_PAGE_WITH_STRING_CONTENT).content == {}

    def test_defaults_for_sparse_payload(self):
        page = PageDocument.from_api({"pageKey": "faq"})

        assert page.title == ""
        assert page.status == "published"
        assert page.meta_title is None
        assert page.created_at is None

    def test_bad_timestamp_is_ignored(self):
        assert PageDocument.from_api({"pageKey": "faq", "updatedAt": "yesterday"}).updated_at is None
