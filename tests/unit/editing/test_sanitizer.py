"""Unit tests for the allow-list HTML sanitizer."""

import random

import pytest
from unittest.mock import patch

from src.editing.sanitizer import is_safe_url, sanitize_html
from tests.fixtures.sample_pages import UNSAFE_HTML


class TestSanitizeHtml:
    """Test cases for sanitize_html."""

    def test_keeps_allowed_markup(self):
        """Allowed tags and attributes pass through unchanged."""
        html = '<p class="lead">Hi <b>bold</b> <i>it</i> <a href="https://x.com" target="_blank" rel="noopener">x</a></p>'
        assert sanitize_html(html) == html

    def test_removes_script_and_iframe_with_content(self):
        """Script-like containers are dropped together with their content."""
        result = sanitize_html(UNSAFE_HTML)

        assert "<script" not in result
        assert "alert(1)" not in result
        assert "<iframe" not in result
        assert result == '<p>Hello <a target="_blank">click</a><b>world</b></p>'

    def test_strips_event_handler_attributes(self):
        """Attributes outside the allow-list are removed."""
        assert sanitize_html('<span onmouseover="x()" style="color:red" class="c">t</span>') == '<span class="c">t</span>'

    def test_unwraps_disallowed_tags_keeping_text(self):
        """Disallowed formatting tags are unwrapped, their text kept."""
        assert sanitize_html("<p><u>under</u> and <font>font</font></p>") == "<p>under and font</p>"

    def test_drops_void_disallowed_tags(self):
        """<img> is not allowed in rich text."""
        assert sanitize_html('<p>a<img src="x" onerror="alert(1)">b</p>') == "<p>ab</p>"

    @pytest.mark.parametrize("href", [
        "javascript:alert(1)",
        "JavaScript:alert(1)",
        " java\tscript:alert(1)",
        "data:text/html;base64,PHNjcmlwdD4=",
        "vbscript:msgbox(1)",
    ])
    def test_removes_unsafe_link_schemes(self, href):
        """href with a non-allowed scheme is removed, the link text stays."""
        result = sanitize_html(f'<a href="{href}">x</a>')
        assert result == "<a>x</a>"

    @pytest.mark.parametrize("href", [
        "https://example.com/a?b=1",
        "http://example.com",
        "mailto:owner@example.com",
        "tel:+911234567890",
        "/properties/123",
        "#contact",
    ])
    def test_keeps_safe_links(self, href):
        """Allowed schemes, relative URLs and fragments are kept."""
        assert f'href="{href}"' in sanitize_html(f'<a href="{href}">x</a>')

    def test_removes_comments_and_doctype(self):
        """Comments and declarations never survive."""
        assert sanitize_html("<!DOCTYPE html><!-- secret --><p>x</p>") == "<p>x</p>"

    def test_plain_text_is_unchanged(self):
        """Text without markup is returned as-is."""
        assert sanitize_html("99,999+ Listings") == "99,999+ Listings"

    @pytest.mark.parametrize("value", [None, 42, "", ["<p>x</p>"]])
    def test_non_string_or_empty_input_returns_empty(self, value):
        """Non-string input never raises."""
        assert sanitize_html(value) == ""

    @pytest.mark.parametrize("html", [
        UNSAFE_HTML,
        "Tom &amp; Jerry <b>&lt;3</b>",
        "<div><p>nested <em>em <strong>strong</strong></em></p></div>",
        "<ul><li>one<li>two</ul>",
        "<p>unclosed <b>bold",
        '<a href="https://x.com?a=1&b=2">q</a>',
    ])
    def test_is_idempotent(self, html):
        """Sanitizing twice gives the same result as sanitizing once."""
        once = sanitize_html(html)
        assert sanitize_html(once) == once

    @pytest.mark.parametrize("html,expected", [
        ("<p>Hi</p> <meta charset=x> <p>there</p>", "<p>Hi</p> <p>there</p>"),
        ("<ul> <li>a</li> <style>x</style> </ul>", "<ul> <li>a</li> </ul>"),
        ("<p>a</p> <font> </font> <p>b</p>", "<p>a</p> <p>b</p>"),
    ])
    def test_whitespace_around_removed_tags_is_collapsed(self, html, expected):
        """Whitespace left on both sides of a removed tag collapses to one run."""
        once = sanitize_html(html)

        assert once == expected
        assert sanitize_html(once) == once

    def test_is_idempotent_on_generated_fragments(self):
        """Mixed pasted fragments are stable after one pass."""
        rng = random.Random(20261019)
        for _ in range(500):
            html = random_fragment(rng)
            once = sanitize_html(html)
            assert sanitize_html(once) == once, html

    def test_parser_failure_returns_empty_string(self):
        """An internal failure yields "" rather than the unsafe input."""
        with patch('src.editing.sanitizer.BeautifulSoup', side_effect=RuntimeError("boom")):
            assert sanitize_html("<script>alert(1)</script>") == ""


class TestIsSafeUrl:
    """Test cases for is_safe_url."""

    def test_relative_url_is_safe(self):
        assert is_safe_url("properties?city=pune")

    def test_javascript_with_control_characters_is_unsafe(self):
        """Control characters inside the scheme do not hide it."""
        assert not is_safe_url("java\x00script:alert(1)")


_TEXT_PIECES = [" ", "  ", "\n", " \n ", "Hi", "Tom &amp; Jerry", "&lt;3", "a b", "\t"]
_VOID_PIECES = ["<br>", '<meta charset="x">', '<link rel="x">', "<!-- note -->", "<img src=x>"]
_WRAPPERS = [
    ("<p>", "</p>"),
    ('<p class="lead" onclick="x()">', "</p>"),
    ("<b>", "</b>"),
    ("<ul>", "</ul>"),
    ("<li>", "</li>"),
    ("<font>", "</font>"),
    ("<section>", "</section>"),
    ("<style>", "</style>"),
    ("<script>", "</script>"),
    ('<a href="javascript:alert(1)">', "</a>"),
    ('<a href="https://x.com" target="_blank">', "</a>"),
]


def random_fragment(rng, depth=0):
    """Balanced fragment mixing text, whitespace and allowed and removed tags."""
    parts = []
    for _ in range(rng.randint(1, 5)):
        roll = rng.random()
        if roll < 0.45:
            parts.append(rng.choice(_TEXT_PIECES))
        elif roll < 0.6:
            parts.append(rng.choice(_VOID_PIECES))
        elif depth < 3:
            start, end = rng.choice(_WRAPPERS)
            parts.append(start + random_fragment(rng, depth + 1) + end)
    return "".join(parts)
