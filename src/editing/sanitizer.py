"""Allow-list HTML sanitizer for rich-text page fields.

Rich-text values are sanitized twice: when an edit is committed and again
whenever a value is rendered, because stored content may have been written
by an older session or directly through the API.

Uses BeautifulSoup with Python's built-in html.parser, which never expands
external entities. The cleaned tree is serialized and parsed once more so
the result is in the form the parser itself produces; sanitizing that
result again returns it unchanged.
"""

import logging
import re
from typing import Any

from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

logger = logging.getLogger(__name__)

PARSER = "html.parser"

ALLOWED_TAGS = frozenset({
    'b', 'i', 'strong', 'em', 'a', 'br', 'p', 'span', 'div',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'ul', 'ol', 'li',
})

ALLOWED_ATTRIBUTES = frozenset({'href', 'target', 'rel', 'class'})

# Removed together with everything inside them
DROP_WITH_CONTENT_TAGS = frozenset({
    'script', 'style', 'iframe', 'object', 'embed', 'noscript', 'template',
    'textarea', 'title', 'svg', 'math', 'frame', 'frameset', 'applet',
    'base', 'link', 'meta', 'form', 'select',
})

SAFE_URL_SCHEMES = frozenset({'http', 'https', 'mailto', 'tel'})

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)
_SCHEME_PATTERN = re.compile(r'^([a-z][a-z0-9+.\-]*):')
_IGNORED_URL_CHARS = re.compile(r'[\x00-\x20\x7f]+')


def is_safe_url(url: str) -> bool:
    """Whether a link target uses an allowed scheme (or is relative)."""
    compact = _IGNORED_URL_CHARS.sub('', url).lower()
    match = _SCHEME_PATTERN.match(compact)
    if not match:
        return True
    return match.group(1) in SAFE_URL_SCHEMES


def _clean_attributes(tag: Tag) -> None:
    for name in list(tag.attrs):
        if name.lower() not in ALLOWED_ATTRIBUTES:
            del tag[name]
            continue
        if name.lower() == 'href':
            value = tag[name]
            if isinstance(value, list):
                value = ' '.join(value)
            if not is_safe_url(value):
                del tag[name]


def _clean_children(parent: Tag) -> None:
    for child in list(parent.contents):
        if isinstance(child, _NON_TEXT_STRINGS):
            child.extract()
            continue

        if isinstance(child, NavigableString):
            continue

        if not isinstance(child, Tag):
            child.extract()
            continue

        name = (child.name or '').lower()
        if name in DROP_WITH_CONTENT_TAGS:
            child.decompose()
            continue

        _clean_children(child)

        if name not in ALLOWED_TAGS:
            child.unwrap()
            continue

        _clean_attributes(child)


def sanitize_html(raw_html: Any) -> str:
    """Strip every tag and attribute that is not on the allow-list.

    Disallowed tags are unwrapped (their text is kept) except script-like
    containers, which are dropped with their content. Comments and
    declarations are removed and unsafe link schemes are stripped from href.

    Never raises: non-string input yields "", and if parsing fails the
    result is "" rather than the original input.

    Args:
        raw_html: HTML fragment as typed or stored

    Returns:
        Sanitized HTML fragment

    Example:
        >>> sanitize_html('<p onclick="x()">Hi <script>alert(1)</script><b>there</b></p>')
        '<p>Hi <b>there</b></p>'
    """
    if not isinstance(raw_html, str) or not raw_html:
        return ""

    try:
        soup = BeautifulSoup(raw_html, PARSER)
        _clean_children(soup)
        # Dropped or unwrapped tags leave adjacent strings behind, e.g. two
        # " " runs that a fresh parse collapses into one
        return str(BeautifulSoup(str(soup), PARSER))
    except Exception as e:
        logger.warning(f"Sanitizer could not parse HTML, dropping value: {e}")
        return ""
