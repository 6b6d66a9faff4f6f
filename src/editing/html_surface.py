"""Live editable region behind a text field editor.

HtmlSurface plays the part of a content-editable element: it holds the
HTML the user is typing into, a text selection, and the handful of
formatting commands the rich-text toolbar offers. Selections are limited
to a span inside a single text node.
"""

import logging
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString

from .sanitizer import PARSER

logger = logging.getLogger(__name__)

SUPPORTED_COMMANDS = ('bold', 'italic', 'createLink', 'unlink')


class HtmlSurface:
    """Editable HTML fragment with a selection and formatting commands.

    Example:
        >>> surface = HtmlSurface("<p>Find your next home</p>")
        >>> surface.select("next home")
        True
        >>> surface.exec_command("bold")
        True
        >>> surface.inner_html
        '<p>Find your <b>next home</b></p>'
    """

    def __init__(self, html: str = ""):
        self._soup = BeautifulSoup(html or "", PARSER)
        self._selection: Optional[Tuple[NavigableString, int, int]] = None
        self.has_focus = False

    @property
    def inner_html(self) -> str:
        return str(self._soup)

    @property
    def selected_text(self) -> str:
        if self._selection is None:
            return ""
        node, start, end = self._selection
        return str(node)[start:end]

    def set_html(self, html: str) -> None:
        """Replace the whole content (typing, pasting or loading a value)."""
        self._soup = BeautifulSoup(html or "", PARSER)
        self._selection = None

    def focus(self) -> None:
        self.has_focus = True

    def blur(self) -> None:
        self.has_focus = False

    def select(self, text: str, occurrence: int = 0) -> bool:
        """Select the given occurrence of text inside one text node.

        Returns:
            True if the text was found and selected
        """
        self._selection = None
        if not text:
            return False

        seen = 0
        for node in self._soup.find_all(string=True):
            if type(node) is not NavigableString:
                continue
            start = node.find(text)
            while start != -1:
                if seen == occurrence:
                    self._selection = (node, start, start + len(text))
                    return True
                seen += 1
                start = node.find(text, start + 1)
        return False

    def clear_selection(self) -> None:
        self._selection = None

    def exec_command(self, command: str, value: Optional[str] = None) -> bool:
        """Apply a formatting command to the current selection.

        Args:
            command: One of "bold", "italic", "createLink", "unlink"
            value: Link target for "createLink"

        Returns:
            True if the content changed
        """
        if command not in SUPPORTED_COMMANDS:
            logger.debug(f"Unsupported editing command: {command}")
            return False

        if self._selection is None:
            return False

        if command == 'bold':
            return self._wrap_selection('b')
        if command == 'italic':
            return self._wrap_selection('i')
        if command == 'createLink':
            if not value:
                return False
            return self._wrap_selection('a', {'href': value})
        return self._unlink_selection()

    def _wrap_selection(self, tag_name: str, attrs: Optional[Dict[str, str]] = None) -> bool:
        node, start, end = self._selection  # type: ignore[misc]
        text = str(node)
        selected = text[start:end]

        wrapper = self._soup.new_tag(tag_name, attrs=attrs or {})
        inner = NavigableString(selected)
        wrapper.append(inner)

        pieces = []
        if text[:start]:
            pieces.append(NavigableString(text[:start]))
        pieces.append(wrapper)
        if text[end:]:
            pieces.append(NavigableString(text[end:]))
        node.replace_with(*pieces)

        self._selection = (inner, 0, len(selected))
        return True

    def _unlink_selection(self) -> bool:
        node, _, _ = self._selection  # type: ignore[misc]
        anchor = node.find_parent('a')
        if anchor is None:
            return False
        anchor.unwrap()
        return True
