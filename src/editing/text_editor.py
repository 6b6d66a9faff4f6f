"""Inline rich-text field editor.

A TextFieldEditor renders one text field of a page. Outside edit mode it
renders the sanitized value. In edit mode it renders a content-editable
element backed by an HtmlSurface, shows a small formatting toolbar while
focused, and commits the sanitized surface content on blur.
"""

import logging
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from .edit_session import EditSession
from .html_surface import HtmlSurface
from .sanitizer import PARSER, sanitize_html

logger = logging.getLogger(__name__)

TEXT_ELEMENTS = ('h1', 'h2', 'h3', 'h4', 'p', 'span', 'div')

# Enter on these commits instead of inserting a line break
SINGLE_LINE_ELEMENTS = frozenset({'h1', 'h2', 'h3', 'h4'})

DEFAULT_PLACEHOLDER = "Click to edit..."


def _append_html(parent: Tag, html: str) -> None:
    fragment = BeautifulSoup(html, PARSER)
    for child in list(fragment.contents):
        parent.append(child.extract())


class TextFieldEditor:
    """Controller for one editable text field.

    Attributes:
        value: Last committed value (what the owner holds)
        local_value: Value currently displayed
        is_editing: True between focus and blur
        show_toolbar: Whether the formatting toolbar is visible
        link_url: URL typed into the link popover
        link_popover_open: Whether the link popover is open

    Example:
        >>> editor = TextFieldEditor(session, "Find Your Home", on_change=print,
        ...                          element="h1", content_key="homepage.heroTitle")
        >>> editor.focus()
        >>> editor.surface.set_html("Welcome Home")
        >>> editor.blur()
        Welcome Home
        True
    """

    def __init__(
        self,
        session: EditSession,
        value: str,
        on_change: Callable[[str], None],
        element: str = "p",
        class_name: Optional[str] = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
        content_key: Optional[str] = None,
        surface: Optional[HtmlSurface] = None,
    ):
        if element not in TEXT_ELEMENTS:
            raise ValueError(
                f"Unsupported text element '{element}', expected one of {', '.join(TEXT_ELEMENTS)}"
            )

        self.session = session
        self.on_change = on_change
        self.element = element
        self.class_name = class_name
        self.placeholder = placeholder
        self.content_key = content_key
        self.value = value or ""
        self.surface = surface if surface is not None else HtmlSurface(sanitize_html(self.value))
        self.local_value = self.value
        self.is_editing = False
        self.show_toolbar = False
        self.link_url = ""
        self.link_popover_open = False

    def set_value(self, value: str) -> None:
        """Accept a new value from the owner (e.g. after a reload)."""
        self.value = value or ""
        self.local_value = self.value
        if not self.is_editing:
            self.surface.set_html(sanitize_html(self.local_value))

    def focus(self) -> None:
        """Enter the local editing state; ignored outside edit mode."""
        if not self.session.is_edit_mode:
            return
        if not self.is_editing:
            self.surface.set_html(sanitize_html(self.local_value))
        self.is_editing = True
        self.show_toolbar = True
        self.surface.focus()

    def blur(self) -> bool:
        """Leave editing and commit the surface content if it changed.

        Returns:
            True if a new value was committed
        """
        was_editing = self.is_editing
        self.is_editing = False
        self.show_toolbar = False
        self.link_popover_open = False
        self.surface.blur()
        if not was_editing:
            return False

        sanitized = sanitize_html(self.surface.inner_html)
        if sanitized == self.value or sanitized == sanitize_html(self.value):
            logger.debug(f"No change to commit for {self.content_key or 'text field'}")
            return False

        self.local_value = sanitized
        self.value = sanitized
        self.on_change(sanitized)
        if self.content_key:
            self.session.register_change(self.content_key, sanitized)
        return True

    def key_down(self, key: str, shift: bool = False) -> bool:
        """Handle a key press inside the field.

        Escape blurs; whatever was typed still commits. Enter on a heading
        blurs instead of inserting a line break.

        Returns:
            True if the key's default action was prevented
        """
        if key == "Escape":
            self.blur()
            return False

        if key == "Enter" and not shift and self.element in SINGLE_LINE_ELEMENTS:
            self.blur()
            return True

        return False

    def _exec_command(self, command: str, value: Optional[str] = None) -> bool:
        changed = self.surface.exec_command(command, value)
        self.surface.focus()
        return changed

    def bold(self) -> bool:
        return self._exec_command("bold")

    def italic(self) -> bool:
        return self._exec_command("italic")

    def open_link_popover(self) -> None:
        self.link_popover_open = True

    def apply_link(self) -> bool:
        """Turn the selection into a link to link_url; no-op when it is empty."""
        if not self.link_url:
            return False
        changed = self._exec_command("createLink", self.link_url)
        self.link_url = ""
        self.link_popover_open = False
        return changed

    def unlink(self) -> bool:
        return self._exec_command("unlink")

    def render(self) -> str:
        """Render the field as HTML for the current session state."""
        soup = BeautifulSoup("", PARSER)

        if not self.session.is_edit_mode:
            element = soup.new_tag(self.element)
            if self.class_name:
                element['class'] = self.class_name
            if self.content_key:
                element['data-testid'] = f"text-{self.content_key}"
            _append_html(element, sanitize_html(self.local_value or self.placeholder))
            return str(element)

        wrapper = soup.new_tag('div', attrs={'class': 'editable-text-wrapper'})

        if self.show_toolbar:
            toolbar = soup.new_tag('div', attrs={'data-testid': 'rich-text-toolbar'})
            for name in ('bold', 'italic', 'link', 'unlink'):
                button = soup.new_tag('button', attrs={
                    'type': 'button',
                    'data-testid': f'button-{name}',
                })
                button.string = name.capitalize()
                toolbar.append(button)
            if self.link_popover_open:
                toolbar.append(soup.new_tag('input', attrs={
                    'value': self.link_url,
                    'placeholder': 'https://...',
                    'data-testid': 'input-link-url',
                }))
            wrapper.append(toolbar)

        classes = [self.class_name] if self.class_name else []
        classes.append('editable-text')
        if self.is_editing:
            classes.append('editable-text--active')

        element = soup.new_tag(self.element, attrs={
            'contenteditable': 'true',
            'class': ' '.join(classes),
            'data-testid': (
                f"editable-text-{self.content_key}" if self.content_key else "editable-text"
            ),
            'data-placeholder': self.placeholder,
        })
        source = self.surface.inner_html if self.is_editing else self.local_value
        _append_html(element, sanitize_html(source or ""))
        wrapper.append(element)
        return str(wrapper)
