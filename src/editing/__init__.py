"""Inline editing of page content.

Field editors commit edits into an EditSession's change ledger; the
SaveReconciler merges them into each page's stored content.
"""

from .autosave import Debouncer
from .change_ledger import ChangeLedger, group_by_page, make_change_key, split_change_key
from .edit_session import EditSession
from .edit_toggle import EditToggle, Notification
from .html_surface import HtmlSurface
from .image_editor import ImageFieldEditor
from .page_content_editor import PageContentEditor
from .sanitizer import sanitize_html
from .save_reconciler import SaveReconciler
from .text_editor import TextFieldEditor

__all__ = [
    "ChangeLedger",
    "Debouncer",
    "EditSession",
    "EditToggle",
    "HtmlSurface",
    "ImageFieldEditor",
    "Notification",
    "PageContentEditor",
    "SaveReconciler",
    "TextFieldEditor",
    "group_by_page",
    "make_change_key",
    "sanitize_html",
    "split_change_key",
]
