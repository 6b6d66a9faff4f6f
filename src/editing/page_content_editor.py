"""Page-scoped content editing with debounced autosave.

PageContentEditor holds a local working copy of one page's content and
SEO metadata. Every update restarts an autosave timer; when it fires the
whole working copy of that page is written with a partial update.
"""

import logging
import threading
from typing import Any, Dict, Optional

from src.cms_client.api_wrapper import PagesAPI, validate_page_key
from src.cms_client.errors import CMSError
from src.cms_client.query_cache import QueryCache, page_query_key
from src.models.page_document import PageDocument

from .autosave import Debouncer, TimerFactory

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 2000


class PageContentEditor:
    """Local working copy of one page with autosave.

    Attributes:
        page: Document as last loaded (None until loaded or if missing)
        local_content: Working copy of the page's content map
        meta_title: Working copy of the SEO title
        meta_description: Working copy of the SEO description
        has_unsaved_changes: An update has not been persisted yet
        is_saving: A save is in flight
        is_loading: load() is in flight
        is_error: The last load failed
        error: The exception from the last failed load

    Example:
        >>> editor = PageContentEditor(api, "about", cache=cache)
        >>> editor.load()
        >>> editor.update_content("title", "About Us")
        >>> editor.save()
    """

    def __init__(
        self,
        api: PagesAPI,
        slug: str,
        cache: Optional[QueryCache] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        auto_save: bool = True,
        timer_factory: TimerFactory = threading.Timer,
    ):
        validate_page_key(slug)

        self.api = api
        self.slug = slug
        self.cache = cache if cache is not None else QueryCache()
        self.auto_save = auto_save
        self._debouncer = Debouncer(debounce_ms / 1000.0, self._persist, timer_factory)
        self._closed = False
        self._change_lock = threading.Lock()
        self._change_count = 0

        self.page: Optional[PageDocument] = None
        self.local_content: Dict[str, Any] = {}
        self.meta_title = ""
        self.meta_description = ""
        self.has_unsaved_changes = False
        self.is_saving = False
        self.is_loading = False
        self.is_error = False
        self.error: Optional[Exception] = None

    def load(self) -> Optional[PageDocument]:
        """Read the page through the query cache and reset the working copy.

        A page that does not exist (or cannot be read) leaves an empty
        working copy with is_error set.
        """
        self.is_loading = True
        try:
            page = self.cache.get_or_fetch(
                page_query_key(self.slug),
                lambda: self.api.get_page(self.slug),
            )
        except CMSError as e:
            logger.warning(f"Could not load page {self.slug}: {e}")
            self.page = None
            self.is_error = True
            self.error = e
            return None
        finally:
            self.is_loading = False

        self.page = page
        self.is_error = False
        self.error = None
        self.local_content = dict(page.content)
        self.meta_title = page.meta_title or ""
        self.meta_description = page.meta_description or ""
        return page

    def _payload(self) -> Dict[str, Any]:
        return {
            'content': dict(self.local_content),
            'meta_title': self.meta_title,
            'meta_description': self.meta_description,
        }

    def _changed(self) -> None:
        with self._change_lock:
            self._change_count += 1
            self.has_unsaved_changes = True
        if self.auto_save and not self._closed:
            self._debouncer.schedule(self._payload())

    def update_content(self, key: str, value: Any) -> None:
        self.local_content[key] = value
        self._changed()

    def update_meta_title(self, value: str) -> None:
        self.meta_title = value
        self._changed()

    def update_meta_description(self, value: str) -> None:
        self.meta_description = value
        self._changed()

    def _persist(self, payload: Dict[str, Any], seen: Optional[int] = None) -> PageDocument:
        if seen is None:
            with self._change_lock:
                seen = self._change_count
        self.is_saving = True
        try:
            page = self.api.update_page(self.slug, **payload)
        finally:
            self.is_saving = False

        self.cache.invalidate(page_query_key(self.slug))
        with self._change_lock:
            # An edit made while the request was in flight is not in payload
            if self._change_count == seen:
                self.has_unsaved_changes = False
        logger.info(f"Saved page {self.slug}")
        return page

    def save(self) -> PageDocument:
        """Persist the working copy now, cancelling any pending autosave.

        Raises:
            CMSError: If the update fails (has_unsaved_changes stays set)
        """
        self._debouncer.cancel()
        with self._change_lock:
            seen = self._change_count
            payload = self._payload()
        return self._persist(payload, seen)

    @property
    def autosave_pending(self) -> bool:
        return self._debouncer.pending

    def close(self) -> None:
        """Tear down: cancel the pending autosave. A closed editor never autosaves."""
        self._closed = True
        self._debouncer.cancel()
