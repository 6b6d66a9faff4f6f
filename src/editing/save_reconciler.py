"""Save reconciler: turns a drained change ledger into page updates.

Changes are grouped by page key. For each page, in order, the current
document is fetched, the changed fields are merged over its content and
the merged content is written back. The server replaces the whole content
field on update, so the fetch is what keeps untouched fields alive.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from src.cms_client.api_wrapper import PagesAPI, validate_page_key
from src.cms_client.errors import CMSError, PageNotFoundError, PageSaveError
from src.cms_client.query_cache import PAGES_QUERY_KEY, QueryCache, page_query_key
from src.models.page_document import display_title

from .change_ledger import group_by_page

logger = logging.getLogger(__name__)


class SaveReconciler:
    """Persists grouped field edits page by page.

    Example:
        >>> reconciler = SaveReconciler(api, cache)
        >>> reconciler.reconcile({"homepage.heroTitle": "A", "about.title": "B"})
        ['homepage', 'about']
    """

    def __init__(self, api: PagesAPI, cache: Optional[QueryCache] = None):
        self.api = api
        self.cache = cache

    def _fetch_current(self, page_key: str) -> Dict[str, Any]:
        """Current content of a page; {} if it is missing or unreadable."""
        try:
            page = self.api.get_page(page_key)
        except PageNotFoundError:
            logger.debug(f"Page {page_key} does not exist yet, creating it")
            return {}
        except CMSError as e:
            logger.warning(f"Could not read page {page_key}, saving changes over empty content: {e}")
            return {}
        return dict(page.content or {})

    def reconcile(self, changes: Mapping[str, Any]) -> List[str]:
        """Merge and persist changes, one page at a time.

        Args:
            changes: Composite-keyed edits ("<pageKey>.<fieldKey>" -> value)

        Returns:
            Page keys that were saved, in the order they were saved

        Raises:
            ValueError: If a change key is malformed (nothing is written)
            PageSaveError: On the first failed update; pages after it are
                not attempted and saved_pages lists the ones before it
        """
        grouped = group_by_page(changes)
        for page_key in grouped:
            validate_page_key(page_key)
        saved: List[str] = []

        try:
            for page_key, fields in grouped.items():
                merged = {**self._fetch_current(page_key), **fields}
                try:
                    self.api.update_page(
                        page_key,
                        title=display_title(page_key),
                        content=merged,
                    )
                except CMSError as e:
                    raise PageSaveError(page_key, saved_pages=saved, reason=str(e)) from e
                saved.append(page_key)
                logger.info(f"Saved {len(fields)} field(s) on page {page_key}")
        finally:
            self._invalidate(saved)

        return saved

    def _invalidate(self, saved: List[str]) -> None:
        if self.cache is None or not saved:
            return
        self.cache.invalidate(PAGES_QUERY_KEY, exact=True)
        for page_key in saved:
            self.cache.invalidate(page_query_key(page_key))
