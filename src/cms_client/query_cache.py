"""Read cache for pages API queries.

Cached reads are keyed by tuples such as ("/api/pages",) for the page list
and ("/api/pages", "homepage") for one page. Invalidation matches by key
prefix unless exact=True, so invalidating ("/api/pages",) drops every
page read as well.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Tuple, TypeVar

logger = logging.getLogger(__name__)

QueryKey = Tuple[str, ...]
T = TypeVar('T')

PAGES_QUERY_KEY: QueryKey = ("/api/pages",)


def page_query_key(page_key: str) -> QueryKey:
    """Cache key for a single page document."""
    return PAGES_QUERY_KEY + (page_key,)


class QueryCache:
    """Thread-safe in-memory cache of query results.

    Example:
        >>> cache = QueryCache()
        >>> page = cache.get_or_fetch(page_query_key("homepage"), lambda: api.get_page("homepage"))
        >>> cache.invalidate(page_query_key("homepage"))
    """

    def __init__(self):
        self._entries: Dict[QueryKey, Any] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: QueryKey) -> bool:
        with self._lock:
            return tuple(key) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: QueryKey, default: Any = None) -> Any:
        with self._lock:
            return self._entries.get(tuple(key), default)

    def set(self, key: QueryKey, value: Any) -> None:
        with self._lock:
            self._entries[tuple(key)] = value

    def get_or_fetch(self, key: QueryKey, fetcher: Callable[[], T]) -> T:
        """Return the cached value for key, calling fetcher on a miss.

        The fetcher runs outside the lock. Errors it raises propagate and
        nothing is cached.
        """
        key = tuple(key)
        with self._lock:
            if key in self._entries:
                return self._entries[key]

        value = fetcher()

        with self._lock:
            self._entries[key] = value
        return value

    def invalidate(self, key: QueryKey, exact: bool = False) -> List[QueryKey]:
        """Drop cached reads for key (and, unless exact, every key under it).

        Returns:
            The keys that were dropped
        """
        prefix = tuple(key)
        with self._lock:
            if exact:
                dropped = [prefix] if prefix in self._entries else []
            else:
                dropped = [k for k in self._entries if k[:len(prefix)] == prefix]
            for k in dropped:
                del self._entries[k]

        logger.debug(f"Invalidated {len(dropped)} cached read(s) for {prefix}")
        return dropped

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
