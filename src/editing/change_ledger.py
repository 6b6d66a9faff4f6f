"""Change ledger: uncommitted field edits keyed by "<pageKey>.<fieldKey>".

Re-registering a key overwrites its value; no history is kept. Iteration
order carries no meaning because saves group entries by page.
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

from src.cms_client.api_wrapper import validate_page_key

KEY_SEPARATOR = "."


def make_change_key(page_key: str, field_key: str) -> str:
    """Build the composite key for a field on a page."""
    return f"{page_key}{KEY_SEPARATOR}{field_key}"


def split_change_key(change_key: str) -> Tuple[str, str]:
    """Split a composite key on its first "." into (page_key, field_key).

    Field keys may themselves contain dots; page keys never do.

    Raises:
        ValueError: If the key has no separator or an empty side
    """
    if not isinstance(change_key, str):
        raise ValueError(f"Change key must be a string, got {type(change_key).__name__}")

    page_key, separator, field_key = change_key.partition(KEY_SEPARATOR)
    if not separator or not page_key or not field_key:
        raise ValueError(
            f"Invalid change key '{change_key}': expected '<pageKey>.<fieldKey>'"
        )
    return page_key, field_key


def group_by_page(changes: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Partition composite-key changes into {page_key: {field_key: value}}."""
    grouped: Dict[str, Dict[str, Any]] = {}
    for change_key, value in changes.items():
        page_key, field_key = split_change_key(change_key)
        grouped.setdefault(page_key, {})[field_key] = value
    return grouped


class ChangeLedger:
    """Ordered map of pending edits awaiting save.

    Example:
        >>> ledger = ChangeLedger()
        >>> ledger.register("homepage.heroTitle", "Welcome")
        >>> ledger.register("homepage.heroTitle", "Welcome Home")
        >>> len(ledger), ledger.get("homepage.heroTitle")
        (1, 'Welcome Home')
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, change_key: object) -> bool:
        return change_key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def register(self, change_key: str, value: Any) -> None:
        """Record (or overwrite) the pending value for a composite key.

        Raises:
            ValueError: If change_key is not "<pageKey>.<fieldKey>" or the
                page key is not one the Pages API accepts
        """
        page_key, _ = split_change_key(change_key)
        validate_page_key(page_key)
        self._entries[change_key] = value

    def get(self, change_key: str, default: Any = None) -> Any:
        return self._entries.get(change_key, default)

    def items(self) -> Iterable[Tuple[str, Any]]:
        return list(self._entries.items())

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the current entries, safe to hand to a save."""
        return dict(self._entries)

    def page_keys(self) -> List[str]:
        """Distinct page keys with pending edits, in first-seen order."""
        seen: Dict[str, None] = {}
        for change_key in self._entries:
            seen.setdefault(split_change_key(change_key)[0], None)
        return list(seen)

    def clear(self) -> None:
        self._entries.clear()

    def discard_entries(self, drained: Mapping[str, Any]) -> None:
        """Remove entries that a save drained.

        An entry is kept if its value was overwritten after the snapshot
        was taken, so an edit made during a save is not lost.
        """
        for change_key, value in drained.items():
            if change_key in self._entries and self._entries[change_key] is value:
                del self._entries[change_key]
