"""Edit-mode session: the per-mount gate for inline editing.

One EditSession is built at application start and handed to every field
editor. It decides whether editing affordances are active, owns the
change ledger, and runs the "Save Changes" action.

States:
    Viewing   effective edit mode off (initial)
    Editing   effective edit mode on; the ledger may hold edits
    is_saving orthogonal flag while a save is in flight
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from src.cms_client.errors import PageSaveError

from .change_ledger import ChangeLedger, split_change_key

logger = logging.getLogger(__name__)

SaveHandler = Callable[[Dict[str, Any]], Optional[List[str]]]


class EditSession:
    """Edit-mode state shared by all field editors of one page load.

    Example:
        >>> reconciler = SaveReconciler(api, cache)
        >>> session = EditSession(is_admin=True, on_save=reconciler.reconcile)
        >>> session.set_edit_mode(True)
        >>> session.register_change("homepage.heroTitle", "Welcome Home")
        >>> session.save_changes()
        ['homepage']
    """

    def __init__(
        self,
        is_admin: Union[bool, Callable[[], bool]],
        on_save: Optional[SaveHandler] = None,
    ):
        """Initialize a session in the Viewing state.

        Args:
            is_admin: Admin flag, or a callable re-read on every check
            on_save: Called with a snapshot of the ledger; returns saved page keys
        """
        self._is_admin = is_admin
        self._on_save = on_save
        self._edit_mode_requested = False
        self._is_saving = False
        self._pending = ChangeLedger()

    @property
    def is_admin(self) -> bool:
        if callable(self._is_admin):
            return bool(self._is_admin())
        return bool(self._is_admin)

    @property
    def is_edit_mode_requested(self) -> bool:
        return self._edit_mode_requested

    @property
    def is_edit_mode(self) -> bool:
        """Effective edit mode; never True for a non-admin."""
        return self.is_admin and self._edit_mode_requested

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def pending_changes(self) -> ChangeLedger:
        return self._pending

    @property
    def has_changes(self) -> bool:
        return len(self._pending) > 0

    def set_edit_mode(self, value: bool) -> None:
        """Request entering or leaving edit mode.

        Entering is a no-op for non-admins. Leaving discards every pending
        change without saving and without any network call.
        """
        if value and not self.is_admin:
            logger.debug("Ignoring edit mode request from non-admin session")
            return

        if not value and self.has_changes:
            logger.info(f"Leaving edit mode, discarding {len(self._pending)} unsaved change(s)")
            self.clear_changes()

        self._edit_mode_requested = bool(value)

    def register_change(self, key: str, value: Any) -> None:
        """Record a committed field edit under its "<pageKey>.<fieldKey>" key."""
        self._pending.register(key, value)
        logger.debug(f"Registered change: {key}")

    def clear_changes(self) -> None:
        self._pending.clear()

    def save_changes(self) -> List[str]:
        """Persist every pending change through the save handler.

        On success the drained entries leave the ledger. When one page of
        a multi-page save fails, entries of pages saved before it leave the
        ledger and the rest stay for a retry. The error is re-raised.

        Returns:
            Page keys that were saved ([] when nothing was pending)
        """
        if not self.has_changes:
            return []

        snapshot = self._pending.snapshot()
        self._is_saving = True
        try:
            saved = self._on_save(snapshot) if self._on_save else None
            self._pending.discard_entries(snapshot)
        except PageSaveError as e:
            logger.error(f"Failed to save changes: {e}")
            saved_pages = set(e.saved_pages)
            self._pending.discard_entries({
                key: value for key, value in snapshot.items()
                if split_change_key(key)[0] in saved_pages
            })
            raise
        except Exception as e:
            logger.error(f"Failed to save changes: {e}")
            raise
        finally:
            self._is_saving = False

        return list(saved or [])
