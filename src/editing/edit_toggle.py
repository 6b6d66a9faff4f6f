"""Edit toggle: the admin's "Edit Page / Exit Edit / Save Changes" control."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from src.cms_client.errors import CMSError, PageSaveError
from src.models.page_document import display_title

from .edit_session import EditSession

logger = logging.getLogger(__name__)

EDIT_LABEL = "Edit Page"
EXIT_LABEL = "Exit Edit"


@dataclass
class Notification:
    """A toast-style message shown after a save."""
    title: str
    description: str = ""
    variant: str = "default"

    @property
    def is_destructive(self) -> bool:
        return self.variant == "destructive"


Notifier = Callable[[Notification], None]


class EditToggle:
    """Controller for the floating edit-mode control.

    Hidden for non-admins. While editing with pending changes it also
    offers "Save Changes"; leaving edit mode with pending changes saves
    them first and stays in edit mode if that save fails.
    """

    def __init__(self, session: EditSession, notifier: Optional[Notifier] = None):
        self.session = session
        self.notifier = notifier

    @property
    def visible(self) -> bool:
        return self.session.is_admin

    @property
    def toggle_label(self) -> str:
        return EXIT_LABEL if self.session.is_edit_mode else EDIT_LABEL

    @property
    def is_disabled(self) -> bool:
        return self.session.is_saving

    @property
    def show_save_button(self) -> bool:
        return self.session.is_edit_mode and self.session.has_changes

    def _notify(self, notification: Notification) -> None:
        if self.notifier is not None:
            self.notifier(notification)

    def toggle(self) -> bool:
        """Enter or leave edit mode.

        Returns:
            True if the mode changed
        """
        if not self.visible or self.is_disabled:
            return False

        if self.session.is_edit_mode:
            if self.session.has_changes and not self.save():
                return False
            self.session.set_edit_mode(False)
            return True

        self.session.set_edit_mode(True)
        return self.session.is_edit_mode

    def save(self) -> bool:
        """Save every pending change and report the outcome.

        Returns:
            True if everything pending was saved
        """
        try:
            saved: List[str] = self.session.save_changes()
        except PageSaveError as e:
            description = f"Could not save {display_title(e.page_key)}"
            if e.saved_pages:
                names = ", ".join(display_title(k) for k in e.saved_pages)
                description += f" ({names} saved)"
            self._notify(Notification("Save failed", description, "destructive"))
            return False
        except CMSError as e:
            self._notify(Notification("Save failed", str(e), "destructive"))
            return False
        except ValueError as e:
            logger.error(f"Save rejected: {e}")
            self._notify(Notification("Save failed", str(e), "destructive"))
            return False

        if saved:
            names = ", ".join(display_title(k) for k in saved)
            self._notify(Notification("Changes saved", f"Saved {names}"))
        return True
