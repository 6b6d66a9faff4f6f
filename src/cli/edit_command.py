"""Edit command orchestration for CLI.

EditCommand runs one admin edit session from the command line: each
PAGE.FIELD=VALUE assignment goes through the same field editor commit path
an inline edit does, and the collected changes are saved through the edit
toggle and the save reconciler.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from src.cli.errors import CLIError, EditArgumentError, exit_code_for
from src.cli.models import EditorConfig, ExitCode
from src.cli.output import OutputHandler
from src.cms_client.api_wrapper import PagesAPI, validate_page_key
from src.cms_client.auth import Authenticator
from src.cms_client.errors import CMSError
from src.cms_client.query_cache import QueryCache, page_query_key
from src.editing.change_ledger import make_change_key, split_change_key
from src.editing.edit_session import EditSession
from src.editing.edit_toggle import EditToggle
from src.editing.image_editor import ImageFieldEditor
from src.editing.save_reconciler import SaveReconciler
from src.editing.text_editor import TextFieldEditor
from src.media.image_compression import compress_image, is_image_file
from src.models.compression_result import ImageFile

logger = logging.getLogger(__name__)

_URL_PATTERN = re.compile(r'^(https?:|data:)', re.IGNORECASE)

Assignment = Tuple[str, str, str]


def parse_assignment(argument: str) -> Assignment:
    """Split "PAGE.FIELD=VALUE" into (page_key, field_key, value).

    Raises:
        EditArgumentError: If the argument is malformed
    """
    target, separator, value = argument.partition('=')
    if not separator:
        raise EditArgumentError(argument)
    try:
        page_key, field_key = split_change_key(target.strip())
        validate_page_key(page_key)
    except ValueError:
        raise EditArgumentError(argument)
    return page_key, field_key, value


class EditCommand:
    """Applies field edits to pages and saves them in one batch.

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> cmd = EditCommand(output_handler=output)
        >>> exit_code = cmd.run(["homepage.heroTitle=Welcome Home"])
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[PagesAPI] = None,
        cache: Optional[QueryCache] = None,
        compressor=compress_image,
    ):
        """Initialize edit command with dependencies.

        Args:
            config: Editor settings (defaults if None)
            output_handler: OutputHandler for terminal output
            authenticator: Source of credentials and the admin flag
            api: Pages API client (built from the authenticator if None)
            cache: Read cache shared by this command's reads and saves
            compressor: Image compression function for uploads
        """
        self.config = config or EditorConfig()
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.compressor = compressor

    def _ensure_clients(self) -> None:
        if not self.authenticator:
            self.authenticator = Authenticator()
        if not self.api:
            self.api = PagesAPI(self.authenticator, timeout=self.config.request_timeout)

    def _current_content(self, page_key: str) -> Dict[str, Any]:
        page = self.cache.get_or_fetch(
            page_query_key(page_key),
            lambda: self.api.find_page(page_key),
        )
        return dict(page.content) if page is not None else {}

    def run(self, assignments: List[str], images: Optional[List[str]] = None) -> ExitCode:
        """Apply text and image edits, then save.

        Args:
            assignments: "PAGE.FIELD=VALUE" text edits (VALUE may be HTML)
            images: "PAGE.FIELD=PATH_OR_URL" image edits

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            text_edits = [parse_assignment(a) for a in assignments]
            image_edits = [parse_assignment(a) for a in images or []]

            if not text_edits and not image_edits:
                self.output_handler.warning("Nothing to edit")
                return ExitCode.SUCCESS

            self._ensure_clients()
            reconciler = SaveReconciler(self.api, self.cache)
            session = EditSession(is_admin=self.authenticator.is_admin, on_save=reconciler.reconcile)
            toggle = EditToggle(session, notifier=self.output_handler.notify)

            if not toggle.visible:
                self.output_handler.error("Editing requires an admin account (CMS_IS_ADMIN)")
                return ExitCode.AUTH_ERROR

            toggle.toggle()

            for page_key, field_key, value in text_edits:
                self._edit_text(session, page_key, field_key, value)

            for page_key, field_key, value in image_edits:
                self._edit_image(session, page_key, field_key, value)

            if not session.has_changes:
                self.output_handler.print_save_summary([])
                return ExitCode.SUCCESS

            pages = session.pending_changes.page_keys()
            with self.output_handler.spinner(f"Saving {len(pages)} page(s)..."):
                ok = toggle.save()

            remaining = set(session.pending_changes.page_keys())
            self.output_handler.print_save_summary(
                [p for p in pages if p not in remaining],
                pending_count=len(session.pending_changes),
            )
            return ExitCode.SUCCESS if ok else ExitCode.SAVE_FAILED

        except (CMSError, CLIError) as e:
            logger.error(f"Edit failed: {e}")
            self.output_handler.error(str(e))
            code = exit_code_for(e)
            if code == ExitCode.AUTH_ERROR:
                self.output_handler.info("Check CMS_URL and CMS_API_TOKEN environment variables")
            return code

        except Exception as e:
            logger.exception("Unexpected error during edit")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _edit_text(self, session: EditSession, page_key: str, field_key: str, value: str) -> None:
        current = self._current_content(page_key).get(field_key, "")
        if not isinstance(current, str):
            current = str(current)

        change_key = make_change_key(page_key, field_key)
        editor = TextFieldEditor(
            session,
            current,
            on_change=lambda v: self.output_handler.debug(f"{change_key} = {v}"),
            element="div",
            content_key=change_key,
        )
        editor.focus()
        editor.surface.set_html(value)
        if editor.blur():
            self.output_handler.info(f"Changed {change_key}")
        else:
            self.output_handler.info(f"Unchanged {change_key}, skipped")

    def _edit_image(self, session: EditSession, page_key: str, field_key: str, value: str) -> None:
        current = self._current_content(page_key).get(field_key, "")
        change_key = make_change_key(page_key, field_key)
        editor = ImageFieldEditor(
            session,
            current if isinstance(current, str) else "",
            alt=field_key,
            on_change=lambda v: self.output_handler.debug(f"{change_key} updated"),
            content_key=change_key,
            compressor=self.compressor,
            max_size_mb=self.config.image_max_size_mb,
            max_width_or_height=self.config.image_max_dimension,
        )
        editor.click()

        if _URL_PATTERN.match(value.strip()):
            editor.set_image_url(value)
            if not editor.apply_url():
                raise CLIError(f"Cannot change image {change_key} outside edit mode")
            self.output_handler.info(f"Changed {change_key} to {value.strip()}")
            return

        path = Path(value).expanduser()
        if not path.is_file():
            raise CLIError(f"Image file not found: {value}")

        image_file = ImageFile.from_path(path)
        if not is_image_file(image_file):
            raise CLIError(f"Not an image file: {value}")

        if not editor.upload_file(image_file):
            raise CLIError(f"Failed to upload image: {value}")

        if editor.last_compression is not None and editor.last_compression.compression_ratio > 0:
            self.output_handler.info(
                f"{path.name}: {editor.last_compression.compression_ratio}% smaller after compression"
            )
