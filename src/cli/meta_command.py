"""Meta command: update one page's SEO title and description."""

import logging
from typing import Optional

from src.cli.errors import CLIError, exit_code_for
from src.cli.models import EditorConfig, ExitCode
from src.cli.output import OutputHandler
from src.cms_client.api_wrapper import PagesAPI
from src.cms_client.auth import Authenticator
from src.cms_client.errors import CMSError, PageNotFoundError
from src.cms_client.query_cache import QueryCache
from src.editing.page_content_editor import PageContentEditor
from src.models.page_document import display_title

logger = logging.getLogger(__name__)


class MetaCommand:
    """Writes SEO metadata through a page-scoped PageContentEditor."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[PagesAPI] = None,
        cache: Optional[QueryCache] = None,
    ):
        self.config = config or EditorConfig()
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.api = api
        self.cache = cache if cache is not None else QueryCache()

    def run(
        self,
        page_key: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ExitCode:
        """Update the page's meta title and/or description.

        Returns:
            ExitCode indicating success or specific failure type
        """
        if title is None and description is None:
            self.output_handler.warning("Nothing to update (use --title or --description)")
            return ExitCode.SUCCESS

        editor = None
        try:
            if not self.api:
                self.authenticator = self.authenticator or Authenticator()
                self.api = PagesAPI(self.authenticator, timeout=self.config.request_timeout)

            editor = PageContentEditor(
                self.api,
                page_key,
                cache=self.cache,
                debounce_ms=self.config.autosave_debounce_ms,
                auto_save=self.config.autosave_enabled,
            )
            editor.load()
            if editor.is_error and not isinstance(editor.error, PageNotFoundError):
                raise editor.error
            if editor.is_error:
                self.output_handler.info(f"{display_title(page_key)} does not exist yet, creating it")

            if title is not None:
                editor.update_meta_title(title)
            if description is not None:
                editor.update_meta_description(description)

            with self.output_handler.spinner(f"Saving {display_title(page_key)}..."):
                editor.save()

            self.output_handler.success(f"Saved metadata for {display_title(page_key)}")
            return ExitCode.SUCCESS

        except ValueError as e:
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (CMSError, CLIError) as e:
            logger.error(f"Metadata update failed: {e}")
            self.output_handler.error(str(e))
            return exit_code_for(e)

        except Exception as e:
            logger.exception("Unexpected error during metadata update")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

        finally:
            if editor is not None:
                editor.close()
