"""Main CLI entry point for the page-editor command.

This module provides the Typer application for inspecting and editing the
structured content of site pages from a terminal.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from src.cli import __version__
from src.cli.config import ConfigLoader
from src.cli.edit_command import EditCommand
from src.cli.errors import CLIError, exit_code_for
from src.cli.meta_command import MetaCommand
from src.cli.models import EditorConfig, ExitCode
from src.cli.output import OutputHandler
from src.cms_client.api_wrapper import PagesAPI
from src.cms_client.auth import Authenticator
from src.cms_client.errors import CMSError
from src.editing.sanitizer import sanitize_html

app = typer.Typer(
    name="page-editor",
    help="""Edit the structured content of site pages.

QUICK START:
  page-editor show homepage                                  # Print a page's fields
  page-editor edit homepage.heroTitle="Welcome Home"         # Change a field and save
  page-editor edit --image homepage.heroImage=./hero.jpg     # Upload a compressed image
  page-editor meta about --title "About Us"                  # Update SEO metadata
  page-editor sanitize draft.html                            # Clean HTML the way saves do""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Global options shared by every subcommand."""
    config: EditorConfig
    verbosity: int = 0
    no_color: bool = False


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"page-editor_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"page-editor version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the editor config file",
        metavar="PATH",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Edit the structured content of site pages."""
    _configure_logging(verbosity, logdir)

    try:
        config = ConfigLoader.load(config_path)
    except CLIError as e:
        OutputHandler(verbosity=verbosity, no_color=no_color).error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    ctx.obj = CLIState(config=config, verbosity=verbosity, no_color=no_color)


def _output(state: CLIState) -> OutputHandler:
    return OutputHandler(verbosity=state.verbosity, no_color=state.no_color)


@app.command()
def show(
    ctx: typer.Context,
    page_key: str = typer.Argument(..., help="Page key, e.g. homepage"),
) -> None:
    """Print a page's metadata and content fields."""
    state: CLIState = ctx.obj
    output = _output(state)

    try:
        api = PagesAPI(Authenticator(), timeout=state.config.request_timeout)
        with output.spinner(f"Fetching {page_key}..."):
            page = api.get_page(page_key)
    except ValueError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except CMSError as e:
        logger.error(f"Could not fetch page {page_key}: {e}")
        output.error(str(e))
        raise typer.Exit(exit_code_for(e))

    output.print_page(page)


@app.command()
def edit(
    ctx: typer.Context,
    assignments: Optional[List[str]] = typer.Argument(
        None,
        help="Text edits as PAGE.FIELD=VALUE (VALUE may contain HTML)",
        metavar="PAGE.FIELD=VALUE...",
    ),
    images: Optional[List[str]] = typer.Option(
        None,
        "--image",
        help="Image edit as PAGE.FIELD=PATH_OR_URL (can be used multiple times)",
        metavar="PAGE.FIELD=PATH_OR_URL",
    ),
) -> None:
    """Change page fields and save them in one batch."""
    state: CLIState = ctx.obj
    command = EditCommand(config=state.config, output_handler=_output(state))
    raise typer.Exit(command.run(assignments or [], images or []))


@app.command()
def meta(
    ctx: typer.Context,
    page_key: str = typer.Argument(..., help="Page key, e.g. about"),
    title: Optional[str] = typer.Option(None, "--title", help="SEO title"),
    description: Optional[str] = typer.Option(None, "--description", help="SEO description"),
) -> None:
    """Update a page's SEO title and description."""
    state: CLIState = ctx.obj
    command = MetaCommand(config=state.config, output_handler=_output(state))
    raise typer.Exit(command.run(page_key, title=title, description=description))


@app.command()
def sanitize(
    ctx: typer.Context,
    file: Optional[str] = typer.Argument(None, help="HTML file to sanitize (stdin if omitted)"),
) -> None:
    """Print HTML cleaned the way field editors clean it before saving."""
    state: CLIState = ctx.obj
    output = _output(state)

    if file:
        try:
            raw_html = Path(file).read_text(encoding="utf-8")
        except OSError as e:
            output.error(f"Could not read {file}: {e}")
            raise typer.Exit(ExitCode.GENERAL_ERROR)
    else:
        raw_html = sys.stdin.read()

    typer.echo(sanitize_html(raw_html))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
