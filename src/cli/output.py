"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, a spinner for API calls, page listings and save
notifications. Supports verbosity levels and the --no-color flag.
"""

import json
from contextlib import contextmanager
from typing import Iterator, List

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.table import Table

from src.editing.edit_toggle import Notification
from src.models.page_document import PageDocument, display_title


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Logging verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Saved Homepage")
        >>> with handler.spinner("Saving..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message verbatim, without markup or highlighting."""
        self.console.print(message, markup=False, highlight=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs.

        Example:
            >>> with handler.spinner("Fetching page..."):
            ...     page = api.get_page("homepage")
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def notify(self, notification: Notification) -> None:
        """Display a save notification (destructive ones in red)."""
        if notification.is_destructive:
            self.error(f"{notification.title}: {notification.description}")
        else:
            self.success(f"{notification.title}: {notification.description}")

    def print_page(self, page: PageDocument) -> None:
        """Display a page's metadata and content fields as a table."""
        self.console.print(f"\n[bold]{escape(page.title or display_title(page.page_key))}[/bold]")
        if page.meta_title:
            self.console.print(f"  Meta title: {escape(page.meta_title)}")
        if page.meta_description:
            self.console.print(f"  Meta description: {escape(page.meta_description)}")
        if page.updated_at:
            self.console.print(f"  [dim]Updated: {page.updated_at.isoformat()}[/dim]")

        if not page.content:
            self.console.print("\n[yellow]No content fields[/yellow]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Field")
        table.add_column("Value", overflow="fold")
        for field_key, value in sorted(page.content.items()):
            text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
            table.add_row(escape(field_key), escape(_shorten(text)))
        self.console.print(table)

    def print_save_summary(self, saved_pages: List[str], pending_count: int = 0) -> None:
        """Display the outcome of a save."""
        self.console.print("\n[bold]Save Summary:[/bold]")

        for page_key in saved_pages:
            self.console.print(f"  [green]↑[/green] Saved: {escape(display_title(page_key))}")

        if pending_count > 0:
            self.console.print(f"  [red]⚡[/red] Unsaved: {pending_count} change(s)")

        if not saved_pages and pending_count == 0:
            self.console.print("\n[yellow]No changes to save[/yellow]")


def _shorten(text: str, limit: int = 120) -> str:
    # data URLs from uploaded images are huge
    if len(text) <= limit:
        return text
    return f"{text[:limit - 3]}..."
