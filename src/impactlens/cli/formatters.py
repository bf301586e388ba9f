"""Terminal output formatting with rich."""

import json
import sys
from typing import Any

from rich.console import Console
from rich.json import JSON
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from impactlens.schemas.inputs import VIEWER_PROFILES, ViewerType


class OutputFormatter:
    """Formats CLI output for the terminal."""

    def __init__(self, force_color: bool = False, no_color: bool = False):
        """Initialize formatter."""
        force_terminal = force_color or None
        self.console = Console(force_terminal=force_terminal, no_color=no_color, file=sys.stdout)
        self.err_console = Console(force_terminal=force_terminal, no_color=no_color, file=sys.stderr)

    def print_json(self, data: Any, indent: int = 2) -> None:
        """Print JSON with syntax highlighting."""
        self.console.print(JSON(json.dumps(data, indent=indent, ensure_ascii=False)))

    def print_markdown(self, text: str) -> None:
        """Print markdown with rich rendering."""
        self.console.print(Markdown(text))

    def print_prompt(self, title: str, text: str) -> None:
        self.console.print(Panel(Text(text), title=title, expand=True))

    def print_stats(self, stats: dict[str, Any], title: str = "Generation Statistics") -> None:
        """Print statistics in a formatted table."""
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        for key, value in stats.items():
            table.add_row(key.replace("_", " ").title(), str(value))
        self.console.print(table)

    def print_viewers(self, selected: ViewerType) -> None:
        table = Table(title="Viewer Lenses", show_header=True, header_style="bold magenta")
        table.add_column("Viewer", style="cyan")
        table.add_column("Label")
        table.add_column("Focus", style="green")
        for viewer, profile in VIEWER_PROFILES.items():
            marker = " (default)" if viewer == selected else ""
            table.add_row(f"{viewer.value}{marker}", profile.label, profile.description)
        self.console.print(table)

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def print_error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)

    def print_warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")
