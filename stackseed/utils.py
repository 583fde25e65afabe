"""Shared console helpers for stackseed.

Provides Rich-based progress reporting (stage headers, status lines, summary
tables) and small formatting helpers used by the orchestrator and the CLI.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_TITLES: dict[str, str] = {
    "creating_dirs": "Creating directories",
    "running_backend_tools": "Backend tooling",
    "writing_backend_files": "Backend files",
    "running_frontend_tools": "Frontend tooling",
    "writing_frontend_files": "Frontend files",
    "writing_root_files": "Root files",
    "initializing_vcs": "Git repository",
}

STAGE_COLORS: dict[str, str] = {
    "creating_dirs": "bright_cyan",
    "running_backend_tools": "bright_yellow",
    "writing_backend_files": "bright_green",
    "running_frontend_tools": "bright_yellow",
    "writing_frontend_files": "bright_green",
    "writing_root_files": "bright_green",
    "initializing_vcs": "bright_blue",
}


def print_stage_header(index: int, stage: str) -> None:
    """Print a full-width rule announcing a scaffolding stage.

    Args:
        index: 1-based position of the stage in the plan.
        stage: Stage identifier (a ``ScaffoldState`` value).
    """
    color = STAGE_COLORS.get(stage, "white")
    title = STAGE_TITLES.get(stage, stage.replace("_", " ").title())
    console.print()
    console.print(Rule(f"[bold {color}] {index}. {title} [/bold {color}]", style=color))


def print_step(message: str) -> None:
    """Print a dimmed per-step progress line."""
    console.print(f"  [dim]>[/dim] {escape(message)}", highlight=False)


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
