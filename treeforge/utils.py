"""Shared utility functions for treeforge.

Provides Rich-based console reporting, package-name normalisation and small
file-system and formatting helpers used by the CLI and the project builders.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_package_name(name: str) -> str:
    """Convert an arbitrary project name to a valid package name.

    * Lowercases the input.
    * Replaces every character outside ``[a-z0-9-]`` with a hyphen.
    * Collapses consecutive hyphens and strips leading/trailing hyphens.

    Examples::

        to_package_name("My Project") -> "my-project"
        to_package_name("  @scope/App_2  ") -> "scope-app-2"
    """
    result = re.sub(r"[^a-z0-9-]", "-", (name or "").strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def recreate_dir(path: str | Path) -> Path:
    """Remove *path* if it exists, then create it empty."""
    dir_path = Path(path)
    if dir_path.is_dir() and not dir_path.is_symlink():
        shutil.rmtree(dir_path)
    elif dir_path.exists() or dir_path.is_symlink():
        dir_path.unlink()
    dir_path.mkdir(parents=True)
    return dir_path


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.42)  -> "0.4s"
        format_duration(65.2)  -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a cyan informational message."""
    console.print(f"[cyan]{message}[/cyan]")
