"""Exceptions raised by the materialization engine."""

from __future__ import annotations

from pathlib import Path


class TreeforgeError(Exception):
    """Base class for treeforge errors."""


class RenderError(TreeforgeError):
    """Raised when a template fails to render.

    Covers malformed template syntax and access to undefined bindings.
    """

    def __init__(self, message: str, template: str | Path | None = None, lineno: int | None = None):
        self.template = str(template) if template is not None else None
        self.lineno = lineno
        location = ""
        if self.template:
            location = f" in {self.template}"
            if lineno:
                location += f" (line {lineno})"
        super().__init__(f"Template rendering failed{location}: {message}")


class FilesystemError(TreeforgeError):
    """Raised when reading, writing, copying or creating a path fails."""

    def __init__(self, message: str, path: str | Path):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class ProjectNotFoundError(TreeforgeError):
    """Raised when no project type matches the requested name."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        choices = ", ".join(available) if available else "none"
        super().__init__(f'No project found for type "{name}" (available: {choices})')
