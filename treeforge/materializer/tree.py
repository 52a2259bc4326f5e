"""Recursive materialization of a template tree into a destination tree.

For each entry of the source tree, the name conditions decide whether it is
part of the selected variant.  Included directories are created and walked,
included files get a clean destination name and are either rendered (when
they carry the render marker) or copied byte for byte.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from treeforge.config import SelectionContext, Vocabulary
from treeforge.utils import ensure_dir, print_warning

from .errors import FilesystemError
from .evaluator import should_include_directory, should_include_file
from .grammar import split_name
from .sanitizer import clean_directory_name, destination_name
from .templates import TemplateRenderer


@dataclass
class MaterializeReport:
    """What one materialization call produced."""

    directories: list[Path] = field(default_factory=list)
    rendered: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    missing_directories: list[Path] = field(default_factory=list)

    @property
    def written(self) -> list[Path]:
        return [*self.rendered, *self.copied]

    def summary(self) -> dict[str, str]:
        return {
            "Directories": str(len(self.directories)),
            "Rendered files": str(len(self.rendered)),
            "Copied files": str(len(self.copied)),
            "Skipped entries": str(len(self.skipped)),
        }


class TreeMaterializer:
    """Walks a template tree and writes the selected variant of it.

    The walk is depth-first and sequential.  Siblings are visited in sorted
    name order so repeated runs over the same tree behave identically.
    """

    def __init__(self, vocabulary: Vocabulary, renderer: TemplateRenderer | None = None) -> None:
        self.vocabulary = vocabulary
        self.renderer = renderer or TemplateRenderer(vocabulary=vocabulary)

    # -- Public API --------------------------------------------------------

    async def materialize(
        self,
        source_dir: str | Path,
        dest_dir: str | Path,
        selection: SelectionContext,
        variables: dict[str, Any] | None = None,
    ) -> MaterializeReport:
        """Materialize *source_dir* into *dest_dir* for *selection*.

        A missing source directory only produces a warning and an empty
        report.  Any other I/O failure raises :class:`FilesystemError`;
        template failures raise :class:`RenderError`.
        """
        report = MaterializeReport()
        await self._walk(Path(source_dir), Path(dest_dir), selection, variables or {}, report)
        return report

    async def materialize_file(
        self,
        source: str | Path,
        dest_dir: str | Path,
        selection: SelectionContext,
        variables: dict[str, Any] | None = None,
        report: MaterializeReport | None = None,
    ) -> Path:
        """Render or copy one template file into *dest_dir*.

        Conditions are not evaluated here; the caller decides inclusion.

        Returns:
            The written destination path.
        """
        source = Path(source)
        target = Path(dest_dir) / destination_name(source.name, selection, self.vocabulary)
        if split_name(source.name, self.vocabulary).rendered:
            content = await self.renderer.render_file(source, variables, selection)
            await asyncio.to_thread(_write_text, target, content)
            if report is not None:
                report.rendered.append(target)
        else:
            await asyncio.to_thread(_copy_file, source, target)
            if report is not None:
                report.copied.append(target)
        return target

    # -- Traversal ---------------------------------------------------------

    async def _walk(
        self,
        source: Path,
        dest: Path,
        selection: SelectionContext,
        variables: dict[str, Any],
        report: MaterializeReport,
    ) -> None:
        if not await asyncio.to_thread(source.exists):
            print_warning(f"Template directory does not exist: {source}")
            report.missing_directories.append(source)
            return

        await asyncio.to_thread(_make_dir, dest)
        entries = await asyncio.to_thread(_list_entries, source)

        for entry, is_dir in entries:
            if is_dir:
                if not should_include_directory(entry.name, selection, self.vocabulary):
                    report.skipped.append(entry)
                    continue
                target = dest / clean_directory_name(entry.name, self.vocabulary)
                await asyncio.to_thread(_make_dir, target)
                report.directories.append(target)
                await self._walk(entry, target, selection, variables, report)
            elif should_include_file(entry.name, selection, self.vocabulary):
                await self.materialize_file(entry, dest, selection, variables, report)
            else:
                report.skipped.append(entry)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _list_entries(directory: Path) -> list[tuple[Path, bool]]:
    """Synchronous helper: sorted ``(path, is_dir)`` pairs of a directory."""
    try:
        return [(entry, entry.is_dir()) for entry in sorted(directory.iterdir())]
    except OSError as exc:
        raise FilesystemError(f"Cannot list directory ({exc.strerror or exc})", directory) from exc


def _make_dir(path: Path) -> None:
    try:
        ensure_dir(path)
    except OSError as exc:
        raise FilesystemError(f"Cannot create directory ({exc.strerror or exc})", path) from exc


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Cannot write file ({exc.strerror or exc})", path) from exc


def _copy_file(source: Path, target: Path) -> None:
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise FilesystemError(f"Cannot copy {source.name} ({exc.strerror or exc})", target) from exc
