"""Shared pytest fixtures for the treeforge test suite.

Provides reusable fixtures for:
- The naming vocabulary used across the materializer tests
- Selection contexts
- Building template trees on disk from a ``{relative_path: content}`` map
- A scripted prompter fed from an in-memory stream
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from treeforge.config import ExtensionRewrite, SelectionContext, Vocabulary
from treeforge.prompts import Prompter


FRAMEWORKS = ("vanilla", "vue", "react", "svelte", "solid")
OPTIONS = ("pug", "tailwindcss", "scss", "sass")


# ---------------------------------------------------------------------------
# Vocabulary & selections
# ---------------------------------------------------------------------------

@pytest.fixture
def vocabulary() -> Vocabulary:
    """The electron project vocabulary with a React ``main.ts`` rewrite."""
    return Vocabulary(
        frameworks=FRAMEWORKS,
        options=OPTIONS,
        rewrites=(ExtensionRewrite(framework="react", source="main.ts", target="main.tsx"),),
    )


@pytest.fixture
def select() -> Callable[..., SelectionContext]:
    """Factory: ``select("react", "pug")`` -> SelectionContext."""

    def _select(framework: str, *options: str) -> SelectionContext:
        return SelectionContext.of(framework, options)

    return _select


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Factory writing a template tree under ``tmp_path/templates``.

    Keys ending in ``/`` create empty directories.
    """

    def _make(files: dict[str, str | bytes], root: str = "templates") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = base / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return base

    return _make


@pytest.fixture
def list_tree() -> Callable[[Path], set[str]]:
    """Function returning the relative POSIX paths of every file under a root."""

    def _list(root: Path) -> set[str]:
        return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}

    return _list


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

@pytest.fixture
def quiet_console() -> Console:
    """A Rich console writing into a buffer."""
    return Console(file=io.StringIO(), force_terminal=False, width=120)


@pytest.fixture
def scripted_prompter(quiet_console: Console) -> Callable[..., Prompter]:
    """Factory: ``scripted_prompter("2", "y")`` answers prompts in order."""

    def _make(*answers: str) -> Prompter:
        stream = io.StringIO("".join(f"{answer}\n" for answer in answers))
        return Prompter(console=quiet_console, stream=stream)

    return _make
