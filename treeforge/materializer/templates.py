"""Jinja2 template rendering for materialized files.

Provides the TemplateRenderer class which renders template text with a merged
context: base variables, per-call variables, and predicate helpers derived
from the selection context (``has_option('pug')``, ``is_react()``, ...).
Undefined bindings and malformed templates raise :class:`RenderError`.
"""

from __future__ import annotations

import asyncio
import re
from functools import partial
from pathlib import Path
from typing import Any, Callable

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    select_autoescape,
)

from treeforge.config import SelectionContext, Vocabulary
from treeforge.utils import to_package_name

from .errors import FilesystemError, RenderError


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 template text for project scaffolding.

    ``base_context`` is merged into every render call, underneath the
    per-call variables.  When a ``template_dir`` is given, templates can
    ``{% include %}`` or ``{% extends %}`` files relative to it.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        *,
        base_context: dict[str, Any] | None = None,
        vocabulary: Vocabulary | None = None,
    ) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else None
        self.base_context: dict[str, Any] = dict(base_context or {})
        self.vocabulary = vocabulary
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)) if self.template_dir else None,
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter
        self.env.filters["package_name"] = to_package_name

    # -- Context -----------------------------------------------------------

    def build_context(
        self,
        variables: dict[str, Any] | None = None,
        selection: SelectionContext | None = None,
    ) -> dict[str, Any]:
        """Merge base context, call variables and selection helpers.

        Later sources win.  Without an explicit *selection*, the ``framework``
        and ``options`` entries of the merged variables are used.
        """
        merged = {**self.base_context, **(variables or {})}
        if selection is None:
            selection = SelectionContext.of(
                merged.get("framework") or "", merged.get("options") or ()
            )
        frameworks = list(self.vocabulary.frameworks) if self.vocabulary else []
        if selection.framework and selection.framework not in frameworks:
            frameworks.append(selection.framework)

        merged["framework"] = selection.framework
        merged["options"] = selection.sorted_options()
        merged.update(selection_helpers(selection, frameworks))
        return merged

    # -- Rendering ---------------------------------------------------------

    def render(
        self,
        template_text: str,
        variables: dict[str, Any] | None = None,
        selection: SelectionContext | None = None,
        *,
        name: str | Path | None = None,
    ) -> str:
        """Render template text with the merged context.

        Args:
            template_text: Jinja2 source.
            variables: Per-call variables.
            selection: Selection context the helpers are bound to.
            name: Template name used in error messages.

        Raises:
            RenderError: On syntax errors or undefined bindings.
        """
        context = self.build_context(variables, selection)
        try:
            template = self.env.from_string(template_text)
            return template.render(context)
        except TemplateSyntaxError as exc:
            raise RenderError(exc.message or str(exc), name or exc.name, exc.lineno) from exc
        except TemplateError as exc:
            raise RenderError(str(exc), name) from exc

    def render_template(
        self,
        template_path: str,
        variables: dict[str, Any] | None = None,
        selection: SelectionContext | None = None,
    ) -> str:
        """Render a template by its path relative to ``template_dir``."""
        if self.env.loader is None:
            raise RenderError("renderer has no template directory", template_path)
        context = self.build_context(variables, selection)
        try:
            return self.env.get_template(template_path).render(context)
        except TemplateSyntaxError as exc:
            raise RenderError(exc.message or str(exc), template_path, exc.lineno) from exc
        except TemplateError as exc:
            raise RenderError(str(exc), template_path) from exc

    async def render_file(
        self,
        path: str | Path,
        variables: dict[str, Any] | None = None,
        selection: SelectionContext | None = None,
    ) -> str:
        """Read a template file and render its content."""
        source = Path(path)
        try:
            text = await asyncio.to_thread(source.read_text, encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(f"Cannot read template ({exc.strerror or exc})", source) from exc
        return self.render(text, variables, selection, name=source)


# ---------------------------------------------------------------------------
# Selection helpers
# ---------------------------------------------------------------------------


def _helper_name(framework: str) -> str:
    return "is_" + re.sub(r"\W", "_", framework)


def selection_helpers(
    selection: SelectionContext, frameworks: list[str]
) -> dict[str, Callable[..., bool]]:
    """Predicates exposed to templates, bound to *selection*."""

    def has_option(option: str) -> bool:
        return option in selection.options

    def has_any_option(*options: str) -> bool:
        return any(option in selection.options for option in options)

    def has_all_options(*options: str) -> bool:
        return all(option in selection.options for option in options)

    helpers: dict[str, Callable[..., bool]] = {
        "has_option": has_option,
        "has_any_option": has_any_option,
        "has_all_options": has_all_options,
        "is_framework": selection.is_framework,
    }
    for framework in frameworks:
        helpers[_helper_name(framework)] = partial(selection.is_framework, framework)
    return helpers


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
