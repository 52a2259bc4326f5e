"""Output names for materialized template entries.

Condition segments are stripped from template names so that the produced
tree only carries clean names::

    Home.react-pug.tsx.j2  ->  Home.tsx
    App.vue.vue.j2         ->  App.vue
    state.!vue             ->  state
"""

from __future__ import annotations

from typing import Iterable

from treeforge.config import ExtensionRewrite, SelectionContext, Vocabulary

from .grammar import is_gating, parse_directory_name, parse_name_parts, split_name


def clean_name(raw_name: str, vocabulary: Vocabulary) -> str:
    """Remove condition segments and the render marker from a file name.

    The stem is always kept, inert segments keep their order, and the true
    extension is reattached unless it is the render marker.  Render marker
    segments are dropped wherever they appear, so applying the function
    twice gives the same result as applying it once.
    """
    parts = split_name(raw_name, vocabulary)
    conditions = parse_name_parts(parts, vocabulary)
    kept = [parts.stem]
    kept.extend(
        segment
        for segment, condition in zip(parts.segments, conditions)
        if not is_gating(condition) and segment != vocabulary.render_marker
    )
    if parts.extension and not parts.rendered:
        kept.append(parts.extension)
    return ".".join(kept)


def clean_directory_name(raw_name: str, vocabulary: Vocabulary) -> str:
    """Remove the trailing condition segment from a directory name, if any."""
    conditions = parse_directory_name(raw_name, vocabulary)
    if conditions and is_gating(conditions[0]):
        return raw_name.rsplit(".", 1)[0]
    return raw_name


def apply_extension_rewrites(
    name: str,
    selection: SelectionContext,
    rewrites: Iterable[ExtensionRewrite],
) -> str:
    """Apply the first rewrite declared for the active framework and *name*."""
    for rule in rewrites:
        if rule.framework == selection.framework and rule.source == name:
            return rule.target
    return name


def destination_name(raw_name: str, selection: SelectionContext, vocabulary: Vocabulary) -> str:
    """Final output file name: cleaned, then rewritten for the framework."""
    return apply_extension_rewrites(
        clean_name(raw_name, vocabulary), selection, vocabulary.rewrites
    )
