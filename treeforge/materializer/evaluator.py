"""Inclusion decisions for parsed name conditions."""

from __future__ import annotations

from typing import Iterable

from treeforge.config import SelectionContext, Vocabulary

from .grammar import (
    Condition,
    Conjunction,
    FrameworkEq,
    FrameworkOption,
    Inert,
    Negated,
    OptionIn,
    parse_directory_name,
    parse_file_name,
)


def _token_selected(token: str, selection: SelectionContext) -> bool:
    return token in selection.options or selection.framework == token


def evaluate(condition: Condition, selection: SelectionContext) -> bool:
    """Return whether a single condition is satisfied by *selection*."""
    if isinstance(condition, Inert):
        return True
    if isinstance(condition, Negated):
        return not _token_selected(condition.token, selection)
    if isinstance(condition, Conjunction):
        return all(_token_selected(token, selection) for token in condition.tokens)
    if isinstance(condition, FrameworkOption):
        return (
            selection.framework == condition.framework
            and condition.option in selection.options
        )
    if isinstance(condition, FrameworkEq):
        return selection.framework == condition.token
    if isinstance(condition, OptionIn):
        return condition.token in selection.options
    raise TypeError(f"Unknown condition: {condition!r}")


def is_included(conditions: Iterable[Condition], selection: SelectionContext) -> bool:
    """AND of all conditions, stopping at the first failure.

    An empty condition list is always included.
    """
    return all(evaluate(condition, selection) for condition in conditions)


def should_include_file(name: str, selection: SelectionContext, vocabulary: Vocabulary) -> bool:
    return is_included(parse_file_name(name, vocabulary), selection)


def should_include_directory(name: str, selection: SelectionContext, vocabulary: Vocabulary) -> bool:
    return is_included(parse_directory_name(name, vocabulary), selection)
