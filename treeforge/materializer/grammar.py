"""Condition grammar for template file and directory names.

Template names carry inclusion conditions as extra dot segments::

    Home.react-pug.tsx.j2     framework "react" with option "pug"
    App.!vue.tsx.j2           any framework but "vue"
    Card.vue+tailwindcss.vue.j2
    state.!vue/               directory, one trailing condition

The first segment is always the literal stem, the last dot suffix is the true
extension.  Every other segment is parsed into a :data:`Condition`.  Parsing
is total: anything that is not recognised becomes :class:`Inert`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from treeforge.config import Vocabulary


# ---------------------------------------------------------------------------
# Condition variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Negated:
    """``!token``: the token must be neither the framework nor an active option."""

    token: str


@dataclass(frozen=True)
class Conjunction:
    """``a+b``: every token must be the framework or an active option."""

    tokens: tuple[str, ...]


@dataclass(frozen=True)
class FrameworkOption:
    """``framework-option``: that framework with that option active."""

    framework: str
    option: str


@dataclass(frozen=True)
class FrameworkEq:
    token: str


@dataclass(frozen=True)
class OptionIn:
    token: str


@dataclass(frozen=True)
class Inert:
    """A literal part of the name; never excludes."""

    token: str


Condition = Union[Negated, Conjunction, FrameworkOption, FrameworkEq, OptionIn, Inert]

GATING_CONDITIONS = (Negated, Conjunction, FrameworkOption, FrameworkEq, OptionIn)


def is_gating(condition: Condition) -> bool:
    """Return ``True`` for conditions that can exclude an entry."""
    return isinstance(condition, GATING_CONDITIONS)


# ---------------------------------------------------------------------------
# Name splitting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NameParts:
    """A file name split into stem, middle segments and true extension.

    Leading dots belong to the stem, so ``.env.j2`` has stem ``.env``.
    """

    stem: str
    segments: tuple[str, ...]
    extension: str
    rendered: bool

    @property
    def native_extension(self) -> str:
        """Extension of the produced file (the segment before the render marker)."""
        if self.rendered:
            return self.segments[-1] if self.segments else ""
        return self.extension


def split_name(name: str, vocabulary: Vocabulary) -> NameParts:
    lead = len(name) - len(name.lstrip("."))
    prefix, body = name[:lead], name[lead:]
    parts = body.split(".")
    if len(parts) == 1:
        return NameParts(stem=prefix + parts[0], segments=(), extension="", rendered=False)
    extension = parts[-1]
    return NameParts(
        stem=prefix + parts[0],
        segments=tuple(parts[1:-1]),
        extension=extension,
        rendered=extension == vocabulary.render_marker,
    )


# ---------------------------------------------------------------------------
# Segment parsing
# ---------------------------------------------------------------------------


def _split_framework_option(segment: str, vocabulary: Vocabulary) -> FrameworkOption | None:
    start = segment.find("-")
    while start != -1:
        left, right = segment[:start], segment[start + 1:]
        if vocabulary.is_framework(left) and vocabulary.is_option(right):
            return FrameworkOption(framework=left, option=right)
        start = segment.find("-", start + 1)
    return None


def parse_segment(segment: str, vocabulary: Vocabulary) -> Condition:
    """Parse one name segment into a condition.

    Priority: passthrough token, ``!``, ``+``, ``framework-option``,
    framework, option, and finally :class:`Inert`.  Conjunction tokens are
    kept as written and resolved at evaluation time.
    """
    if vocabulary.is_passthrough(segment):
        return Inert(segment)
    if segment.startswith("!"):
        return Negated(segment[1:])
    if "+" in segment:
        return Conjunction(tuple(segment.split("+")))
    if "-" in segment:
        pair = _split_framework_option(segment, vocabulary)
        if pair is not None:
            return pair
    if vocabulary.is_framework(segment):
        return FrameworkEq(segment)
    if vocabulary.is_option(segment):
        return OptionIn(segment)
    return Inert(segment)


def _is_component_marker(parts: NameParts, index: int, vocabulary: Vocabulary) -> bool:
    # App.vue.vue.j2: the trailing "vue" names the file type, not a condition.
    if not parts.rendered or index != len(parts.segments) - 1:
        return False
    token = parts.segments[index]
    return vocabulary.is_framework(token) and vocabulary.component_extension(token) == token


def parse_name_parts(parts: NameParts, vocabulary: Vocabulary) -> list[Condition]:
    conditions: list[Condition] = []
    for index, segment in enumerate(parts.segments):
        if _is_component_marker(parts, index, vocabulary):
            conditions.append(Inert(segment))
        else:
            conditions.append(parse_segment(segment, vocabulary))
    return conditions


def parse_file_name(name: str, vocabulary: Vocabulary) -> list[Condition]:
    """Parse every non-stem, non-extension segment of a file name."""
    return parse_name_parts(split_name(name, vocabulary), vocabulary)


def parse_directory_name(name: str, vocabulary: Vocabulary) -> list[Condition]:
    """Parse a directory name of the form ``name.condition``.

    Only the final segment is interpreted; names without a dot carry no
    condition.
    """
    body = name.lstrip(".")
    if "." not in body:
        return []
    return [parse_segment(body.rsplit(".", 1)[1], vocabulary)]
