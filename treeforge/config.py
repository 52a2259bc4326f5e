"""treeforge configuration.

Typed configuration for the materialization engine and the CLI.  All settings
use Pydantic v2 models so that naming vocabularies, selection contexts and
project manifests are validated at construction time and can be loaded from
YAML or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_PASSTHROUGH_TOKENS: tuple[str, ...] = (
    "js",
    "ts",
    "css",
    "html",
    "config",
    "spec",
    "test",
    "min",
)

DEFAULT_RENDER_MARKER = "j2"

DEFAULT_PROJECTS_DIR = Path(__file__).parent / "projects"

_TOKEN_RE = re.compile(r"^[^.!+\s]+$")


def _check_tokens(values: tuple[str, ...], kind: str) -> tuple[str, ...]:
    for token in values:
        if not _TOKEN_RE.match(token):
            raise ValueError(f"Invalid {kind} token: {token!r}")
    if len(set(values)) != len(values):
        raise ValueError(f"Duplicate {kind} tokens in {list(values)}")
    return values


# ---------------------------------------------------------------------------
# Naming vocabulary
# ---------------------------------------------------------------------------


class ExtensionRewrite(BaseModel):
    """Per-framework rename of one sanitized file name.

    Used for entry points whose idiomatic extension differs from the
    template's placeholder, e.g. ``main.ts`` becoming ``main.tsx`` for React.
    """

    model_config = ConfigDict(frozen=True)

    framework: str
    source: str
    target: str


class Vocabulary(BaseModel):
    """Tokens the condition grammar recognises in file and directory names.

    The vocabulary is supplied by the caller (usually a project manifest);
    nothing in the engine hardcodes frameworks or options.
    """

    model_config = ConfigDict(frozen=True)

    frameworks: tuple[str, ...] = ()
    options: tuple[str, ...] = ()
    passthrough_tokens: tuple[str, ...] = DEFAULT_PASSTHROUGH_TOKENS
    render_marker: str = DEFAULT_RENDER_MARKER
    component_extensions: dict[str, str] = Field(
        default_factory=lambda: {"vue": "vue", "svelte": "svelte"},
        description="Framework -> native component file extension",
    )
    rewrites: tuple[ExtensionRewrite, ...] = ()

    @field_validator("frameworks")
    @classmethod
    def _frameworks_are_tokens(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_tokens(value, "framework")

    @field_validator("options")
    @classmethod
    def _options_are_tokens(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_tokens(value, "option")

    @field_validator("render_marker")
    @classmethod
    def _marker_is_token(cls, value: str) -> str:
        value = value.lstrip(".")
        if not _TOKEN_RE.match(value):
            raise ValueError(f"Invalid render marker: {value!r}")
        return value

    @model_validator(mode="after")
    def _no_shadowed_tokens(self) -> "Vocabulary":
        inert = set(self.passthrough_tokens) | {self.render_marker}
        shadowed = sorted(inert & (set(self.frameworks) | set(self.options)))
        if shadowed:
            raise ValueError(
                f"Tokens {shadowed} are both conditions and passthrough tokens"
            )
        overlap = sorted(set(self.frameworks) & set(self.options))
        if overlap:
            raise ValueError(f"Tokens {overlap} are both frameworks and options")
        return self

    # -- Classification ----------------------------------------------------

    def is_framework(self, token: str) -> bool:
        return token in self.frameworks

    def is_option(self, token: str) -> bool:
        return token in self.options

    def is_passthrough(self, token: str) -> bool:
        """Return ``True`` for file-type markers that never act as conditions."""
        return token in self.passthrough_tokens or token == self.render_marker

    def component_extension(self, framework: str) -> str | None:
        """Native component extension of *framework*, if one is declared."""
        return self.component_extensions.get(framework)

    def collisions(self) -> list[str]:
        """Frameworks whose name is also their component file extension.

        These are the tokens resolved by position and suffix rather than by
        plain matching (``App.vue.vue.j2``).
        """
        return [
            fw for fw in self.frameworks
            if self.component_extensions.get(fw) == fw
        ]


# ---------------------------------------------------------------------------
# Selection context
# ---------------------------------------------------------------------------


class SelectionContext(BaseModel):
    """The chosen framework and active options for one materialization run."""

    model_config = ConfigDict(frozen=True)

    framework: str
    options: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, framework: str, options: Iterable[str] = ()) -> "SelectionContext":
        return cls(framework=framework, options=frozenset(options))

    def has_option(self, option: str) -> bool:
        return option in self.options

    def is_framework(self, framework: str) -> bool:
        return self.framework == framework

    def sorted_options(self) -> list[str]:
        return sorted(self.options)


# ---------------------------------------------------------------------------
# Project manifests
# ---------------------------------------------------------------------------


class ProjectManifest(BaseModel):
    """Description of one project type, loaded from ``project.yaml``."""

    name: str
    description: str = ""
    frameworks: list[str] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    default_framework: str | None = None
    passthrough_tokens: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PASSTHROUGH_TOKENS)
    )
    component_extensions: dict[str, str] = Field(
        default_factory=lambda: {"vue": "vue", "svelte": "svelte"}
    )
    rewrites: list[ExtensionRewrite] = Field(default_factory=list)
    templates: str = Field(default="templates", description="Template tree, relative to the manifest")

    @model_validator(mode="after")
    def _default_framework_known(self) -> "ProjectManifest":
        if self.default_framework and self.default_framework not in self.frameworks:
            raise ValueError(
                f"default_framework {self.default_framework!r} is not one of {self.frameworks}"
            )
        for rule in self.rewrites:
            if rule.framework not in self.frameworks:
                raise ValueError(
                    f"Rewrite {rule.source} -> {rule.target} targets unknown framework {rule.framework!r}"
                )
        return self

    def vocabulary(self, render_marker: str = DEFAULT_RENDER_MARKER) -> Vocabulary:
        """Build the naming vocabulary for this project's template tree."""
        return Vocabulary(
            frameworks=tuple(self.frameworks),
            options=tuple(self.options),
            passthrough_tokens=tuple(self.passthrough_tokens),
            render_marker=render_marker,
            component_extensions={
                fw: ext for fw, ext in self.component_extensions.items()
                if fw in self.frameworks
            },
            rewrites=tuple(self.rewrites),
        )

    @classmethod
    def load(cls, path: Path) -> "ProjectManifest":
        """Load a manifest from a YAML file.

        A missing ``name`` defaults to the name of the directory holding the
        manifest.
        """
        path = Path(path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Project manifest must be a mapping: {path}")
        raw.setdefault("name", path.parent.name)
        return cls.model_validate(raw)


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings for the CLI and project builders."""

    projects_dir: Path = Field(default=DEFAULT_PROJECTS_DIR)
    running_path: Path = Field(default_factory=Path.cwd)
    render_marker: str = Field(default=DEFAULT_RENDER_MARKER)
    force: bool = Field(default=False, description="Overwrite existing targets without asking")

    def resolve(self, path: str | Path) -> Path:
        """Resolve *path* against :attr:`running_path` unless it is absolute."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return (self.running_path / candidate).resolve()

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            TREEFORGE_PROJECTS_DIR, TREEFORGE_RENDER_MARKER, TREEFORGE_FORCE,
            INIT_CWD.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("TREEFORGE_PROJECTS_DIR"):
            kwargs["projects_dir"] = Path(os.environ["TREEFORGE_PROJECTS_DIR"])
        if os.environ.get("TREEFORGE_RENDER_MARKER"):
            kwargs["render_marker"] = os.environ["TREEFORGE_RENDER_MARKER"]
        if os.environ.get("TREEFORGE_FORCE"):
            kwargs["force"] = _env_flag(os.environ["TREEFORGE_FORCE"])
        if os.environ.get("INIT_CWD"):
            kwargs["running_path"] = Path(os.environ["INIT_CWD"])
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
