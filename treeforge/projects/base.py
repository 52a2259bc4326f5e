"""Project builder: from prompts to a materialized project directory."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from treeforge.config import ProjectManifest, SelectionContext, Settings
from treeforge.materializer.templates import TemplateRenderer
from treeforge.materializer.tree import MaterializeReport, TreeMaterializer
from treeforge.prompts import Prompter
from treeforge.utils import recreate_dir, to_package_name


@dataclass
class BuildResult:
    """Outcome of :meth:`Project.build`."""

    path: Path
    selection: SelectionContext
    report: MaterializeReport


class Project:
    """One project type: a manifest plus the template tree next to it.

    Attributes:
        manifest: Frameworks, options and naming rules of the project type.
        root: Directory holding ``project.yaml``.
        settings: Runtime settings (running path, force flag, render marker).
        prompter: Source of interactive answers.
    """

    def __init__(
        self,
        manifest: ProjectManifest,
        root: str | Path,
        settings: Settings | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self.manifest = manifest
        self.root = Path(root)
        self.settings = settings or Settings()
        self.prompter = prompter or Prompter()
        self.vocabulary = manifest.vocabulary(self.settings.render_marker)

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def templates_dir(self) -> Path:
        return self.root / self.manifest.templates

    # -- Public API --------------------------------------------------------

    async def build(
        self,
        name: str,
        path: str | Path | None = None,
        framework: str | None = None,
        options: Iterable[str] | None = None,
        variables: dict[str, Any] | None = None,
    ) -> BuildResult:
        """Create a new project named *name* under *path*.

        Missing framework and options are asked for.  An existing target
        directory is replaced after confirmation (or directly with
        ``settings.force``); declining asks for another parent path.

        Raises:
            ValueError: On an empty package name or an unknown framework or
                option.
        """
        package_name = to_package_name(name)
        if not package_name:
            raise ValueError(f"Project name {name!r} is not a valid package name")

        parent = self.settings.resolve(path) if path else self.settings.running_path
        parent = self._check_path_conflicts(parent, package_name)

        if framework is None:
            framework = self.prompt_framework()
        if options is None:
            options = self.prompt_options()
        selection = self.validate_selection(framework, options)

        target = parent / package_name
        await asyncio.to_thread(recreate_dir, target)

        context = self.build_variables(package_name, parent, selection)
        context.update(variables or {})
        renderer = TemplateRenderer(
            self.templates_dir,
            base_context={"description": self.manifest.description},
            vocabulary=self.vocabulary,
        )
        materializer = TreeMaterializer(self.vocabulary, renderer)
        report = await materializer.materialize(self.templates_dir, target, selection, context)
        return BuildResult(path=target, selection=selection, report=report)

    def build_variables(
        self, package_name: str, parent: Path, selection: SelectionContext
    ) -> dict[str, Any]:
        """Variable context shared by every template of the project."""
        return {
            "type": self.name,
            "name": package_name,
            "package_name": package_name,
            "path": str(parent),
            "framework": selection.framework,
            "options": selection.sorted_options(),
        }

    def validate_selection(self, framework: str, options: Iterable[str]) -> SelectionContext:
        if framework not in self.manifest.frameworks:
            raise ValueError(
                f"Unknown framework {framework!r} for {self.name} "
                f"(expected one of {', '.join(self.manifest.frameworks)})"
            )
        options = list(options)
        unknown = [option for option in options if option not in self.manifest.options]
        if unknown:
            raise ValueError(
                f"Unknown option(s) {', '.join(unknown)} for {self.name} "
                f"(expected any of {', '.join(self.manifest.options)})"
            )
        return SelectionContext.of(framework, options)

    # -- Prompts -----------------------------------------------------------

    def prompt_framework(self) -> str:
        return self.prompter.select(
            "Select the framework for the project:",
            self.manifest.frameworks,
            default=self.manifest.default_framework,
        )

    def prompt_options(self) -> list[str]:
        return self.prompter.multiselect(
            "Select the options for the package:", self.manifest.options
        )

    def _check_path_conflicts(self, parent: Path, package_name: str) -> Path:
        while (parent / package_name).exists() and not self.settings.force:
            if self.prompter.confirm(
                f'Path "{parent / package_name}" already exists. Overwrite?', default=False
            ):
                break
            answer = self.prompter.text(
                "Enter a new path for the project:",
                validate=lambda value: None if value.strip() else "Path cannot be empty.",
            )
            parent = self.settings.resolve(answer.strip())
        return parent
