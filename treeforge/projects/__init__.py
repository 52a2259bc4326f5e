"""Project types bundled with (or pointed to by) treeforge.

Every sub-directory of a projects directory that holds a ``project.yaml``
is a project type; the directory name is its default type name.
"""

from __future__ import annotations

from pathlib import Path

from treeforge.config import ProjectManifest, Settings
from treeforge.materializer.errors import ProjectNotFoundError
from treeforge.projects.base import BuildResult, Project
from treeforge.prompts import Prompter

MANIFEST_NAME = "project.yaml"


def discover_projects(projects_dir: str | Path) -> dict[str, tuple[ProjectManifest, Path]]:
    """Return ``{type: (manifest, root)}`` for every project under *projects_dir*.

    Returns an empty mapping when the directory does not exist.
    """
    base = Path(projects_dir)
    if not base.is_dir():
        return {}
    found: dict[str, tuple[ProjectManifest, Path]] = {}
    for entry in sorted(base.iterdir()):
        manifest_path = entry / MANIFEST_NAME
        if entry.is_dir() and manifest_path.is_file():
            manifest = ProjectManifest.load(manifest_path)
            found[manifest.name] = (manifest, entry)
    return found


def load_project(
    name: str,
    settings: Settings,
    prompter: Prompter | None = None,
) -> Project:
    """Instantiate the project type called *name*.

    Raises:
        ProjectNotFoundError: If no such project type exists.
    """
    projects = discover_projects(settings.projects_dir)
    if name not in projects:
        raise ProjectNotFoundError(name, sorted(projects))
    manifest, root = projects[name]
    return Project(manifest, root, settings=settings, prompter=prompter)


__all__ = [
    "BuildResult",
    "MANIFEST_NAME",
    "Project",
    "discover_projects",
    "load_project",
]
