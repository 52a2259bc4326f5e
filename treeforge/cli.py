"""treeforge command line.

Usage::

    python -m treeforge electron my-app ./apps --framework react -o pug
    python -m treeforge                      # prompts for everything
    python -m treeforge --list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from treeforge import __version__
from treeforge.config import Settings
from treeforge.materializer.errors import TreeforgeError
from treeforge.projects import BuildResult, discover_projects, load_project
from treeforge.prompts import PromptAborted, Prompter
from treeforge.utils import (
    console,
    format_duration,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    to_package_name,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treeforge",
        description="Create a new project from a conditional template tree.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  treeforge electron my-app ./apps --framework vue\n"
            "  treeforge electron my-app . -f react -o pug -o tailwindcss\n"
            "  treeforge --list\n"
        ),
    )
    parser.add_argument("type", nargs="?", help="Type of project")
    parser.add_argument("name", nargs="?", help="Name of the project")
    parser.add_argument("path", nargs="?", help="Path where to create the project")
    parser.add_argument("--framework", "-f", default=None, help="Framework to use")
    parser.add_argument(
        "--option", "-o",
        dest="options",
        action="append",
        default=None,
        help="Enable an option (repeatable)",
    )
    parser.add_argument("--no-options", action="store_true", help="Enable no option, skip the prompt")
    parser.add_argument("--projects-dir", default=None, help="Directory holding project types")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing project directory")
    parser.add_argument("--list", action="store_true", help="List available project types and exit")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    return parser


def _validate_name(value: str) -> str | None:
    if to_package_name(value):
        return None
    return "Project name must be a valid package name."


async def run(args: argparse.Namespace, settings: Settings, prompter: Prompter) -> BuildResult:
    """Resolve missing arguments through *prompter* and build the project."""
    project_type = args.type
    if not project_type:
        available = sorted(discover_projects(settings.projects_dir))
        project_type = prompter.select("Select the type of project to create:", available)

    project = load_project(project_type, settings, prompter)
    print_info(f"Creating a new {project.name} project")

    name = args.name or prompter.text("Name of the project:", validate=_validate_name)
    path = args.path or prompter.text(
        "Path where to create the project:", default=str(settings.running_path)
    )
    options = [] if args.no_options else args.options
    return await project.build(name, path, framework=args.framework, options=options)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m treeforge``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env(
        projects_dir=Path(args.projects_dir) if args.projects_dir else None,
        force=True if args.force else None,
    )

    if args.list:
        projects = discover_projects(settings.projects_dir)
        if not projects:
            print_error(f"No project types found in {settings.projects_dir}")
            sys.exit(1)
        print_summary_table(
            {name: manifest.description for name, (manifest, _) in projects.items()},
            title="Project types",
        )
        return

    started = time.monotonic()
    try:
        result = asyncio.run(run(args, settings, Prompter()))
    except (TreeforgeError, ValueError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except (PromptAborted, KeyboardInterrupt):
        print_error("\nCancelled")
        sys.exit(1)

    summary = {
        "Project": str(result.path),
        "Framework": result.selection.framework,
        "Options": ", ".join(result.selection.sorted_options()) or "-",
        **result.report.summary(),
        "Duration": format_duration(time.monotonic() - started),
    }
    console.print()
    print_summary_table(summary, title="Project created")
    print_success(f"Project created in {result.path}")


if __name__ == "__main__":
    main()
