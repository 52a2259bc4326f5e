"""treeforge materializer -- conditional template trees.

This package turns a directory of templates into a project tree for one
selection of framework and options.  Inclusion conditions live in the file
and directory names (``App.react.tsx.j2``, ``Home.vue-pug.vue.j2``,
``state.!vue/``); files ending in the render marker are rendered with Jinja2,
all others are copied verbatim.

Quick usage::

    from treeforge.config import SelectionContext, Vocabulary
    from treeforge.materializer import TreeMaterializer

    vocabulary = Vocabulary(frameworks=("vue", "react"), options=("pug",))
    materializer = TreeMaterializer(vocabulary)
    report = await materializer.materialize(
        "templates", "/tmp/my-app",
        SelectionContext.of("react", ["pug"]),
        {"name": "my-app"},
    )
"""

from treeforge.materializer.errors import (
    FilesystemError,
    ProjectNotFoundError,
    RenderError,
    TreeforgeError,
)
from treeforge.materializer.evaluator import (
    evaluate,
    is_included,
    should_include_directory,
    should_include_file,
)
from treeforge.materializer.grammar import (
    Condition,
    Conjunction,
    FrameworkEq,
    FrameworkOption,
    Inert,
    Negated,
    OptionIn,
    parse_directory_name,
    parse_file_name,
    parse_segment,
)
from treeforge.materializer.sanitizer import (
    clean_directory_name,
    clean_name,
    destination_name,
)
from treeforge.materializer.templates import TemplateRenderer
from treeforge.materializer.tree import MaterializeReport, TreeMaterializer

__all__ = [
    "Condition",
    "Conjunction",
    "FilesystemError",
    "FrameworkEq",
    "FrameworkOption",
    "Inert",
    "MaterializeReport",
    "Negated",
    "OptionIn",
    "ProjectNotFoundError",
    "RenderError",
    "TemplateRenderer",
    "TreeMaterializer",
    "TreeforgeError",
    "clean_directory_name",
    "clean_name",
    "destination_name",
    "evaluate",
    "is_included",
    "parse_directory_name",
    "parse_file_name",
    "parse_segment",
    "should_include_directory",
    "should_include_file",
]
