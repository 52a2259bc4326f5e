"""treeforge -- scaffold projects from conditional template trees."""

__version__ = "0.1.0"
