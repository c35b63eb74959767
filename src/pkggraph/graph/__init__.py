"""Package graph construction and operations."""

from .model import (
    GraphNode,
    PackageGraph,
    build,
    changed_packages,
    collect_names,
)
from .traversal import DEPENDENCY_VIEWS, dependencies_of, dependents_of

__all__ = [
    "GraphNode",
    "PackageGraph",
    "build",
    "changed_packages",
    "collect_names",
    "DEPENDENCY_VIEWS",
    "dependencies_of",
    "dependents_of",
]
