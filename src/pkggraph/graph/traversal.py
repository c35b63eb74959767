"""Ready-made expansion functions for :meth:`PackageGraph.collect_package_names`."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, DefaultDict, Dict, Iterable, Optional, Set

from .model import GraphNode, PackageGraph

DEPENDENCY_VIEWS: Dict[str, str] = {
    "all": "all_local_dependencies",
    "published": "published_local_dependencies",
    "dependencies": "local_dependencies",
    "dev": "local_dev_dependencies",
    "optional": "local_optional_dependencies",
}


def _view_attribute(view: str) -> str:
    try:
        return DEPENDENCY_VIEWS[view]
    except KeyError:
        raise ValueError(
            f"Unknown dependency view '{view}', expected one of: {', '.join(DEPENDENCY_VIEWS)}"
        ) from None


def dependencies_of(view: str = "all") -> Callable[[GraphNode], Optional[Iterable[str]]]:
    """Expand each package to its direct local dependencies in ``view``."""
    attribute = _view_attribute(view)

    def expand(node: GraphNode) -> Iterable[str]:
        return getattr(node, attribute).keys()

    return expand


def dependents_of(
    graph: PackageGraph, view: str = "all"
) -> Callable[[GraphNode], Optional[Iterable[str]]]:
    """Expand each package to the packages that directly depend on it.

    The reverse index is built once, when the expander is created.
    """
    attribute = _view_attribute(view)
    dependents: DefaultDict[str, Set[str]] = defaultdict(set)
    for node in graph.values():
        for dep_name in getattr(node, attribute):
            dependents[dep_name].add(node.name)

    def expand(node: GraphNode) -> Optional[Iterable[str]]:
        return dependents.get(node.name)

    return expand
