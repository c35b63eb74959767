"""Package dependency graph for a monorepo."""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from ..errors import DuplicateNameError, PackageNotFoundError
from ..git import GitRepo
from ..packages import PackageDescriptor, list_packages

logger = logging.getLogger(__name__)

ExpandFn = Callable[["GraphNode"], Optional[Iterable[str]]]


@dataclass(eq=False, slots=True)
class GraphNode:
    """A package in the graph together with its local dependency views."""

    name: str
    dir: str
    metadata: Dict[str, Any] = field(default_factory=dict, repr=False)
    # All direct local dependencies of the package
    all_local_dependencies: Dict[str, GraphNode] = field(default_factory=dict, repr=False)
    # Direct local dependencies that ship with the published package
    published_local_dependencies: Dict[str, GraphNode] = field(default_factory=dict, repr=False)
    local_dependencies: Dict[str, GraphNode] = field(default_factory=dict, repr=False)
    local_dev_dependencies: Dict[str, GraphNode] = field(default_factory=dict, repr=False)
    local_optional_dependencies: Dict[str, GraphNode] = field(default_factory=dict, repr=False)

    @property
    def role(self) -> Optional[str]:
        return (self.metadata.get("backstage") or {}).get("role")

    @property
    def bundled(self) -> bool:
        """Whether the package bundles all of its dependencies in its build output."""
        return bool(self.metadata.get("bundled"))

    @property
    def scripts(self) -> Dict[str, str]:
        return self.metadata.get("scripts") or {}

    @property
    def version(self) -> Optional[str]:
        return self.metadata.get("version")

    @property
    def private(self) -> bool:
        return bool(self.metadata.get("private"))


class PackageGraph(Dict[str, GraphNode]):
    """Mapping from package name to :class:`GraphNode`.

    Neighbor maps reference nodes of the same graph. Cycles are allowed.
    """

    @staticmethod
    def list_target_packages(root: Path) -> List[PackageDescriptor]:
        return list_packages(root)

    @classmethod
    def from_packages(cls, packages: Iterable[PackageDescriptor]) -> "PackageGraph":
        """Build a graph from package descriptors.

        Dependencies that do not name a package in ``packages`` are external
        and left out of the neighbor maps.
        """
        packages = list(packages)
        graph = cls()

        for pkg in packages:
            existing = graph.get(pkg.name)
            if existing is not None:
                raise DuplicateNameError(pkg.name, pkg.dir, existing.dir)

            graph[pkg.name] = GraphNode(
                name=pkg.name,
                dir=pkg.dir,
                metadata=pkg.metadata,
            )

        edge_count = 0
        for pkg in packages:
            node = graph[pkg.name]
            for dep_name in pkg.dependencies:
                dep = graph.get(dep_name)
                if dep is not None:
                    node.all_local_dependencies[dep_name] = dep
                    node.published_local_dependencies[dep_name] = dep
                    node.local_dependencies[dep_name] = dep
            for dep_name in pkg.dev_dependencies:
                dep = graph.get(dep_name)
                if dep is not None:
                    node.all_local_dependencies[dep_name] = dep
                    node.local_dev_dependencies[dep_name] = dep
            for dep_name in pkg.optional_dependencies:
                dep = graph.get(dep_name)
                if dep is not None:
                    node.all_local_dependencies[dep_name] = dep
                    node.published_local_dependencies[dep_name] = dep
                    node.local_optional_dependencies[dep_name] = dep
            edge_count += len(node.all_local_dependencies)

        logger.debug("Built package graph with %d packages and %d local edges", len(graph), edge_count)
        return graph

    def collect_package_names(
        self,
        starting_package_names: Iterable[str],
        collect_fn: ExpandFn,
    ) -> Set[str]:
        """Traverse the graph and collect a set of package names.

        The traversal starts at ``starting_package_names`` and continues
        through all names returned by ``collect_fn``, which is called once for
        each package added to the result.
        """
        targets: Set[str] = set()
        search_names = list(starting_package_names)

        while search_names:
            name = search_names.pop()
            if name in targets:
                continue

            node = self.get(name)
            if node is None:
                raise PackageNotFoundError(name)

            targets.add(name)

            collected = collect_fn(node)
            if collected is not None:
                search_names.extend(collected)

        return targets

    def _package_dir_prefixes(self, root: Optional[Path]) -> Dict[str, GraphNode]:
        prefixes: Dict[str, GraphNode] = {}
        for node in self.values():
            package_dir = os.path.relpath(node.dir, root) if root is not None else node.dir
            package_dir = posixpath.normpath(package_dir.replace(os.sep, "/"))
            # A package at the root owns every path
            prefixes["" if package_dir == "." else package_dir + "/"] = node
        return prefixes

    def changed_packages(
        self,
        changed_files: Iterable[str],
        root: Optional[Path] = None,
    ) -> List[GraphNode]:
        """Return the packages that own at least one of ``changed_files``.

        Parameters
        ----------
        changed_files:
            Paths relative to ``root`` using ``/`` separators
        root:
            Directory that package directories are made relative to. When
            omitted, package directories are taken to be relative already.

        Returns
        -------
        Changed packages ordered by package directory
        """
        files = sorted(changed_files)
        dir_map = self._package_dir_prefixes(root)
        package_dirs = sorted(dir_map)

        result: List[GraphNode] = []
        search_index = 0

        for package_dir in package_dirs:
            # Skip through changes that sort before this package dir
            while search_index < len(files) and files[search_index] < package_dir:
                search_index += 1

            if search_index < len(files) and files[search_index].startswith(package_dir):
                search_index += 1
                result.append(dir_map[package_dir])

                # The rest of the files under this package dir need no further checks
                while search_index < len(files) and files[search_index].startswith(package_dir):
                    search_index += 1

        logger.debug("%d changed files touch %d packages", len(files), len(result))
        return result

    def list_changed_packages(
        self,
        ref: str,
        repo: Optional[GitRepo] = None,
        root: Optional[Path] = None,
        include_untracked: bool = True,
    ) -> List[GraphNode]:
        """Return packages changed in the working tree since ``ref``.

        ``repo`` defaults to the git repository containing ``root``.
        """
        if repo is None:
            repo = GitRepo(root if root is not None else Path.cwd())
        changed_files = repo.list_changed_files(ref, include_untracked=include_untracked)
        return self.changed_packages(changed_files, root=repo.root)


def build(descriptors: Iterable[PackageDescriptor]) -> PackageGraph:
    """Build a :class:`PackageGraph` from ``descriptors``."""
    return PackageGraph.from_packages(descriptors)


def collect_names(
    graph: PackageGraph,
    start_names: Iterable[str],
    expand: ExpandFn,
) -> Set[str]:
    return graph.collect_package_names(start_names, expand)


def changed_packages(
    graph: PackageGraph,
    changed_files: Iterable[str],
    root: Optional[Path] = None,
) -> List[GraphNode]:
    return graph.changed_packages(changed_files, root=root)
