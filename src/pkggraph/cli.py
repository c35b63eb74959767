"""Command line utilities for inspecting a monorepo package graph."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List

from git import GitCommandError, GitCommandNotFound

from .config import DEFAULT_CONFIG, GraphConfig
from .errors import PackageGraphError
from .graph import DEPENDENCY_VIEWS, GraphNode, PackageGraph, dependencies_of, dependents_of
from .packages import list_packages


def _configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)


def _resolve_config(args: argparse.Namespace) -> GraphConfig:
    if args.config is not None:
        config = GraphConfig.load(args.config)
    else:
        config = GraphConfig.discover(args.root or Path.cwd())
    if args.root is not None:
        config.root = args.root
    return config


def _load_graph(config: GraphConfig) -> PackageGraph:
    return PackageGraph.from_packages(list_packages(config.resolved_root()))


def _relative_dir(node: GraphNode, root: Path) -> str:
    return os.path.relpath(node.dir, root).replace(os.sep, "/")


def _print_names(names: Iterable[str], as_json: bool) -> None:
    names = list(names)
    if as_json:
        print(json.dumps(names, indent=2))
        return
    for name in names:
        print(name)


def _list(args: argparse.Namespace, config: GraphConfig) -> None:
    graph = _load_graph(config)
    root = config.resolved_root()
    nodes = sorted(graph.values(), key=lambda node: node.name)

    if args.json:
        rows = [
            {"name": node.name, "dir": _relative_dir(node, root), "role": node.role}
            for node in nodes
        ]
        print(json.dumps(rows, indent=2))
        return

    if not nodes:
        print("No packages found.")
        return

    print(f"Packages ({len(nodes)}):")
    for node in nodes:
        print(f"  {node.name}")
        print(f"    Dir: {_relative_dir(node, root)}")
        if node.role:
            print(f"    Role: {node.role}")


def _deps(args: argparse.Namespace, config: GraphConfig) -> None:
    graph = _load_graph(config)
    if args.dependents:
        expand = dependents_of(graph, args.view)
    else:
        expand = dependencies_of(args.view)

    names = graph.collect_package_names(args.names, expand)
    _print_names(sorted(names), args.json)


def _changed(args: argparse.Namespace, config: GraphConfig) -> None:
    graph = _load_graph(config)

    if args.files:
        changed = graph.changed_packages(args.files, root=config.resolved_root())
    else:
        ref = args.since or config.default_ref
        changed = graph.list_changed_packages(
            ref,
            root=config.resolved_root(),
            include_untracked=config.include_untracked,
        )

    names: List[str] = [node.name for node in changed]
    if args.with_dependents and names:
        names = sorted(graph.collect_package_names(names, dependents_of(graph)))

    _print_names(names, args.json)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pkggraph", description=__doc__)
    parser.add_argument(
        "--root",
        type=Path,
        help="Monorepo root directory (defaults to the current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a JSON config file (defaults to <root>/.pkggraph.json when present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all packages in the monorepo")
    list_parser.add_argument("--json", action="store_true", help="Print JSON output")
    list_parser.set_defaults(func=_list)

    deps_parser = subparsers.add_parser(
        "deps", help="Collect the transitive local dependencies of packages"
    )
    deps_parser.add_argument("names", nargs="+", help="Package names to start from")
    deps_parser.add_argument(
        "--view",
        choices=sorted(DEPENDENCY_VIEWS),
        default="all",
        help="Which dependency relation to follow",
    )
    deps_parser.add_argument(
        "--dependents",
        action="store_true",
        help="Follow dependents instead of dependencies",
    )
    deps_parser.add_argument("--json", action="store_true", help="Print JSON output")
    deps_parser.set_defaults(func=_deps)

    changed_parser = subparsers.add_parser(
        "changed", help="List packages with changes since a git reference"
    )
    source_group = changed_parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--since",
        help=f"Git reference to compare against (default: {DEFAULT_CONFIG.default_ref})",
    )
    source_group.add_argument(
        "--files",
        nargs="+",
        help="Explicit changed file paths relative to the root, instead of asking git",
    )
    changed_parser.add_argument(
        "--with-dependents",
        action="store_true",
        help="Include every package that transitively depends on a changed package",
    )
    changed_parser.add_argument("--json", action="store_true", help="Print JSON output")
    changed_parser.set_defaults(func=_changed)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    try:
        config = _resolve_config(args)
        args.func(args, config)
    except (PackageGraphError, ValueError, OSError, GitCommandError, GitCommandNotFound) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
