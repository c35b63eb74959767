"""pkggraph package.

Dependency graph tooling for JavaScript monorepos: package discovery, graph
traversal, and change detection against git history.
"""

__all__ = [
    "config",
    "errors",
    "graph",
    "packages",
    "git",
    "cli",
]
